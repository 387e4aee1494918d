"""
Agent definition storage.

Definitions are stored per scope:
  <board_dir>/agents/_global/<name>.json
  <board_dir>/agents/<STORY-CODE>/<name>.json

There is no update path. A definition never changes once written, because
tasks refer to it by name.
"""

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from taskboard.governance.identifiers import Versioned, classify, is_valid_token
from taskboard.store.models import AgentDefinition
from taskboard.store.records import DuplicateRecord, iter_records, now_iso, write_record
from taskboard.store.stories import require_story

logger = logging.getLogger(__name__)

GLOBAL_SCOPE_DIR = "_global"


def get_agents_dir(board_dir: Path) -> Path:
    return board_dir / "agents"


def _scope_dir(board_dir: Path, scope: Optional[str]) -> Path:
    return get_agents_dir(board_dir) / (scope or GLOBAL_SCOPE_DIR)


def check_agent_name(role: str, name: str) -> None:
    """Check role/name syntax for a new definition.

    Raises:
        ValueError: describing the first problem found
    """
    if not is_valid_token(role):
        raise ValueError(f"Invalid role '{role}'. Use lowercase letters, digits and single hyphens (e.g., backend-dev)")
    if not is_valid_token(name):
        raise ValueError(f"Invalid agent name '{name}'. Use lowercase letters, digits and single hyphens")
    if not name.startswith(f"{role}-"):
        raise ValueError(f"Agent name '{name}' must start with its role followed by a hyphen (e.g., {role}-notify-001)")
    if isinstance(classify(name), Versioned):
        raise ValueError(
            f"Agent name '{name}' already ends in a version suffix. Register the base name; versions are added at assignment"
        )


def _name_taken(board_dir: Path, name: str, scope: Optional[str]) -> Optional[str]:
    """Return a description of the clashing scope, or None if name is free."""
    agents_dir = get_agents_dir(board_dir)
    if scope is None:
        # A global name is reachable from every story
        if agents_dir.exists():
            for scope_dir in agents_dir.iterdir():
                if scope_dir.is_dir() and (scope_dir / f"{name}.json").exists():
                    return "global scope" if scope_dir.name == GLOBAL_SCOPE_DIR else f"story {scope_dir.name}"
        return None

    if (_scope_dir(board_dir, scope) / f"{name}.json").exists():
        return f"story {scope}"
    if (_scope_dir(board_dir, None) / f"{name}.json").exists():
        return "global scope"
    return None


def create_agent(
    board_dir: Path,
    role: str,
    name: str,
    scope: Optional[str] = None,
    persona: str = "",
    objective: str = "",
) -> AgentDefinition:
    """Register an agent definition.

    Raises:
        ValueError: if role or name is malformed
        StoryNotFound: if scope names a story that doesn't exist
        DuplicateRecord: if the name is already reachable from that scope
    """
    check_agent_name(role, name)
    if scope is not None:
        require_story(board_dir, scope)

    clash = _name_taken(board_dir, name, scope)
    if clash:
        raise DuplicateRecord(f"Agent name '{name}' is already registered in {clash}")

    definition = AgentDefinition(
        role=role,
        name=name,
        scope=scope,
        created=now_iso(),
        persona=persona,
        objective=objective,
    )
    write_record(_scope_dir(board_dir, scope) / f"{name}.json", asdict(definition), "agent")
    logger.info(f"Registered agent {name} ({scope or 'global'})")
    return definition


def list_agents(board_dir: Path, story_code: Optional[str] = None, include_global: bool = True) -> list[AgentDefinition]:
    """List agent definitions.

    With story_code, returns that story's definitions (plus globals if
    include_global). Without it, returns every definition on the board.
    """
    agents_dir = get_agents_dir(board_dir)
    if story_code is not None:
        dirs = [_scope_dir(board_dir, story_code)]
        if include_global:
            dirs.append(_scope_dir(board_dir, None))
    elif agents_dir.exists():
        dirs = sorted(d for d in agents_dir.iterdir() if d.is_dir())
    else:
        dirs = []

    definitions = []
    for directory in dirs:
        for data in iter_records(directory, "*.json", "agent"):
            expected_scope = None if directory.name == GLOBAL_SCOPE_DIR else directory.name
            if data["scope"] != expected_scope:
                logger.warning(
                    f"Skipping agent {data['name']}: scope {data['scope']!r} does not match directory {directory.name}"
                )
                continue
            definitions.append(AgentDefinition(**data))
    return definitions
