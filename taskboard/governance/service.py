"""
Store-backed entry points for the governance engine.

Each call takes one snapshot of the board (registry plus the story's tasks)
and hands it to the pure policy and gate code.
"""

from collections.abc import Collection
from pathlib import Path
from typing import Optional

from taskboard.governance.gates import run_gate_pipeline
from taskboard.governance.policy import AssignmentResult, validate_assignment
from taskboard.governance.registry import AgentRegistryView
from taskboard.governance.report import ValidationReport
from taskboard.store.tasks import list_tasks


def check_assignment(
    board_dir: Path,
    story_code: str,
    assignee: Optional[str],
    known_roles: Collection[str] = frozenset(),
) -> AssignmentResult:
    """Validate a proposed assignee against the board as it is now.

    Raises:
        StoryNotFound: if the story doesn't exist
    """
    registry = AgentRegistryView.load(board_dir)
    return validate_assignment(registry, story_code, assignee, known_roles)


def validate_story(
    board_dir: Path,
    story_code: str,
    *,
    strict: bool = False,
    expect_managed: bool = False,
    known_roles: Collection[str] = frozenset(),
) -> ValidationReport:
    """Run the gate pipeline for one story.

    Raises:
        StoryNotFound: if the story doesn't exist
    """
    registry = AgentRegistryView.load(board_dir)
    registry.require_story(story_code)
    tasks = list_tasks(board_dir, story_code)
    return run_gate_pipeline(
        registry,
        tasks,
        story_code,
        strict=strict,
        expect_managed=expect_managed,
        known_roles=known_roles,
    )
