"""
Assignment policy: may this assignee be put on a task in this story?

Stories without story-scoped agent definitions are free-form and accept any
assignee. Stories with definitions are managed: the assignee must be a
versioned identifier (<base-name>-v<N>) whose base name resolves to exactly
one reachable definition.

Denials are returned as values, not raised, so callers can print the
remediation without string-matching exception messages.
"""

import logging
from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from taskboard.governance.identifiers import Unversioned, Versioned, classify
from taskboard.governance.registry import AgentRegistryView

logger = logging.getLogger(__name__)


class DenialKind(Enum):
    UNKNOWN_AGENT = "unknown-agent"
    GENERIC_ROLE_ASSIGNMENT = "generic-role-assignment"
    INVALID_AGENT_NAME_FORMAT = "invalid-agent-format"


@dataclass(frozen=True)
class Allowed:
    story_code: str
    assignee: Optional[str]
    reason: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Denied:
    story_code: str
    assignee: str
    kind: DenialKind
    detail: str
    remediation: str

    @property
    def ok(self) -> bool:
        return False

    def to_json_obj(self) -> dict:
        return {
            "story_code": self.story_code,
            "assignee": self.assignee,
            "kind": self.kind.value,
            "detail": self.detail,
            "remediation": self.remediation,
        }


AssignmentResult = Union[Allowed, Denied]


def _agent_create_hint(story_code: str, role: str = "<role>") -> str:
    return f"board agent create -r {role} -n {role}-{story_code.lower()} --story {story_code}"


def _deny_versioned(story_code: str, ident: Versioned, match_count: int) -> Denied:
    if match_count > 1:
        detail = (
            f"Agent '{ident.base_name}' is ambiguous for story {story_code}: "
            f"{match_count} reachable definitions share that name"
        )
    else:
        detail = f"No agent definition named '{ident.base_name}' is registered for story {story_code}"
    return Denied(
        story_code=story_code,
        assignee=ident.raw,
        kind=DenialKind.UNKNOWN_AGENT,
        detail=detail,
        remediation=(
            f"Register the agent first with '{_agent_create_hint(story_code)}', "
            f"or assign to an agent listed by 'board agent list --story {story_code}'."
        ),
    )


def _deny_unversioned(
    registry: AgentRegistryView,
    story_code: str,
    ident: Unversioned,
    known_roles: Collection[str],
) -> Denied:
    value = ident.raw
    # A recognised role gets the more actionable message
    if value in registry.roles_for(story_code) or value in known_roles:
        return Denied(
            story_code=story_code,
            assignee=value,
            kind=DenialKind.GENERIC_ROLE_ASSIGNMENT,
            detail=(
                f"Cannot assign task to generic role '{value}' in managed story {story_code}; "
                f"use a registered, versioned agent identifier (e.g., {value}-{story_code.lower()}-v1)"
            ),
            remediation=(
                f"Create a story-specific agent with '{_agent_create_hint(story_code, value)}', "
                f"then assign to '{value}-{story_code.lower()}-v1'."
            ),
        )

    return Denied(
        story_code=story_code,
        assignee=value,
        kind=DenialKind.INVALID_AGENT_NAME_FORMAT,
        detail=(
            f"Invalid agent name format '{value}' for managed story {story_code}. "
            f"Expected <agent-name>-v<N> (e.g., backend-dev-{story_code.lower()}-v1)"
        ),
        remediation=(
            f"Register an agent definition with '{_agent_create_hint(story_code)}' "
            f"and assign using its name plus a version suffix, like <agent-name>-v1."
        ),
    )


def validate_assignment(
    registry: AgentRegistryView,
    story_code: str,
    assignee: Optional[str],
    known_roles: Collection[str] = frozenset(),
) -> AssignmentResult:
    """Decide whether assignee may be assigned to a task in story_code.

    Args:
        registry: Snapshot of agent definitions and story codes
        story_code: Story the task belongs to
        assignee: Proposed assignee, or None/"" for unassigned
        known_roles: Generic role vocabulary, in addition to the roles of
            reachable definitions

    Returns:
        Allowed or Denied

    Raises:
        StoryNotFound: if story_code is not on the board
    """
    registry.require_story(story_code)

    if not assignee:
        return Allowed(story_code, None, "unassigned")

    if not registry.has_any_definition(story_code):
        return Allowed(story_code, assignee, "story is free-form")

    ident = classify(assignee)
    if isinstance(ident, Versioned):
        definition = registry.resolve_base_name(story_code, ident.base_name)
        if definition is not None:
            return Allowed(story_code, assignee, f"resolves to agent '{definition.name}'")
        result = _deny_versioned(story_code, ident, len(registry.find_base_name(story_code, ident.base_name)))
    else:
        result = _deny_unversioned(registry, story_code, ident, known_roles)

    logger.debug(f"Denied {assignee!r} on {story_code}: {result.kind.value}")
    return result
