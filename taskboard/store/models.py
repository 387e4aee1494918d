"""
Data models for board records.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Feature:
    """A product area grouping stories under a short uppercase code."""
    code: str                                  # NOTIFY
    name: str
    created: str                               # ISO timestamp
    description: str = ""
    story_counter: int = 0                     # Last story number handed out


@dataclass
class Story:
    """A unit of work within a feature, containing tasks.

    Whether a story is governed by agent definitions is derived from the
    registry at read time and deliberately not stored here.
    """
    code: str                                  # NOTIFY-001
    feature_code: str
    title: str
    status: str                                # draft, planned, in_progress, ...
    created: str
    description: str = ""
    why: str = ""
    extensions: dict = field(default_factory=dict)


@dataclass
class Task:
    """An atomic, assignable piece of work within a story."""
    id: str                                    # TASK-0001
    story_code: str
    title: str
    status: str                                # pending, in_progress, blocked, completed, cancelled
    priority: str
    created: str
    updated: str
    description: str = ""
    assignee: Optional[str] = None
    retrospective_id: Optional[str] = None


@dataclass(frozen=True)
class AgentDefinition:
    """A registered worker identity: (role, base name, scope).

    scope is a story code, or None for a global definition.
    """
    role: str                                  # backend-dev
    name: str                                  # backend-dev-notify-001
    scope: Optional[str]
    created: str
    persona: str = ""
    objective: str = ""

    @property
    def is_global(self) -> bool:
        return self.scope is None


@dataclass
class Retrospective:
    """A mini-retrospective attached to a completed task."""
    id: str                                    # RETRO-0001
    task_id: str
    content: str
    created: str
