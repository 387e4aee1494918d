"""
Read-only view over registered agent definitions.

The view is a snapshot: it is built once per request from the record store
(or from plain lists in tests) and never refreshes itself. Governance mode is
recomputed from it on every call rather than stored on the story.

Scoping policy: only definitions scoped to a story make that story managed.
Global definitions are still reachable from every story for name resolution
and role recognition, but they never switch a story into managed mode on
their own.
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from taskboard.store.models import AgentDefinition
from taskboard.store.records import StoryNotFound

logger = logging.getLogger(__name__)

FREE_FORM = "free-form"
MANAGED = "managed"


class AgentRegistryView:
    """Lookup of agent definitions by story scope, base name and role."""

    def __init__(self, definitions: Iterable[AgentDefinition], story_codes: Iterable[str]):
        self._story_codes = frozenset(story_codes)
        self._by_scope: dict[Optional[str], list[AgentDefinition]] = {}
        for definition in definitions:
            self._by_scope.setdefault(definition.scope, []).append(definition)

    @classmethod
    def load(cls, board_dir: Path) -> "AgentRegistryView":
        """Snapshot every story code and agent definition on the board."""
        from taskboard.store.agents import list_agents
        from taskboard.store.stories import list_story_codes

        return cls(list_agents(board_dir), list_story_codes(board_dir))

    def story_exists(self, story_code: str) -> bool:
        return story_code in self._story_codes

    def require_story(self, story_code: str) -> None:
        """Raises StoryNotFound for codes missing from the snapshot."""
        if not self.story_exists(story_code):
            raise StoryNotFound(story_code)

    def definitions_for(self, story_code: str) -> list[AgentDefinition]:
        """Definitions scoped to exactly this story."""
        return list(self._by_scope.get(story_code, []))

    def global_definitions(self) -> list[AgentDefinition]:
        return list(self._by_scope.get(None, []))

    def reachable(self, story_code: str) -> list[AgentDefinition]:
        """Story-scoped definitions first, then globals."""
        return self.definitions_for(story_code) + self.global_definitions()

    def has_any_definition(self, story_code: str) -> bool:
        return bool(self._by_scope.get(story_code))

    def mode(self, story_code: str) -> str:
        return MANAGED if self.has_any_definition(story_code) else FREE_FORM

    def find_base_name(self, story_code: str, base_name: str) -> list[AgentDefinition]:
        return [d for d in self.reachable(story_code) if d.name == base_name]

    def resolve_base_name(self, story_code: str, base_name: str) -> Optional[AgentDefinition]:
        """Return the single reachable definition with this name, else None."""
        matches = self.find_base_name(story_code, base_name)
        if len(matches) > 1:
            logger.warning(
                f"Agent name '{base_name}' is ambiguous for {story_code}: {len(matches)} definitions reachable"
            )
        return matches[0] if len(matches) == 1 else None

    def roles_for(self, story_code: str) -> set[str]:
        return {d.role for d in self.reachable(story_code)}
