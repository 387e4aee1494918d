"""
Record store for the board.

Features, stories, tasks, agent definitions and retrospectives are kept as
schema-validated JSON files under the board directory.
"""

from taskboard.store.models import AgentDefinition, Feature, Retrospective, Story, Task
from taskboard.store.records import (
    DuplicateRecord,
    FeatureNotFound,
    RecordNotFound,
    StoryNotFound,
    TaskNotFound,
)
from taskboard.store.features import create_feature, list_features, load_feature, require_feature
from taskboard.store.stories import create_story, list_stories, load_story, require_story, update_story
from taskboard.store.tasks import create_task, list_tasks, load_task, require_task, update_task
from taskboard.store.retros import create_retro, list_retros
from taskboard.store.agents import create_agent, list_agents

__all__ = [
    "AgentDefinition",
    "Feature",
    "Retrospective",
    "Story",
    "Task",
    "DuplicateRecord",
    "FeatureNotFound",
    "RecordNotFound",
    "StoryNotFound",
    "TaskNotFound",
    "create_feature",
    "list_features",
    "load_feature",
    "require_feature",
    "create_story",
    "list_stories",
    "load_story",
    "require_story",
    "update_story",
    "create_task",
    "list_tasks",
    "load_task",
    "require_task",
    "update_task",
    "create_retro",
    "list_retros",
    "create_agent",
    "list_agents",
]
