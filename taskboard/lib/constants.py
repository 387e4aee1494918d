"""Shared constants for the board."""

import re

FEATURE_CODE_PATTERN = re.compile(r'^[A-Z][A-Z0-9]{1,9}$')
STORY_CODE_PATTERN = re.compile(r'^(?P<feature>[A-Z][A-Z0-9]{1,9})-(?P<num>\d{3,})$')
TASK_ID_PATTERN = re.compile(r'^TASK-\d{4,}$')

# Lowercase alphanumeric tokens joined by single hyphens (roles, agent names)
TOKEN_PATTERN = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')

STORY_STATUSES = (
    "draft",
    "planned",
    "in_progress",
    "review",
    "completed",
    "cancelled",
    "archived",
)

TASK_STATUSES = (
    "pending",
    "in_progress",
    "blocked",
    "completed",
    "cancelled",
)

PRIORITIES = ("P0", "P1", "P2", "P3")
DEFAULT_PRIORITY = "P2"

DEFAULT_BOARD_DIRNAME = ".board"
BOARD_DIR_ENV = "BOARD_DIR"
