"""
Role vocabulary configuration.

Loads roles.yaml to decide which bare strings count as generic job-function
roles. A generic role is a legal agent role but never a legal assignee on a
story with managed agents.

Example roles.yaml:

    roles:
      - data-engineer
      - sre
    replace_defaults: false

If no config file exists, the defaults below are used.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .constants import TOKEN_PATTERN

logger = logging.getLogger(__name__)

ROLES_FILENAME = "roles.yaml"

DEFAULT_ROLES = (
    "backend-dev",
    "frontend-dev",
    "qa-engineer",
    "cli-dev",
    "devops",
    "architect",
    "tech-writer",
)

DEFAULT_ROLES_YAML = """\
# Generic roles. Tasks on stories with agent definitions may not be assigned
# to these directly; register a story-specific agent instead.
roles: []
replace_defaults: false
"""


@dataclass
class RoleVocabulary:
    """Known generic roles from roles.yaml."""
    roles: frozenset[str] = field(default_factory=lambda: frozenset(DEFAULT_ROLES))

    def __contains__(self, value: str) -> bool:
        return value in self.roles


def load_role_vocabulary(board_dir: Optional[Path]) -> RoleVocabulary:
    """Load roles.yaml and return RoleVocabulary.

    If board_dir is None or the file doesn't exist, returns defaults.
    """
    if board_dir is None:
        return RoleVocabulary()

    config_path = board_dir / ROLES_FILENAME
    if not config_path.exists():
        return RoleVocabulary()

    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Failed to parse {config_path}: {e}")
        return RoleVocabulary()

    if not isinstance(data, dict):
        logger.warning(f"Ignoring {config_path}: expected a mapping at top level")
        return RoleVocabulary()

    extra = data.get("roles") or []
    if not isinstance(extra, list):
        logger.warning(f"Ignoring 'roles' in {config_path}: expected a list")
        extra = []

    roles = set() if data.get("replace_defaults") else set(DEFAULT_ROLES)
    for role in extra:
        role = str(role).strip()
        if TOKEN_PATTERN.match(role):
            roles.add(role)
        else:
            logger.warning(f"Skipping invalid role '{role}' in {config_path}")

    return RoleVocabulary(roles=frozenset(roles))


def write_default_roles(board_dir: Path) -> Path:
    board_dir.mkdir(parents=True, exist_ok=True)
    path = board_dir / ROLES_FILENAME
    path.write_text(DEFAULT_ROLES_YAML)
    return path
