"""
Configuration loaders for the board.

Resolves the board directory and loads board.env settings.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from . import envparse
from .constants import BOARD_DIR_ENV, DEFAULT_BOARD_DIRNAME

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "board.env"
CONTEXT_FILENAME = "current_story"

DEFAULT_BOARD_ENV = """\
# Board configuration
BOARD_NAME="{name}"

# `board validate story` requires story-scoped agent definitions unless
# --allow-free-form is passed
REQUIRE_AGENT_DEFINITIONS=true

# Include the mini-retrospective gate by default
STRICT_VALIDATION=false

# Append denials and failed gates to METRICS_DIR/validation-failures.jsonl
LOG_VALIDATION_FAILURES=true
METRICS_DIR=metrics
"""


@dataclass
class BoardConfig:
    """Board-level configuration from board.env"""
    name: str
    board_dir: Path
    require_agent_definitions: bool = True
    strict_validation: bool = False
    log_validation_failures: bool = True
    metrics_dir: str = "metrics"  # Relative to board_dir

    @property
    def metrics_path(self) -> Path:
        return self.board_dir / self.metrics_dir


def resolve_board_dir(explicit: str | None = None) -> Path:
    """Pick the board directory: explicit flag, then $BOARD_DIR, then ./.board"""
    if explicit:
        return Path(explicit)
    from_env = os.environ.get(BOARD_DIR_ENV)
    if from_env:
        return Path(from_env)
    return Path.cwd() / DEFAULT_BOARD_DIRNAME


def _bool_setting(env: dict, key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    value = envparse.parse_bool(raw)
    if value is None:
        logger.warning(f"Unknown {key} '{raw}', using default '{str(default).lower()}'")
        return default
    return value


def load_board_config(board_dir: Path) -> BoardConfig:
    """Load board.env and return BoardConfig.

    A missing board.env yields defaults, so a board created by hand still works.

    Raises:
        ValueError: if board.env exists but is malformed
    """
    config_path = board_dir / CONFIG_FILENAME
    env = envparse.load_env(config_path) if config_path.exists() else {}

    metrics_dir = env.get("METRICS_DIR", "metrics") or "metrics"
    if Path(metrics_dir).is_absolute() or ".." in Path(metrics_dir).parts:
        logger.warning(f"METRICS_DIR '{metrics_dir}' must be relative to the board, using 'metrics'")
        metrics_dir = "metrics"

    return BoardConfig(
        name=env.get("BOARD_NAME", board_dir.resolve().parent.name),
        board_dir=board_dir,
        require_agent_definitions=_bool_setting(env, "REQUIRE_AGENT_DEFINITIONS", True),
        strict_validation=_bool_setting(env, "STRICT_VALIDATION", False),
        log_validation_failures=_bool_setting(env, "LOG_VALIDATION_FAILURES", True),
        metrics_dir=metrics_dir,
    )


def write_default_config(board_dir: Path, name: str) -> Path:
    """Write a fresh board.env. Overwrites an existing one.

    The text is parsed back before it is written, so a board name that
    load_board_config would reject never reaches disk.

    Raises:
        ValueError: if the name can't be stored in board.env
    """
    text = DEFAULT_BOARD_ENV.format(name=name)
    try:
        parsed = envparse.parse_env_text(text)
    except ValueError as e:
        raise ValueError(f"Invalid board name '{name}': {e}") from None
    if "\n" in name or parsed.get("BOARD_NAME") != name:
        raise ValueError(f"Invalid board name {name!r}: must be a single line")

    board_dir.mkdir(parents=True, exist_ok=True)
    config_path = board_dir / CONFIG_FILENAME
    config_path.write_text(text)
    return config_path


def get_current_story(board_dir: Path) -> str | None:
    """Get the current story code from context, or None if not set.

    Auto-clears stale context if the story no longer exists.
    """
    context_file = board_dir / CONTEXT_FILENAME
    if context_file.exists():
        code = context_file.read_text().strip()
        if code:
            if (board_dir / "stories" / f"{code}.json").exists():
                return code
            logger.info(f"Clearing stale story context '{code}'")
            context_file.unlink()
    return None


def set_current_story(board_dir: Path, story_code: str) -> None:
    """Set the current story context."""
    board_dir.mkdir(parents=True, exist_ok=True)
    (board_dir / CONTEXT_FILENAME).write_text(story_code + "\n")


def clear_current_story(board_dir: Path) -> None:
    """Clear the current story context."""
    context_file = board_dir / CONTEXT_FILENAME
    if context_file.exists():
        context_file.unlink()
