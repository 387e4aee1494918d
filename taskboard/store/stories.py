"""
Story CRUD operations.

Stories are stored as <board_dir>/stories/<FEATURE>-<NNN>.json. Story numbers
come from the owning feature's counter, so a deleted story's code is never
handed out again.
"""

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from taskboard.lib.constants import STORY_CODE_PATTERN, STORY_STATUSES
from taskboard.store.features import require_feature, save_feature
from taskboard.store.models import Story
from taskboard.store.records import (
    StoryNotFound,
    iter_records,
    now_iso,
    read_record,
    write_record,
)

logger = logging.getLogger(__name__)


def get_stories_dir(board_dir: Path) -> Path:
    return board_dir / "stories"


def format_story_code(feature_code: str, number: int) -> str:
    return f"{feature_code}-{number:03d}"


def create_story(board_dir: Path, feature_code: str, data: dict) -> Story:
    """Create a new draft story under a feature.

    Args:
        board_dir: Board directory
        feature_code: Owning feature code
        data: Dict with title and optional description, why, extensions

    Returns:
        Created Story object

    Raises:
        FeatureNotFound: if the feature doesn't exist
        ValidationError: if the story record fails its schema (e.g. an empty title)
    """
    feature = require_feature(board_dir, feature_code)
    feature.story_counter += 1
    code = format_story_code(feature.code, feature.story_counter)

    story = Story(
        code=code,
        feature_code=feature.code,
        title=data["title"],
        status="draft",
        created=now_iso(),
        description=data.get("description", ""),
        why=data.get("why", ""),
        extensions=data.get("extensions", {}),
    )

    write_record(get_stories_dir(board_dir) / f"{code}.json", asdict(story), "story")
    # Counter is bumped only after the story is on disk
    save_feature(board_dir, feature)

    logger.info(f"Created story {code}")
    return story


def load_story(board_dir: Path, code: str) -> Optional[Story]:
    """Load a story by code."""
    if not STORY_CODE_PATTERN.match(code or ""):
        return None
    path = get_stories_dir(board_dir) / f"{code}.json"
    if not path.exists():
        return None
    data = read_record(path, "story")
    return Story(**data) if data else None


def require_story(board_dir: Path, code: str) -> Story:
    """Load a story or raise StoryNotFound."""
    story = load_story(board_dir, code)
    if story is None:
        raise StoryNotFound(code)
    return story


def list_stories(board_dir: Path, feature_code: str | None = None) -> list[Story]:
    """List all stories, optionally for one feature."""
    stories = [Story(**data) for data in iter_records(get_stories_dir(board_dir), "*.json", "story")]
    if feature_code:
        stories = [s for s in stories if s.feature_code == feature_code]
    return stories


def list_story_codes(board_dir: Path) -> set[str]:
    directory = get_stories_dir(board_dir)
    if not directory.exists():
        return set()
    return {p.stem for p in directory.glob("*.json") if STORY_CODE_PATTERN.match(p.stem)}


def update_story(board_dir: Path, code: str, updates: dict) -> Story:
    """Update a story with new values.

    Raises:
        StoryNotFound: if the story doesn't exist
        ValueError: if a status update is not a known story status
    """
    story = require_story(board_dir, code)

    if "status" in updates and updates["status"] not in STORY_STATUSES:
        raise ValueError(f"Invalid story status: {updates['status']}. Valid values: {', '.join(STORY_STATUSES)}")

    story_dict = asdict(story)
    story_dict.update(updates)
    story_dict["code"] = code  # codes are immutable
    updated = Story(**story_dict)

    write_record(get_stories_dir(board_dir) / f"{code}.json", asdict(updated), "story")
    return updated
