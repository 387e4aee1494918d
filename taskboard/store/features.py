"""
Feature CRUD operations.

Features are stored as <board_dir>/features/<CODE>.json
"""

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from taskboard.lib.constants import FEATURE_CODE_PATTERN
from taskboard.store.models import Feature
from taskboard.store.records import (
    DuplicateRecord,
    FeatureNotFound,
    iter_records,
    now_iso,
    read_record,
    write_record,
)

logger = logging.getLogger(__name__)


def get_features_dir(board_dir: Path) -> Path:
    return board_dir / "features"


def create_feature(board_dir: Path, code: str, name: str, description: str = "") -> Feature:
    """Create a new feature.

    Raises:
        ValueError: if code is not a short uppercase token
        DuplicateRecord: if the code is taken
    """
    if not FEATURE_CODE_PATTERN.match(code):
        raise ValueError(
            f"Invalid feature code '{code}'. Use 2-10 uppercase letters/digits, starting with a letter (e.g., NOTIFY)"
        )

    path = get_features_dir(board_dir) / f"{code}.json"
    if path.exists():
        raise DuplicateRecord(f"Feature already exists: {code}")

    feature = Feature(code=code, name=name, description=description, created=now_iso())
    write_record(path, asdict(feature), "feature")
    logger.info(f"Created feature {code}")
    return feature


def load_feature(board_dir: Path, code: str) -> Optional[Feature]:
    """Load a feature by code."""
    path = get_features_dir(board_dir) / f"{code}.json"
    if not path.exists():
        return None
    data = read_record(path, "feature")
    return Feature(**data) if data else None


def require_feature(board_dir: Path, code: str) -> Feature:
    feature = load_feature(board_dir, code)
    if feature is None:
        raise FeatureNotFound(code)
    return feature


def list_features(board_dir: Path) -> list[Feature]:
    return [Feature(**data) for data in iter_records(get_features_dir(board_dir), "*.json", "feature")]


def save_feature(board_dir: Path, feature: Feature) -> None:
    write_record(get_features_dir(board_dir) / f"{feature.code}.json", asdict(feature), "feature")
