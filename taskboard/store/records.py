"""
Shared helpers for the JSON record store.

Each record is one JSON file. Writes are schema-validated first; reads of
corrupt files are logged and skipped by the list functions.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterator

from taskboard.lib.validate import ValidationError, validate_before_write, validate_file

logger = logging.getLogger(__name__)


class RecordNotFound(Exception):
    """A referenced record does not exist."""

    kind = "Record"

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"{self.kind} not found: {key}")


class FeatureNotFound(RecordNotFound):
    kind = "Feature"


class StoryNotFound(RecordNotFound):
    kind = "Story"


class TaskNotFound(RecordNotFound):
    kind = "Task"


class DuplicateRecord(Exception):
    """A record with the same key already exists in its scope."""


def now_iso() -> str:
    return datetime.now().isoformat()


def write_record(path: Path, data: dict, schema_name: str) -> None:
    """Validate and write a record, creating parent dirs as needed."""
    validate_before_write(data, schema_name, path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n")


def read_record(path: Path, schema_name: str) -> dict | None:
    """Read one record. Returns None (with a warning) if unreadable or invalid."""
    try:
        data = validate_file(path, schema_name)
    except (OSError, ValidationError) as e:
        logger.warning(f"Skipping unreadable {schema_name} record {path}: {e}")
        return None
    return data


def iter_records(directory: Path, pattern: str, schema_name: str) -> Iterator[dict]:
    """Yield valid records from directory matching a glob, in filename order."""
    if not directory.exists():
        return
    for path in sorted(directory.glob(pattern)):
        data = read_record(path, schema_name)
        if data is not None:
            yield data


def next_sequential_id(directory: Path, prefix: str, width: int = 4) -> str:
    """Generate the next PREFIX-NNNN id from the files already in directory."""
    nums = []
    if directory.exists():
        for f in directory.glob(f"{prefix}-*.json"):
            try:
                nums.append(int(f.stem.split("-", 1)[1]))
            except (ValueError, IndexError):
                logger.warning(f"Malformed {prefix} ID ignored: {f.stem}")

    return f"{prefix}-{(max(nums) if nums else 0) + 1:0{width}d}"
