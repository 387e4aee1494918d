"""
Task CRUD operations.

Tasks are stored as <board_dir>/tasks/TASK-xxxx.json. Assignee legality is
not checked here; callers run the assignment policy before writing.
"""

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from taskboard.lib.constants import DEFAULT_PRIORITY, PRIORITIES, TASK_ID_PATTERN, TASK_STATUSES
from taskboard.store.models import Task
from taskboard.store.records import (
    TaskNotFound,
    iter_records,
    next_sequential_id,
    now_iso,
    read_record,
    write_record,
)
from taskboard.store.stories import require_story

logger = logging.getLogger(__name__)


def get_tasks_dir(board_dir: Path) -> Path:
    return board_dir / "tasks"


def _check_fields(status: str, priority: str) -> None:
    if status not in TASK_STATUSES:
        raise ValueError(f"Invalid status: {status}. Valid values: {', '.join(TASK_STATUSES)}")
    if priority not in PRIORITIES:
        raise ValueError(f"Invalid priority: {priority}. Valid values: {', '.join(PRIORITIES)}")


def create_task(board_dir: Path, story_code: str, data: dict) -> Task:
    """Create a task in a story.

    Args:
        board_dir: Board directory
        story_code: Owning story code
        data: Dict with title and optional description, assignee, status, priority

    Raises:
        StoryNotFound: if the story doesn't exist
        ValueError: on an unknown status or priority
    """
    require_story(board_dir, story_code)

    status = data.get("status", "pending")
    priority = data.get("priority", DEFAULT_PRIORITY)
    _check_fields(status, priority)

    tasks_dir = get_tasks_dir(board_dir)
    now = now_iso()
    task = Task(
        id=next_sequential_id(tasks_dir, "TASK"),
        story_code=story_code,
        title=data["title"],
        status=status,
        priority=priority,
        created=now,
        updated=now,
        description=data.get("description", ""),
        assignee=data.get("assignee") or None,
    )

    write_record(tasks_dir / f"{task.id}.json", asdict(task), "task")
    logger.info(f"Created task {task.id} in {story_code}")
    return task


def load_task(board_dir: Path, task_id: str) -> Optional[Task]:
    """Load a task by ID."""
    if not TASK_ID_PATTERN.match(task_id or ""):
        return None
    path = get_tasks_dir(board_dir) / f"{task_id}.json"
    if not path.exists():
        return None
    data = read_record(path, "task")
    return Task(**data) if data else None


def require_task(board_dir: Path, task_id: str) -> Task:
    task = load_task(board_dir, task_id)
    if task is None:
        raise TaskNotFound(task_id)
    return task


def list_tasks(board_dir: Path, story_code: str | None = None) -> list[Task]:
    """List tasks in ID order, optionally for one story."""
    tasks = [Task(**data) for data in iter_records(get_tasks_dir(board_dir), "TASK-*.json", "task")]
    if story_code:
        tasks = [t for t in tasks if t.story_code == story_code]
    return tasks


def update_task(board_dir: Path, task_id: str, updates: dict) -> Task:
    """Update a task with new values.

    Raises:
        TaskNotFound: if the task doesn't exist
        ValueError: on an unknown status or priority
    """
    task = require_task(board_dir, task_id)

    task_dict = asdict(task)
    task_dict.update(updates)
    task_dict["id"] = task_id
    task_dict["updated"] = now_iso()
    _check_fields(task_dict["status"], task_dict["priority"])
    updated = Task(**task_dict)

    write_record(get_tasks_dir(board_dir) / f"{task_id}.json", asdict(updated), "task")
    return updated
