"""
Mini-retrospective storage.

Retrospectives are stored as <board_dir>/retros/RETRO-xxxx.json and linked
from the task via retrospective_id.
"""

import logging
from dataclasses import asdict
from pathlib import Path

from taskboard.store.models import Retrospective
from taskboard.store.records import iter_records, next_sequential_id, now_iso, write_record
from taskboard.store.tasks import require_task, update_task

logger = logging.getLogger(__name__)


def get_retros_dir(board_dir: Path) -> Path:
    return board_dir / "retros"


def create_retro(board_dir: Path, task_id: str, content: str) -> Retrospective:
    """Record a retrospective and attach it to its task.

    A task has at most one current retrospective; adding another replaces
    the link but keeps the older record on disk.

    Raises:
        TaskNotFound: if the task doesn't exist
        ValueError: if content is blank
    """
    require_task(board_dir, task_id)
    if not content.strip():
        raise ValueError("Retrospective content cannot be empty")

    retros_dir = get_retros_dir(board_dir)
    retro = Retrospective(
        id=next_sequential_id(retros_dir, "RETRO"),
        task_id=task_id,
        content=content.strip(),
        created=now_iso(),
    )
    write_record(retros_dir / f"{retro.id}.json", asdict(retro), "retro")
    update_task(board_dir, task_id, {"retrospective_id": retro.id})

    logger.info(f"Attached {retro.id} to {task_id}")
    return retro


def list_retros(board_dir: Path, task_id: str | None = None) -> list[Retrospective]:
    retros = [Retrospective(**data) for data in iter_records(get_retros_dir(board_dir), "RETRO-*.json", "retro")]
    if task_id:
        retros = [r for r in retros if r.task_id == task_id]
    return retros
