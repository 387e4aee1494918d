"""
board retro - Attach mini-retrospectives to tasks.
"""

from pathlib import Path

from taskboard.lib.config import BoardConfig
from taskboard.lib.validate import ValidationError
from taskboard.store.records import TaskNotFound
from taskboard.store.retros import create_retro, list_retros
from taskboard.store.tasks import list_tasks


def cmd_retro_add(args, board_dir: Path, config: BoardConfig) -> int:
    try:
        retro = create_retro(board_dir, args.task, args.content)
    except (TaskNotFound, ValueError, ValidationError) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Retrospective {retro.id} attached to {retro.task_id}")
    return 0


def cmd_retro_list(args, board_dir: Path, config: BoardConfig) -> int:
    retros = list_retros(board_dir)
    if args.story:
        story_tasks = {t.id for t in list_tasks(board_dir, args.story)}
        retros = [r for r in retros if r.task_id in story_tasks]

    if not retros:
        print("Retrospectives: none")
        return 0

    for r in retros:
        first_line = r.content.splitlines()[0]
        preview = first_line[:60] + "..." if len(first_line) > 60 else first_line
        print(f"  {r.id}  {r.task_id}  {preview}")
    return 0
