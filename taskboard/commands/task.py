"""
board task - Create, list, assign and move tasks.

Assignees are checked against the story's governance mode before anything
is written.
"""

from pathlib import Path

from taskboard.governance.failure_log import record_denial
from taskboard.governance.policy import Denied
from taskboard.governance.service import check_assignment
from taskboard.lib.config import BoardConfig
from taskboard.lib.fsm import InvalidTransition, TaskFSM
from taskboard.lib.roles import load_role_vocabulary
from taskboard.lib.validate import ValidationError
from taskboard.store.records import StoryNotFound, TaskNotFound
from taskboard.store.tasks import create_task, list_tasks, require_task, update_task


def print_denial(denied: Denied) -> None:
    print(f"ERROR: Validation Error: {denied.detail}")
    print(f"  Type:  {denied.kind.value}")
    print(f"  Story: {denied.story_code}")
    print()
    print("Remediation:")
    print(f"  {denied.remediation}")


def _check_assignee(board_dir: Path, config: BoardConfig, story_code: str, assignee: str | None) -> bool:
    """Run the assignment policy. Prints and logs a denial; returns True if allowed."""
    roles = load_role_vocabulary(board_dir).roles
    result = check_assignment(board_dir, story_code, assignee, roles)
    if isinstance(result, Denied):
        print_denial(result)
        if config.log_validation_failures:
            record_denial(config.metrics_path, result)
        return False
    return True


def cmd_task_create(args, board_dir: Path, config: BoardConfig) -> int:
    try:
        if not _check_assignee(board_dir, config, args.story, args.assignee):
            return 1
        task = create_task(board_dir, args.story, {
            "title": args.title,
            "description": args.description or "",
            "assignee": args.assignee,
            "status": args.status,
            "priority": args.priority,
        })
    except (StoryNotFound, ValueError, ValidationError) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Task created: {task.id}")
    print(f"  Story:    {task.story_code}")
    print(f"  Title:    {task.title}")
    print(f"  Status:   {task.status}")
    print(f"  Assignee: {task.assignee or '-'}")
    return 0


def cmd_task_list(args, board_dir: Path, config: BoardConfig) -> int:
    tasks = list_tasks(board_dir, args.story)
    if args.assignee:
        tasks = [t for t in tasks if t.assignee == args.assignee]

    if not tasks:
        print("Tasks: none")
        return 0

    print("Tasks")
    print("-" * 60)
    for t in tasks:
        title = t.title[:30] + "..." if len(t.title) > 30 else t.title
        print(f"  {t.id:<10} {t.story_code:<12} {t.status:<12} {t.assignee or '-':<28} {title}")
    print()
    print(f"{len(tasks)} task(s)")
    return 0


def cmd_task_assign(args, board_dir: Path, config: BoardConfig) -> int:
    """Reassign a task, or clear the assignee with an empty string."""
    try:
        task = require_task(board_dir, args.id)
        assignee = args.assignee or None
        if not _check_assignee(board_dir, config, task.story_code, assignee):
            return 1
        task = update_task(board_dir, task.id, {"assignee": assignee})
    except (TaskNotFound, StoryNotFound, ValidationError) as e:
        print(f"ERROR: {e}")
        return 1

    if task.assignee:
        print(f"{task.id} assigned to {task.assignee}")
    else:
        print(f"{task.id} unassigned")
    return 0


def cmd_task_status(args, board_dir: Path, config: BoardConfig) -> int:
    try:
        fsm = TaskFSM(board_dir, args.id)
        if fsm.state == args.status:
            print(f"{args.id} is already {args.status}")
            return 0
        previous = fsm.state
        fsm.move_to(args.status)
    except (TaskNotFound, InvalidTransition) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"{args.id}: {previous} -> {args.status}")
    if args.status == "completed":
        task = require_task(board_dir, args.id)
        if not task.retrospective_id:
            print(f"  Add a mini-retrospective: board retro add {task.id} -c \"Retrospective: ...\"")
    return 0
