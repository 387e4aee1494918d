#!/usr/bin/env python3
"""Board CLI entrypoint."""

import sys
import logging
import argparse
from pathlib import Path

from taskboard.lib.config import (
    load_board_config,
    resolve_board_dir,
    get_current_story,
    set_current_story,
    clear_current_story,
)
from taskboard.lib.constants import DEFAULT_PRIORITY, PRIORITIES, TASK_STATUSES
from taskboard.store.stories import load_story
from taskboard.commands import init as cmd_init_module
from taskboard.commands import feature as cmd_feature_module
from taskboard.commands import story as cmd_story_module
from taskboard.commands import agent as cmd_agent_module
from taskboard.commands import task as cmd_task_module
from taskboard.commands import retro as cmd_retro_module
from taskboard.commands import validate as cmd_validate_module


def get_board(args):
    """Resolve the board directory and load its config, or exit if there is no board."""
    board_dir = resolve_board_dir(args.board_dir)
    if not board_dir.is_dir():
        print(f"ERROR: No board found at {board_dir}. Run 'board init' first.")
        sys.exit(2)

    try:
        config = load_board_config(board_dir)
    except ValueError as e:
        print(f"ERROR: Invalid board configuration: {e}")
        sys.exit(2)

    return config, board_dir


def resolve_story_code(args, board_dir: Path, attr: str = 'code') -> str:
    """Resolve story code from args or current context."""
    code = getattr(args, attr, None)
    if code:
        return code

    current = get_current_story(board_dir)
    if current:
        return current

    print("ERROR: No story specified. Use 'board use <code>' to set current story.")
    sys.exit(2)


def cmd_init(args):
    board_dir = resolve_board_dir(args.board_dir)
    return cmd_init_module.cmd_init(args, board_dir)


def cmd_use(args):
    """Set, show, or clear the current story context."""
    config, board_dir = get_board(args)

    if args.clear:
        clear_current_story(board_dir)
        print("Cleared current story context.")
        return 0

    if not args.code:
        current = get_current_story(board_dir)
        if current:
            print(f"Current story: {current}")
        else:
            print("No current story set. Use 'board use <code>' to set one.")
        return 0

    if load_story(board_dir, args.code) is None:
        print(f"ERROR: Story '{args.code}' not found.")
        return 1

    set_current_story(board_dir, args.code)
    print(f"Now using story: {args.code}")
    return 0


def cmd_feature_create(args):
    config, board_dir = get_board(args)
    return cmd_feature_module.cmd_feature_create(args, board_dir, config)


def cmd_feature_list(args):
    config, board_dir = get_board(args)
    return cmd_feature_module.cmd_feature_list(args, board_dir, config)


def cmd_story_create(args):
    config, board_dir = get_board(args)
    return cmd_story_module.cmd_story_create(args, board_dir, config)


def cmd_story_list(args):
    config, board_dir = get_board(args)
    return cmd_story_module.cmd_story_list(args, board_dir, config)


def cmd_story_show(args):
    config, board_dir = get_board(args)
    args.code = resolve_story_code(args, board_dir)
    return cmd_story_module.cmd_story_show(args, board_dir, config)


def cmd_agent_create(args):
    config, board_dir = get_board(args)
    return cmd_agent_module.cmd_agent_create(args, board_dir, config)


def cmd_agent_list(args):
    config, board_dir = get_board(args)
    return cmd_agent_module.cmd_agent_list(args, board_dir, config)


def cmd_task_create(args):
    config, board_dir = get_board(args)
    args.story = resolve_story_code(args, board_dir, attr='story')
    return cmd_task_module.cmd_task_create(args, board_dir, config)


def cmd_task_list(args):
    config, board_dir = get_board(args)
    return cmd_task_module.cmd_task_list(args, board_dir, config)


def cmd_task_assign(args):
    config, board_dir = get_board(args)
    return cmd_task_module.cmd_task_assign(args, board_dir, config)


def cmd_task_status(args):
    config, board_dir = get_board(args)
    return cmd_task_module.cmd_task_status(args, board_dir, config)


def cmd_retro_add(args):
    config, board_dir = get_board(args)
    return cmd_retro_module.cmd_retro_add(args, board_dir, config)


def cmd_retro_list(args):
    config, board_dir = get_board(args)
    return cmd_retro_module.cmd_retro_list(args, board_dir, config)


def cmd_validate_story(args):
    config, board_dir = get_board(args)
    args.code = resolve_story_code(args, board_dir)
    return cmd_validate_module.cmd_validate_story(args, board_dir, config)


def cmd_watch(args):
    # Textual is only imported when the TUI is actually used
    from taskboard.commands import watch as cmd_watch_module

    config, board_dir = get_board(args)
    args.code = resolve_story_code(args, board_dir)
    return cmd_watch_module.cmd_watch(args, board_dir, config)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='board', description='Work-tracking board with assignment governance')
    parser.add_argument('--board-dir', '-b', help='Board directory (default: $BOARD_DIR or ./.board)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # board init
    p_init = subparsers.add_parser('init', help='Create a board')
    p_init.add_argument('--name', '-n', help='Board name (default: parent directory name)')
    p_init.add_argument('--force', action='store_true', help='Rewrite board.env and roles.yaml')
    p_init.set_defaults(func=cmd_init)

    # board use
    p_use = subparsers.add_parser('use', help='Set/show current story')
    p_use.add_argument('code', nargs='?', help='Story code to use')
    p_use.add_argument('--clear', action='store_true', help='Clear current story')
    p_use.set_defaults(func=cmd_use)

    # board feature
    p_feature = subparsers.add_parser('feature', help='Manage features')
    p_feature.set_defaults(func=cmd_feature_list)
    feature_sub = p_feature.add_subparsers(dest='feature_cmd')

    p_feature_create = feature_sub.add_parser('create', help='Create a feature')
    p_feature_create.add_argument('--code', '-c', required=True, help='Feature code (e.g., NOTIFY)')
    p_feature_create.add_argument('--name', '-n', required=True, help='Feature name')
    p_feature_create.add_argument('--description', '-d', help='Description')
    p_feature_create.set_defaults(func=cmd_feature_create)

    p_feature_list = feature_sub.add_parser('list', help='List features')
    p_feature_list.set_defaults(func=cmd_feature_list)

    # board story
    p_story = subparsers.add_parser('story', help='Manage stories')
    p_story.set_defaults(func=cmd_story_list, feature=None)
    story_sub = p_story.add_subparsers(dest='story_cmd')

    p_story_create = story_sub.add_parser('create', help='Create a story under a feature')
    p_story_create.add_argument('--feature', '-f', required=True, help='Feature code')
    p_story_create.add_argument('--title', '-t', required=True, help='Story title')
    p_story_create.add_argument('--description', '-d', help='Description')
    p_story_create.add_argument('--why', '-w', help='Why this story matters')
    p_story_create.set_defaults(func=cmd_story_create)

    p_story_list = story_sub.add_parser('list', help='List stories')
    p_story_list.add_argument('--feature', '-f', help='Only stories of this feature')
    p_story_list.set_defaults(func=cmd_story_list)

    p_story_show = story_sub.add_parser('show', help='Show story details')
    p_story_show.add_argument('code', nargs='?', help='Story code (uses current if not specified)')
    p_story_show.set_defaults(func=cmd_story_show)

    # board agent
    p_agent = subparsers.add_parser('agent', help='Manage agent definitions')
    p_agent.set_defaults(func=cmd_agent_list, story=None)
    agent_sub = p_agent.add_subparsers(dest='agent_cmd')

    p_agent_create = agent_sub.add_parser('create', help='Register an agent definition')
    p_agent_create.add_argument('--role', '-r', required=True, help='Role (e.g., backend-dev)')
    p_agent_create.add_argument('--name', '-n', required=True, help='Base name (e.g., backend-dev-notify-001)')
    p_agent_create.add_argument('--story', '-s', help='Story scope (global if omitted)')
    p_agent_create.add_argument('--persona', help='Persona text')
    p_agent_create.add_argument('--objective', help='Objective text')
    p_agent_create.set_defaults(func=cmd_agent_create)

    p_agent_list = agent_sub.add_parser('list', help='List agent definitions')
    p_agent_list.add_argument('--story', '-s', help='Only definitions scoped to this story')
    p_agent_list.set_defaults(func=cmd_agent_list)

    # board task
    p_task = subparsers.add_parser('task', help='Manage tasks')
    p_task.set_defaults(func=cmd_task_list, story=None, assignee=None)
    task_sub = p_task.add_subparsers(dest='task_cmd')

    p_task_create = task_sub.add_parser('create', help='Create a task')
    p_task_create.add_argument('--story', '-s', help='Story code (uses current if not specified)')
    p_task_create.add_argument('--title', '-t', required=True, help='Task title')
    p_task_create.add_argument('--description', '-d', help='Description')
    p_task_create.add_argument('--assignee', '-a', help='Versioned agent identifier (e.g., backend-dev-notify-001-v1)')
    p_task_create.add_argument('--status', choices=TASK_STATUSES, default='pending')
    p_task_create.add_argument('--priority', '-p', choices=PRIORITIES, default=DEFAULT_PRIORITY)
    p_task_create.set_defaults(func=cmd_task_create)

    p_task_list = task_sub.add_parser('list', help='List tasks')
    p_task_list.add_argument('--story', '-s', help='Only tasks of this story')
    p_task_list.add_argument('--assignee', '-a', help='Only tasks with this assignee')
    p_task_list.set_defaults(func=cmd_task_list)

    p_task_assign = task_sub.add_parser('assign', help='Assign a task (empty string to unassign)')
    p_task_assign.add_argument('id', help='Task ID')
    p_task_assign.add_argument('assignee', help='Agent identifier')
    p_task_assign.set_defaults(func=cmd_task_assign)

    p_task_status = task_sub.add_parser('status', help='Move a task to a new status')
    p_task_status.add_argument('id', help='Task ID')
    p_task_status.add_argument('status', choices=TASK_STATUSES)
    p_task_status.set_defaults(func=cmd_task_status)

    # board retro
    p_retro = subparsers.add_parser('retro', help='Mini-retrospectives')
    p_retro.set_defaults(func=cmd_retro_list, story=None)
    retro_sub = p_retro.add_subparsers(dest='retro_cmd')

    p_retro_add = retro_sub.add_parser('add', help='Attach a retrospective to a task')
    p_retro_add.add_argument('task', help='Task ID')
    p_retro_add.add_argument('--content', '-c', required=True, help='Retrospective text')
    p_retro_add.set_defaults(func=cmd_retro_add)

    p_retro_list = retro_sub.add_parser('list', help='List retrospectives')
    p_retro_list.add_argument('--story', '-s', help='Only retrospectives for this story')
    p_retro_list.set_defaults(func=cmd_retro_list)

    # board validate
    p_validate = subparsers.add_parser('validate', help='Run compliance gates')
    validate_sub = p_validate.add_subparsers(dest='validate_cmd', required=True)

    p_validate_story = validate_sub.add_parser('story', help='Validate one story')
    p_validate_story.add_argument('code', nargs='?', help='Story code (uses current if not specified)')
    p_validate_story.add_argument('--strict', action='store_true', help='Also require mini-retrospectives')
    p_validate_story.add_argument('--allow-free-form', action='store_true',
                                  help='Accept a story with no agent definitions')
    p_validate_story.add_argument('--json', action='store_true', help='Print the report as JSON')
    p_validate_story.set_defaults(func=cmd_validate_story)

    # board watch
    p_watch = subparsers.add_parser('watch', help='Live TUI for one story')
    p_watch.add_argument('code', nargs='?', help='Story code (uses current if not specified)')
    p_watch.set_defaults(func=cmd_watch)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
