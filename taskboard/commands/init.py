"""
board init - Create a board directory with default configuration.
"""

from pathlib import Path

from taskboard.lib.config import CONFIG_FILENAME, write_default_config
from taskboard.lib.roles import ROLES_FILENAME, write_default_roles


def cmd_init(args, board_dir: Path) -> int:
    """Create board.env and roles.yaml."""
    config_path = board_dir / CONFIG_FILENAME
    if config_path.exists() and not args.force:
        print(f"ERROR: Board already initialized at {board_dir}")
        print("  Use --force to rewrite board.env and roles.yaml (records are kept)")
        return 1

    name = args.name or board_dir.resolve().parent.name
    try:
        write_default_config(board_dir, name)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1
    write_default_roles(board_dir)

    print(f"Initialized board '{name}' at {board_dir}")
    print(f"  {CONFIG_FILENAME}  - validation settings")
    print(f"  {ROLES_FILENAME}   - generic role vocabulary")
    print()
    print("Next:")
    print("  board feature create -c CODE -n \"Feature name\"")
    return 0
