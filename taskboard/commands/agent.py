"""
board agent - Register and list agent definitions.

Registering the first definition for a story switches that story from
free-form to managed assignment.
"""

from pathlib import Path

from taskboard.lib.config import BoardConfig
from taskboard.lib.validate import ValidationError
from taskboard.store.agents import create_agent, list_agents
from taskboard.store.records import DuplicateRecord, StoryNotFound


def cmd_agent_create(args, board_dir: Path, config: BoardConfig) -> int:
    try:
        definition = create_agent(
            board_dir,
            role=args.role,
            name=args.name,
            scope=args.story,
            persona=args.persona or "",
            objective=args.objective or "",
        )
    except (ValueError, StoryNotFound, DuplicateRecord, ValidationError) as e:
        print(f"ERROR: {e}")
        return 1

    scope = definition.scope or "global"
    print(f"Agent created: {definition.name} (role={definition.role}, scope={scope})")
    print(f"  Assign tasks to it as: {definition.name}-v1")
    return 0


def cmd_agent_list(args, board_dir: Path, config: BoardConfig) -> int:
    if args.story:
        definitions = list_agents(board_dir, args.story, include_global=False)
        if not definitions:
            print(f"No agent definitions found for story {args.story}")
            return 0
    else:
        definitions = list_agents(board_dir)
        if not definitions:
            print("No agent definitions found")
            return 0

    print("Agents")
    print("-" * 60)
    for d in definitions:
        print(f"  {d.name:<32} {d.role:<16} {d.scope or 'global'}")
    return 0
