"""
board story - Create, list and show stories.
"""

from pathlib import Path

from taskboard.governance.registry import AgentRegistryView
from taskboard.lib.config import BoardConfig
from taskboard.lib.validate import ValidationError
from taskboard.store.records import FeatureNotFound, StoryNotFound
from taskboard.store.stories import create_story, list_stories, require_story
from taskboard.store.tasks import list_tasks


def cmd_story_create(args, board_dir: Path, config: BoardConfig) -> int:
    data = {
        "title": args.title,
        "description": args.description or "",
        "why": args.why or "",
    }
    try:
        story = create_story(board_dir, args.feature, data)
    except (FeatureNotFound, ValidationError) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Story created: {story.code}")
    print(f"  Title:  {story.title}")
    print(f"  Status: {story.status}")
    return 0


def cmd_story_list(args, board_dir: Path, config: BoardConfig) -> int:
    stories = list_stories(board_dir, args.feature)
    if not stories:
        print("Stories: none")
        return 0

    registry = AgentRegistryView.load(board_dir)
    print("Stories")
    print("-" * 60)
    for story in stories:
        title = story.title[:36] + "..." if len(story.title) > 36 else story.title
        print(f"  {story.code:<12} {story.status:<12} {registry.mode(story.code):<10} {title}")
    print()
    print(f"{len(stories)} story(s)")
    return 0


def cmd_story_show(args, board_dir: Path, config: BoardConfig) -> int:
    try:
        story = require_story(board_dir, args.code)
    except StoryNotFound as e:
        print(f"ERROR: {e}")
        return 1

    registry = AgentRegistryView.load(board_dir)
    tasks = list_tasks(board_dir, story.code)

    print(f"Story: {story.code}")
    print("=" * 60)
    print(f"Title:      {story.title}")
    print(f"Feature:    {story.feature_code}")
    print(f"Status:     {story.status}")
    print(f"Governance: {registry.mode(story.code)}")
    if story.why:
        print(f"Why:        {story.why}")
    if story.description:
        print()
        print(story.description)
    print()

    definitions = registry.definitions_for(story.code)
    if definitions:
        print("Agents")
        print("-" * 40)
        for d in definitions:
            print(f"  {d.name:<32} role={d.role}")
        print()

    print("Tasks")
    print("-" * 40)
    if not tasks:
        print("  none")
    for t in tasks:
        retro = " [retro]" if t.retrospective_id else ""
        print(f"  {t.id}  {t.status:<12} {t.assignee or '-':<28} {t.title}{retro}")
    return 0
