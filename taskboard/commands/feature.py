"""
board feature - Create and list features.
"""

from pathlib import Path

from taskboard.lib.config import BoardConfig
from taskboard.lib.validate import ValidationError
from taskboard.store.features import create_feature, list_features
from taskboard.store.records import DuplicateRecord


def cmd_feature_create(args, board_dir: Path, config: BoardConfig) -> int:
    try:
        feature = create_feature(board_dir, args.code, args.name, args.description or "")
    except (ValueError, DuplicateRecord, ValidationError) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Feature created: {feature.code} ({feature.name})")
    return 0


def cmd_feature_list(args, board_dir: Path, config: BoardConfig) -> int:
    features = list_features(board_dir)
    if not features:
        print("Features: none")
        print()
        print("Create one with: board feature create -c CODE -n \"Name\"")
        return 0

    print("Features")
    print("-" * 60)
    for f in features:
        print(f"  {f.code:<12} {f.story_counter:>3} story(s)  {f.name}")
    return 0
