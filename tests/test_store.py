"""Tests for taskboard.store record CRUD."""

import json

import pytest

from taskboard.lib.validate import ValidationError
from taskboard.store import (
    DuplicateRecord,
    FeatureNotFound,
    StoryNotFound,
    TaskNotFound,
    create_agent,
    create_feature,
    create_retro,
    create_story,
    create_task,
    list_agents,
    list_features,
    list_retros,
    list_stories,
    list_tasks,
    load_story,
    load_task,
    require_feature,
    update_story,
    update_task,
)


@pytest.fixture
def board(tmp_path):
    board_dir = tmp_path / ".board"
    create_feature(board_dir, "VAL", "Validation")
    create_story(board_dir, "VAL", {"title": "First story"})
    return board_dir


class TestFeatures:
    def test_create_and_list(self, tmp_path):
        create_feature(tmp_path, "NOTIFY", "Notifications", "Push and email")
        features = list_features(tmp_path)
        assert [f.code for f in features] == ["NOTIFY"]
        assert features[0].description == "Push and email"
        assert features[0].story_counter == 0

    @pytest.mark.parametrize("code", ["notify", "N", "1ABC", "TOOLONGCODE1", "NO-TIFY"])
    def test_invalid_code(self, tmp_path, code):
        with pytest.raises(ValueError, match="Invalid feature code"):
            create_feature(tmp_path, code, "x")

    def test_duplicate(self, board):
        with pytest.raises(DuplicateRecord):
            create_feature(board, "VAL", "Again")

    def test_require_missing(self, tmp_path):
        with pytest.raises(FeatureNotFound, match="Feature not found: NOPE"):
            require_feature(tmp_path, "NOPE")


class TestStories:
    def test_codes_are_sequential_per_feature(self, board):
        second = create_story(board, "VAL", {"title": "Second"})
        assert second.code == "VAL-002"
        assert second.status == "draft"
        assert require_feature(board, "VAL").story_counter == 2

    def test_missing_feature(self, tmp_path):
        with pytest.raises(FeatureNotFound):
            create_story(tmp_path, "NOPE", {"title": "x"})

    def test_load_rejects_bad_code(self, board):
        assert load_story(board, "../etc") is None
        assert load_story(board, "VAL-1") is None

    def test_list_by_feature(self, board):
        create_feature(board, "OPS", "Operations")
        create_story(board, "OPS", {"title": "Ops story"})
        assert [s.code for s in list_stories(board, "OPS")] == ["OPS-001"]
        assert len(list_stories(board)) == 2

    def test_story_record_has_no_mode_field(self, board):
        data = json.loads((board / "stories" / "VAL-001.json").read_text())
        assert "mode" not in data
        assert "governance" not in data

    def test_update_status(self, board):
        assert update_story(board, "VAL-001", {"status": "in_progress"}).status == "in_progress"

    def test_update_invalid_status(self, board):
        with pytest.raises(ValueError, match="Invalid story status"):
            update_story(board, "VAL-001", {"status": "bogus"})

    def test_corrupt_story_skipped(self, board, caplog):
        (board / "stories" / "VAL-009.json").write_text("{not json")
        assert [s.code for s in list_stories(board)] == ["VAL-001"]
        assert "Skipping unreadable story record" in caplog.text


class TestTasks:
    def test_create_defaults(self, board):
        task = create_task(board, "VAL-001", {"title": "Do it"})
        assert task.id == "TASK-0001"
        assert task.status == "pending"
        assert task.priority == "P2"
        assert task.assignee is None

    def test_ids_are_board_wide(self, board):
        create_story(board, "VAL", {"title": "Second"})
        create_task(board, "VAL-001", {"title": "a"})
        task = create_task(board, "VAL-002", {"title": "b"})
        assert task.id == "TASK-0002"
        assert [t.id for t in list_tasks(board, "VAL-002")] == ["TASK-0002"]

    def test_missing_story(self, board):
        with pytest.raises(StoryNotFound):
            create_task(board, "VAL-404", {"title": "x"})

    def test_invalid_priority(self, board):
        with pytest.raises(ValueError, match="Invalid priority"):
            create_task(board, "VAL-001", {"title": "x", "priority": "P9"})

    def test_empty_assignee_stored_as_none(self, board):
        assert create_task(board, "VAL-001", {"title": "x", "assignee": ""}).assignee is None

    def test_update(self, board):
        create_task(board, "VAL-001", {"title": "x"})
        updated = update_task(board, "TASK-0001", {"assignee": "john-doe"})
        assert load_task(board, "TASK-0001").assignee == "john-doe"
        assert updated.updated >= updated.created

    def test_update_missing(self, board):
        with pytest.raises(TaskNotFound):
            update_task(board, "TASK-0042", {"status": "completed"})

    def test_schema_blocks_bad_write(self, board):
        create_task(board, "VAL-001", {"title": "x"})
        with pytest.raises(ValidationError, match="Refusing to write"):
            update_task(board, "TASK-0001", {"title": ""})
        assert load_task(board, "TASK-0001").title == "x"


class TestAgents:
    def test_create_scoped(self, board):
        definition = create_agent(board, "backend-dev", "backend-dev-val-001", scope="VAL-001", persona="Terse")
        assert definition.scope == "VAL-001"
        assert (board / "agents" / "VAL-001" / "backend-dev-val-001.json").exists()

    def test_create_global(self, board):
        definition = create_agent(board, "architect", "architect-shared")
        assert definition.is_global
        assert (board / "agents" / "_global" / "architect-shared.json").exists()

    def test_name_must_start_with_role(self, board):
        with pytest.raises(ValueError, match="must start with its role"):
            create_agent(board, "backend-dev", "frontend-dev-val-001", scope="VAL-001")

    def test_name_must_not_be_versioned(self, board):
        with pytest.raises(ValueError, match="version suffix"):
            create_agent(board, "backend-dev", "backend-dev-val-001-v1", scope="VAL-001")

    def test_invalid_role(self, board):
        with pytest.raises(ValueError, match="Invalid role"):
            create_agent(board, "Backend_Dev", "backend-dev-x")

    def test_unknown_story_scope(self, board):
        with pytest.raises(StoryNotFound):
            create_agent(board, "backend-dev", "backend-dev-x", scope="VAL-404")

    def test_duplicate_in_same_story(self, board):
        create_agent(board, "backend-dev", "backend-dev-val-001", scope="VAL-001")
        with pytest.raises(DuplicateRecord, match="story VAL-001"):
            create_agent(board, "backend-dev", "backend-dev-val-001", scope="VAL-001")

    def test_global_clashes_with_story_name(self, board):
        create_agent(board, "backend-dev", "backend-dev-x", scope="VAL-001")
        with pytest.raises(DuplicateRecord, match="story VAL-001"):
            create_agent(board, "backend-dev", "backend-dev-x")

    def test_story_name_clashes_with_global(self, board):
        create_agent(board, "backend-dev", "backend-dev-x")
        with pytest.raises(DuplicateRecord, match="global scope"):
            create_agent(board, "backend-dev", "backend-dev-x", scope="VAL-001")

    def test_same_name_in_two_stories_allowed(self, board):
        create_story(board, "VAL", {"title": "Second"})
        create_agent(board, "backend-dev", "backend-dev-x", scope="VAL-001")
        create_agent(board, "backend-dev", "backend-dev-x", scope="VAL-002")
        assert len(list_agents(board)) == 2

    def test_list_for_story(self, board):
        create_agent(board, "backend-dev", "backend-dev-val-001", scope="VAL-001")
        create_agent(board, "architect", "architect-shared")
        assert [d.name for d in list_agents(board, "VAL-001")] == ["backend-dev-val-001", "architect-shared"]
        assert [d.name for d in list_agents(board, "VAL-001", include_global=False)] == ["backend-dev-val-001"]

    def test_misplaced_record_skipped(self, board, caplog):
        create_agent(board, "backend-dev", "backend-dev-val-001", scope="VAL-001")
        src = board / "agents" / "VAL-001" / "backend-dev-val-001.json"
        dest = board / "agents" / "_global" / "backend-dev-val-001.json"
        dest.parent.mkdir(parents=True)
        src.rename(dest)

        assert list_agents(board) == []
        assert "does not match directory" in caplog.text


class TestRetros:
    def test_attach_to_task(self, board):
        create_task(board, "VAL-001", {"title": "x", "status": "completed"})
        retro = create_retro(board, "TASK-0001", "  Retrospective: went fine  ")
        assert retro.id == "RETRO-0001"
        assert retro.content == "Retrospective: went fine"
        assert load_task(board, "TASK-0001").retrospective_id == "RETRO-0001"

    def test_newer_retro_replaces_link(self, board):
        create_task(board, "VAL-001", {"title": "x"})
        create_retro(board, "TASK-0001", "first")
        create_retro(board, "TASK-0001", "second")
        assert load_task(board, "TASK-0001").retrospective_id == "RETRO-0002"
        assert len(list_retros(board, "TASK-0001")) == 2

    def test_blank_content(self, board):
        create_task(board, "VAL-001", {"title": "x"})
        with pytest.raises(ValueError, match="cannot be empty"):
            create_retro(board, "TASK-0001", "   ")

    def test_missing_task(self, board):
        with pytest.raises(TaskNotFound):
            create_retro(board, "TASK-0099", "text")
