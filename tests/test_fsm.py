"""Tests for taskboard.lib.fsm module."""

import json

import pytest

from taskboard.lib.constants import TASK_STATUSES
from taskboard.lib.fsm import (
    STATES,
    TRANSITIONS,
    TRIGGER_FOR,
    InvalidTransition,
    TaskFSM,
)
from taskboard.store.features import create_feature
from taskboard.store.records import TaskNotFound
from taskboard.store.stories import create_story
from taskboard.store.tasks import create_task, load_task


@pytest.fixture
def board(tmp_path):
    board_dir = tmp_path / ".board"
    create_feature(board_dir, "VAL", "Validation")
    create_story(board_dir, "VAL", {"title": "Story"})
    create_task(board_dir, "VAL-001", {"title": "Task"})
    return board_dir


class TestFSMStates:
    """Tests for FSM state definitions."""

    def test_states_match_task_statuses(self):
        assert set(STATES) == set(TASK_STATUSES)

    def test_every_transition_uses_known_states(self):
        for t in TRANSITIONS:
            assert t["source"] in STATES
            assert t["dest"] in STATES

    def test_trigger_lookup_is_unambiguous(self):
        pairs = [(t["source"], t["dest"]) for t in TRANSITIONS]
        assert len(pairs) == len(set(pairs))
        assert TRIGGER_FOR[("blocked", "pending")] == "requeue"
        assert TRIGGER_FOR[("blocked", "in_progress")] == "unblock"


class TestTaskFSM:
    def test_initial_state_from_record(self, board):
        assert TaskFSM(board, "TASK-0001").state == "pending"

    def test_missing_task(self, board):
        with pytest.raises(TaskNotFound):
            TaskFSM(board, "TASK-0099")

    def test_trigger_persists_status(self, board):
        fsm = TaskFSM(board, "TASK-0001")
        fsm.start()
        assert fsm.state == "in_progress"
        assert load_task(board, "TASK-0001").status == "in_progress"

    def test_happy_path(self, board):
        fsm = TaskFSM(board, "TASK-0001")
        fsm.start()
        fsm.block()
        fsm.unblock()
        fsm.complete()
        assert load_task(board, "TASK-0001").status == "completed"

    def test_move_to_returns_trigger(self, board):
        fsm = TaskFSM(board, "TASK-0001")
        assert fsm.move_to("blocked") == "block"
        assert fsm.move_to("pending") == "requeue"
        assert load_task(board, "TASK-0001").status == "pending"

    def test_invalid_move(self, board):
        fsm = TaskFSM(board, "TASK-0001")
        fsm.move_to("completed")
        with pytest.raises(InvalidTransition, match="allowed: in_progress"):
            fsm.move_to("blocked")
        assert load_task(board, "TASK-0001").status == "completed"

    def test_reopen_cancelled_goes_to_pending(self, board):
        fsm = TaskFSM(board, "TASK-0001")
        fsm.cancel()
        fsm.reopen()
        assert fsm.state == "pending"

    def test_available_triggers(self, board):
        fsm = TaskFSM(board, "TASK-0001")
        assert set(fsm.get_available_triggers()) == {"start", "block", "complete", "cancel"}
        assert fsm.can("start")
        assert not fsm.can("reopen")

    def test_callback(self, board):
        seen = []
        fsm = TaskFSM(board, "TASK-0001", on_transition=lambda *args: seen.append(args))
        fsm.start()
        assert seen == [("pending", "in_progress", "start")]

    def test_unknown_status_is_unreadable(self, board, caplog):
        path = board / "tasks" / "TASK-0001.json"
        data = json.loads(path.read_text())
        data["status"] = "bogus"
        path.write_text(json.dumps(data))

        # The record no longer validates, so the task can't be loaded at all
        with pytest.raises(TaskNotFound):
            TaskFSM(board, "TASK-0001")
        assert "Skipping unreadable task record" in caplog.text
