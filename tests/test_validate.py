"""Tests for taskboard.lib.validate module."""

import json

import pytest

from taskboard.lib.validate import ValidationError, validate, validate_before_write, validate_file


def valid_task():
    return {
        "id": "TASK-0001",
        "story_code": "VAL-001",
        "title": "Do it",
        "status": "pending",
        "priority": "P2",
        "created": "2026-01-01T00:00:00",
        "updated": "2026-01-01T00:00:00",
        "assignee": None,
    }


class TestValidate:
    def test_valid_task(self):
        validate(valid_task(), "task")

    def test_unknown_status(self):
        data = valid_task() | {"status": "done"}
        with pytest.raises(ValidationError) as exc:
            validate(data, "task")
        assert exc.value.schema_name == "task"
        assert exc.value.path == "status"

    def test_extra_field_rejected(self):
        with pytest.raises(ValidationError, match="Additional properties"):
            validate(valid_task() | {"mode": "managed"}, "task")

    def test_missing_required(self):
        data = valid_task()
        del data["title"]
        with pytest.raises(ValidationError, match="'title' is a required property"):
            validate(data, "task")

    def test_unknown_schema(self):
        with pytest.raises(ValidationError, match="Schema file not found"):
            validate({}, "nope")

    def test_agent_scope_may_be_null(self):
        validate({
            "role": "architect",
            "name": "architect-shared",
            "scope": None,
            "created": "2026-01-01T00:00:00",
            "persona": "",
            "objective": "",
        }, "agent")

    def test_failure_type_enum(self):
        with pytest.raises(ValidationError):
            validate({
                "timestamp": "2026-01-01T00:00:00",
                "story_code": "VAL-001",
                "type": "something-else",
                "details": {},
                "remediation": None,
            }, "validation_failure")


class TestValidateFile:
    def test_reads_and_validates(self, tmp_path):
        path = tmp_path / "TASK-0001.json"
        path.write_text(json.dumps(valid_task()))
        assert validate_file(path, "task")["id"] == "TASK-0001"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValidationError, match="File not found"):
            validate_file(tmp_path / "missing.json", "task")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{")
        with pytest.raises(ValidationError, match="Invalid JSON"):
            validate_file(path, "task")


class TestValidateBeforeWrite:
    def test_mentions_target_path(self, tmp_path):
        target = tmp_path / "TASK-0001.json"
        with pytest.raises(ValidationError, match="Refusing to write"):
            validate_before_write(valid_task() | {"priority": "urgent"}, "task", target)
        assert not target.exists()

    def test_path_reported_once(self, tmp_path):
        with pytest.raises(ValidationError) as exc_info:
            validate_before_write(valid_task() | {"title": ""}, "task", tmp_path / "TASK-0001.json")
        message = str(exc_info.value)
        assert message.startswith("[task] Refusing to write TASK-0001.json: ")
        assert message.endswith(" at title")
        assert message.count("at title") == 1
        assert message.count("[task]") == 1
        assert exc_info.value.path == "title"
