"""Tests for taskboard.governance.failure_log module."""

import json

import pytest

from taskboard.governance.failure_log import (
    FAILURES_FILENAME,
    ValidationFailure,
    load_validation_failures,
    record_denial,
    record_report_failures,
    record_validation_failure,
)
from taskboard.governance.gates import GATE_AGENT_DEFINITIONS, GATE_NAMING_CONVENTION
from taskboard.governance.policy import Denied, DenialKind
from taskboard.governance.report import GateResult, ValidationReport
from taskboard.lib.validate import ValidationError


def make_denied(story_code="VAL-001"):
    return Denied(
        story_code=story_code,
        assignee="backend-dev",
        kind=DenialKind.GENERIC_ROLE_ASSIGNMENT,
        detail="Cannot assign task to generic role 'backend-dev'",
        remediation="board agent create ...",
    )


class TestRecordFailures:
    def test_denial_appends_line(self, tmp_path):
        metrics = tmp_path / "metrics"
        record_denial(metrics, make_denied())
        record_denial(metrics, make_denied("VAL-002"))

        lines = (metrics / FAILURES_FILENAME).read_text().splitlines()
        assert len(lines) == 2
        first = json.loads(lines[0])
        assert first["type"] == "generic-role-assignment"
        assert first["details"]["assignee"] == "backend-dev"
        assert first["remediation"] == "board agent create ..."

    def test_report_failures_only_logs_failed_gates(self, tmp_path):
        report = ValidationReport(
            story_code="VAL-001",
            strict=False,
            gates=(
                GateResult(GATE_AGENT_DEFINITIONS, True, "ok"),
                GateResult(GATE_NAMING_CONVENTION, False, "1 task(s) ...", remediation="reassign"),
            ),
        )
        written = record_report_failures(tmp_path, report)
        assert [f.type for f in written] == ["naming-convention"]
        assert written[0].details["gate"] == GATE_NAMING_CONVENTION

    def test_passing_report_writes_nothing(self, tmp_path):
        report = ValidationReport("VAL-001", False, (GateResult(GATE_AGENT_DEFINITIONS, True, "ok"),))
        assert record_report_failures(tmp_path, report) == []
        assert not (tmp_path / FAILURES_FILENAME).exists()

    def test_invalid_type_rejected(self, tmp_path):
        failure = ValidationFailure(timestamp="t", story_code="VAL-001", type="oops", details={})
        with pytest.raises(ValidationError):
            record_validation_failure(tmp_path, failure)
        assert not (tmp_path / FAILURES_FILENAME).exists()


class TestLoadFailures:
    def test_missing_log(self, tmp_path):
        assert load_validation_failures(tmp_path) == []

    def test_filter_by_story(self, tmp_path):
        record_denial(tmp_path, make_denied("VAL-001"))
        record_denial(tmp_path, make_denied("VAL-002"))
        failures = load_validation_failures(tmp_path, "VAL-002")
        assert [f.story_code for f in failures] == ["VAL-002"]

    def test_skips_corrupt_lines(self, tmp_path, caplog):
        record_denial(tmp_path, make_denied())
        with open(tmp_path / FAILURES_FILENAME, "a") as f:
            f.write("{broken\n")
            f.write('{"unexpected": true}\n')
        record_denial(tmp_path, make_denied())

        assert len(load_validation_failures(tmp_path)) == 2
        assert "line 2" in caplog.text
        assert "line 3" in caplog.text
