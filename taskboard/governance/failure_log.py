"""
Validation failure log.

Appends one JSON line per assignment denial or failed gate to
<board_dir>/<METRICS_DIR>/validation-failures.jsonl so governance drift can be
reviewed later. The engine itself never writes here; the CLI does.
"""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from taskboard.governance.gates import (
    GATE_AGENT_DEFINITIONS,
    GATE_MINI_RETROSPECTIVES,
    GATE_NAMING_CONVENTION,
)
from taskboard.governance.policy import Denied
from taskboard.governance.report import ValidationReport
from taskboard.lib.validate import ValidationError, validate
from taskboard.store.records import now_iso

logger = logging.getLogger(__name__)

FAILURES_FILENAME = "validation-failures.jsonl"

GATE_FAILURE_TYPES = {
    GATE_AGENT_DEFINITIONS: "missing-story-agents",
    GATE_NAMING_CONVENTION: "naming-convention",
    GATE_MINI_RETROSPECTIVES: "missing-mini-retrospective",
}


@dataclass
class ValidationFailure:
    """A single logged validation failure."""
    timestamp: str
    story_code: str
    type: str
    details: dict
    remediation: Optional[str] = None


def record_validation_failure(metrics_dir: Path, failure: ValidationFailure) -> None:
    """Append a failure to the JSONL log."""
    data = asdict(failure)
    validate(data, "validation_failure")
    metrics_dir.mkdir(parents=True, exist_ok=True)
    with open(metrics_dir / FAILURES_FILENAME, "a") as f:
        f.write(json.dumps(data) + "\n")
        f.flush()


def record_denial(metrics_dir: Path, denied: Denied) -> ValidationFailure:
    failure = ValidationFailure(
        timestamp=now_iso(),
        story_code=denied.story_code,
        type=denied.kind.value,
        details={"assignee": denied.assignee, "detail": denied.detail},
        remediation=denied.remediation,
    )
    record_validation_failure(metrics_dir, failure)
    return failure


def record_report_failures(metrics_dir: Path, report: ValidationReport) -> list[ValidationFailure]:
    """Log every failed gate in a report. Returns what was written."""
    written = []
    for gate in report.failures:
        failure = ValidationFailure(
            timestamp=now_iso(),
            story_code=report.story_code,
            type=GATE_FAILURE_TYPES[gate.gate_name],
            details={"gate": gate.gate_name, "detail": gate.detail, "strict": report.strict},
            remediation=gate.remediation,
        )
        record_validation_failure(metrics_dir, failure)
        written.append(failure)
    return written


def load_validation_failures(metrics_dir: Path, story_code: str | None = None) -> list[ValidationFailure]:
    """Load logged failures. Skips corrupted lines."""
    log_file = metrics_dir / FAILURES_FILENAME
    if not log_file.exists():
        return []

    failures = []
    for line_num, line in enumerate(log_file.read_text().splitlines(), 1):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
            validate(data, "validation_failure")
            failures.append(ValidationFailure(**data))
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.warning(f"Skipping corrupted failure line {line_num} in {log_file}: {e}")

    if story_code:
        failures = [f for f in failures if f.story_code == story_code]
    return failures
