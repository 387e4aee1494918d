"""Assignment governance for the board.

Decides, per story, whether task assignment is free-form or governed by
registered agent definitions, and runs the compliance gates behind
`board validate story`.

Everything exported here is pure: it works on an AgentRegistryView snapshot
and never touches disk. Store-backed wrappers live in
taskboard.governance.service; the JSONL failure log in
taskboard.governance.failure_log.
"""

from taskboard.governance.identifiers import (
    Unversioned,
    Versioned,
    classify,
    format_identifier,
    is_valid_token,
)
from taskboard.governance.registry import FREE_FORM, MANAGED, AgentRegistryView
from taskboard.governance.policy import (
    Allowed,
    AssignmentResult,
    Denied,
    DenialKind,
    validate_assignment,
)
from taskboard.governance.report import GateResult, ValidationReport
from taskboard.governance.gates import (
    GATE_AGENT_DEFINITIONS,
    GATE_MINI_RETROSPECTIVES,
    GATE_NAMING_CONVENTION,
    run_gate_pipeline,
)
