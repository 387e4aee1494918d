"""
board validate - Run the compliance gates for a story.

Exit code 0 when every applicable gate passes, 1 otherwise.
"""

import json
from pathlib import Path

from taskboard.governance.failure_log import record_report_failures
from taskboard.governance.report import GateResult, ValidationReport
from taskboard.governance.service import validate_story
from taskboard.lib.config import BoardConfig
from taskboard.lib.roles import load_role_vocabulary
from taskboard.store.records import StoryNotFound


def format_gate(gate: GateResult) -> list[str]:
    marker = "[+]" if gate.passed else "[x]"
    lines = [f"{marker} {gate.gate_name}", f"    {gate.detail}"]
    if gate.remediation:
        lines.append("    Remediation:")
        lines.extend(f"      {line}" for line in gate.remediation.splitlines())
    return lines


def format_report(report: ValidationReport) -> str:
    mode = "strict" if report.strict else "standard"
    lines = [f"Validating story {report.story_code} ({mode})", "=" * 60]
    for gate in report.gates:
        lines.extend(format_gate(gate))
        lines.append("")

    summary = report.summary()
    verdict = "PASSED" if report.passed else "FAILED"
    lines.append(f"Validation {verdict} ({summary['passed_checks']}/{summary['total_checks']} checks)")
    return "\n".join(lines)


def cmd_validate_story(args, board_dir: Path, config: BoardConfig) -> int:
    strict = args.strict or config.strict_validation
    expect_managed = config.require_agent_definitions and not args.allow_free_form

    try:
        report = validate_story(
            board_dir,
            args.code,
            strict=strict,
            expect_managed=expect_managed,
            known_roles=load_role_vocabulary(board_dir).roles,
        )
    except StoryNotFound as e:
        print(f"ERROR: {e}")
        return 1

    if args.json:
        print(json.dumps(report.to_json_obj(), indent=2))
    else:
        print(format_report(report))

    if not report.passed and config.log_validation_failures:
        record_report_failures(config.metrics_path, report)

    return 0 if report.passed else 1
