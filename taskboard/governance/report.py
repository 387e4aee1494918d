"""Result types produced by the gate pipeline."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class GateResult:
    gate_name: str
    passed: bool
    detail: str
    remediation: Optional[str] = None

    def to_json_obj(self) -> dict[str, Any]:
        obj: dict[str, Any] = {
            "gate": self.gate_name,
            "passed": bool(self.passed),
            "detail": self.detail,
        }
        if self.remediation is not None:
            obj["remediation"] = self.remediation
        return obj


@dataclass(frozen=True)
class ValidationReport:
    """Ordered gate results for one story.

    Only gates that applied are present; a gate skipped for the run (the
    retrospective gate outside strict mode) is absent rather than failed.
    """
    story_code: str
    strict: bool
    gates: tuple[GateResult, ...] = field(default_factory=tuple)

    @property
    def passed(self) -> bool:
        return all(g.passed for g in self.gates)

    @property
    def failures(self) -> list[GateResult]:
        return [g for g in self.gates if not g.passed]

    def gate(self, gate_name: str) -> Optional[GateResult]:
        for g in self.gates:
            if g.gate_name == gate_name:
                return g
        return None

    def summary(self) -> dict[str, int]:
        failed = len(self.failures)
        return {
            "total_checks": len(self.gates),
            "passed_checks": len(self.gates) - failed,
            "failed_checks": failed,
        }

    def to_json_obj(self) -> dict[str, Any]:
        return {
            "story_code": self.story_code,
            "strict": self.strict,
            "passed": self.passed,
            "gates": [g.to_json_obj() for g in self.gates],
            "summary": self.summary(),
        }
