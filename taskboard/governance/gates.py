"""Compliance gates for `board validate story`.

Gates run in a fixed order and never short-circuit: every applicable gate
reports even when an earlier one failed, so the output is stable and diffable.
A failed gate is a normal result value.

1. Story Agent Definitions
2. Naming Convention Compliance
3. Mini-Retrospectives (strict mode only)
"""

import logging
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from typing import Callable

from taskboard.governance.policy import Denied, validate_assignment
from taskboard.governance.registry import AgentRegistryView
from taskboard.governance.report import GateResult, ValidationReport
from taskboard.store.models import Task

logger = logging.getLogger(__name__)

GATE_AGENT_DEFINITIONS = "Story Agent Definitions"
GATE_NAMING_CONVENTION = "Naming Convention Compliance"
GATE_MINI_RETROSPECTIVES = "Mini-Retrospectives"


@dataclass(frozen=True)
class GateContext:
    registry: AgentRegistryView
    story_code: str
    tasks: tuple[Task, ...]
    known_roles: frozenset[str]
    expect_managed: bool


GateFn = Callable[[GateContext], GateResult]


def _bullets(lines: list[str]) -> str:
    return "\n    - " + "\n    - ".join(lines)


def gate_agent_definitions(ctx: GateContext) -> GateResult:
    definitions = ctx.registry.definitions_for(ctx.story_code)
    if definitions:
        names = ", ".join(d.name for d in definitions)
        return GateResult(
            GATE_AGENT_DEFINITIONS,
            True,
            f"Found {len(definitions)} agent definition(s): {names}",
        )

    if not ctx.expect_managed:
        return GateResult(
            GATE_AGENT_DEFINITIONS,
            True,
            f"Story {ctx.story_code} is free-form (no story-scoped agent definitions)",
        )

    return GateResult(
        GATE_AGENT_DEFINITIONS,
        False,
        f"No agent definitions found for story {ctx.story_code}",
        remediation=(
            f"Register at least one agent for the story with: "
            f"board agent create -r <role> -n <role>-{ctx.story_code.lower()} --story {ctx.story_code}"
        ),
    )


def gate_naming_convention(ctx: GateContext) -> GateResult:
    if not ctx.registry.has_any_definition(ctx.story_code):
        return GateResult(
            GATE_NAMING_CONVENTION,
            True,
            "Story does not use managed agents - assignee validation skipped",
        )

    offending: list[str] = []
    unassigned = 0
    for task in ctx.tasks:
        if not task.assignee:
            unassigned += 1
            continue
        result = validate_assignment(ctx.registry, ctx.story_code, task.assignee, ctx.known_roles)
        if isinstance(result, Denied):
            offending.append(f"{task.id}: {task.assignee!r} ({result.kind.value})")

    if offending:
        return GateResult(
            GATE_NAMING_CONVENTION,
            False,
            f"{len(offending)} task(s) with non-compliant assignees:{_bullets(offending)}",
            remediation=(
                f"Reassign each task to a registered, versioned agent with: "
                f"board task assign <task-id> <agent-name>-v<N> "
                f"(see 'board agent list --story {ctx.story_code}')"
            ),
        )

    assigned = len(ctx.tasks) - unassigned
    detail = f"All {assigned} assigned task(s) use registered, versioned agents"
    if unassigned:
        detail += f" ({unassigned} unassigned)"
    return GateResult(GATE_NAMING_CONVENTION, True, detail)


def gate_mini_retrospectives(ctx: GateContext) -> GateResult:
    completed = [t for t in ctx.tasks if t.status == "completed"]
    if not completed:
        return GateResult(GATE_MINI_RETROSPECTIVES, True, "No completed tasks to check for retrospectives")

    missing = [f"{t.id}: {t.title}" for t in completed if not t.retrospective_id]
    if missing:
        return GateResult(
            GATE_MINI_RETROSPECTIVES,
            False,
            f"{len(missing)} completed task(s) missing a mini-retrospective:{_bullets(missing)}",
            remediation=(
                "Attach a retrospective before closing out the story: "
                "board retro add <task-id> -c \"Retrospective: ...\""
            ),
        )

    return GateResult(
        GATE_MINI_RETROSPECTIVES,
        True,
        f"All {len(completed)} completed task(s) have mini-retrospectives",
    )


def applicable_gates(strict: bool) -> list[GateFn]:
    gates: list[GateFn] = [gate_agent_definitions, gate_naming_convention]
    if strict:
        gates.append(gate_mini_retrospectives)
    return gates


def run_gate_pipeline(
    registry: AgentRegistryView,
    tasks: Sequence[Task],
    story_code: str,
    *,
    strict: bool = False,
    expect_managed: bool = False,
    known_roles: Collection[str] = frozenset(),
) -> ValidationReport:
    """Run every applicable gate for one story and collect the report.

    Args:
        registry: Snapshot of agent definitions and story codes
        tasks: The story's tasks (tasks for other stories are ignored)
        story_code: Story under validation
        strict: Include the mini-retrospective gate
        expect_managed: Treat a story without agent definitions as a failure
            rather than as free-form
        known_roles: Generic role vocabulary for the naming gate

    Raises:
        StoryNotFound: if story_code is not on the board
    """
    registry.require_story(story_code)

    ctx = GateContext(
        registry=registry,
        story_code=story_code,
        tasks=tuple(t for t in tasks if t.story_code == story_code),
        known_roles=frozenset(known_roles),
        expect_managed=expect_managed,
    )

    results = []
    for gate in applicable_gates(strict):
        result = gate(ctx)
        logger.debug(f"{story_code}: {result.gate_name} {'passed' if result.passed else 'failed'}")
        results.append(result)

    return ValidationReport(story_code=story_code, strict=strict, gates=tuple(results))
