"""Task status state machine using the transitions library.

Usage:
    from taskboard.lib.fsm import TaskFSM

    fsm = TaskFSM(board_dir, "TASK-0001")
    fsm.start()       # pending -> in_progress
    fsm.complete()    # in_progress -> completed

Or by target status, as the CLI does:

    fsm.move_to("completed")
"""

import logging
from pathlib import Path
from typing import Callable

from transitions import Machine, MachineError

from taskboard.lib.constants import TASK_STATUSES
from taskboard.store.tasks import require_task, update_task

logger = logging.getLogger(__name__)


STATES = list(TASK_STATUSES)

# Transitions defined as (trigger, source, dest)
# Each trigger becomes a method on the FSM
TRANSITIONS = [
    {"trigger": "start", "source": "pending", "dest": "in_progress"},

    {"trigger": "block", "source": "pending", "dest": "blocked"},
    {"trigger": "block", "source": "in_progress", "dest": "blocked"},
    {"trigger": "unblock", "source": "blocked", "dest": "in_progress"},
    {"trigger": "requeue", "source": "blocked", "dest": "pending"},

    {"trigger": "complete", "source": "in_progress", "dest": "completed"},
    {"trigger": "complete", "source": "pending", "dest": "completed"},  # trivial tasks

    {"trigger": "cancel", "source": "pending", "dest": "cancelled"},
    {"trigger": "cancel", "source": "in_progress", "dest": "cancelled"},
    {"trigger": "cancel", "source": "blocked", "dest": "cancelled"},

    {"trigger": "reopen", "source": "completed", "dest": "in_progress"},
    {"trigger": "reopen", "source": "cancelled", "dest": "pending"},
]


def _build_trigger_lookup() -> dict[tuple[str, str], str]:
    """Build lookup from (source, dest) -> trigger name."""
    lookup: dict[tuple[str, str], str] = {}
    for t in TRANSITIONS:
        key = (t["source"], t["dest"])
        if key not in lookup:
            lookup[key] = t["trigger"]
    return lookup


TRIGGER_FOR = _build_trigger_lookup()


class InvalidTransition(Exception):
    """Requested status change is not allowed from the current status."""

    def __init__(self, task_id: str, source: str, dest: str):
        self.task_id = task_id
        self.source = source
        self.dest = dest
        allowed = sorted(d for (s, d) in TRIGGER_FOR if s == source)
        super().__init__(
            f"Cannot move {task_id} from '{source}' to '{dest}'"
            + (f" (allowed: {', '.join(allowed)})" if allowed else "")
        )


class TaskFSM:
    """State machine for one task's status.

    Loads the initial state from the task record and writes every
    transition back to it.
    """

    def __init__(
        self,
        board_dir: Path,
        task_id: str,
        on_transition: Callable[[str, str, str], None] | None = None,
    ):
        """
        Args:
            board_dir: Board directory
            task_id: Task to manage
            on_transition: Optional callback(from_state, to_state, trigger)

        Raises:
            TaskNotFound: if the task doesn't exist
        """
        self.board_dir = board_dir
        self.task_id = task_id
        self.on_transition = on_transition

        # The task schema restricts status to STATES, so no fallback is needed
        initial = require_task(board_dir, task_id).status

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial=initial,
            auto_transitions=False,
            send_event=True,
            after_state_change="on_state_change",
        )

    def on_state_change(self, event) -> None:
        from_state = event.transition.source
        to_state = event.transition.dest
        trigger = event.event.name

        logger.info(f"[FSM] {self.task_id}: {from_state} -> {to_state} ({trigger})")
        update_task(self.board_dir, self.task_id, {"status": to_state})

        if self.on_transition:
            self.on_transition(from_state, to_state, trigger)

    def can(self, trigger: str) -> bool:
        return trigger in self.machine.get_triggers(self.state)

    def get_available_triggers(self) -> list[str]:
        return self.machine.get_triggers(self.state)

    def move_to(self, dest: str) -> str:
        """Transition to dest status via the matching trigger.

        Returns:
            Name of the trigger that fired

        Raises:
            InvalidTransition: if no trigger leads from the current status to dest
        """
        trigger = TRIGGER_FOR.get((self.state, dest))
        if trigger is None:
            raise InvalidTransition(self.task_id, self.state, dest)
        try:
            self.trigger(trigger)
        except MachineError as e:
            raise InvalidTransition(self.task_id, self.state, dest) from e
        return trigger
