"""
board watch - Live view of one story.

Interactive TUI showing the story's tasks and its gate report, refreshed
from the record files on an interval. Read-only: it never writes to the board.
"""

from pathlib import Path
from typing import Optional

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, VerticalScroll
from textual.reactive import reactive
from textual.widgets import Footer, Header, Static

from taskboard.governance.report import ValidationReport
from taskboard.governance.service import validate_story
from taskboard.lib.config import BoardConfig
from taskboard.lib.roles import load_role_vocabulary
from taskboard.store.models import Story, Task
from taskboard.store.records import StoryNotFound
from taskboard.store.stories import load_story
from taskboard.store.tasks import list_tasks

# Configuration
POLL_INTERVAL_SECONDS = 2.0
TITLE_WIDTH = 40

STATUS_COLORS = {
    "pending": "white",
    "in_progress": "cyan",
    "blocked": "yellow",
    "completed": "green",
    "cancelled": "dim",
}


def _format_task_line(task: Task) -> str:
    """Format a task row with Rich markup."""
    color = STATUS_COLORS.get(task.status, "")
    status = f"[{color}]{task.status:<11}[/{color}]" if color else f"{task.status:<11}"
    title = task.title if len(task.title) <= TITLE_WIDTH else task.title[:TITLE_WIDTH - 3] + "..."
    assignee = escape(task.assignee) if task.assignee else "[dim]unassigned[/dim]"
    retro = " [green]R[/green]" if task.retrospective_id else ""
    return f"{task.id}  {status} {escape(title)}  {assignee}{retro}"


def _format_report_rich(report: ValidationReport) -> str:
    """Format a gate report with Rich markup."""
    lines = []
    for gate in report.gates:
        if gate.passed:
            lines.append(f"[green][+][/green] {gate.gate_name}")
        else:
            lines.append(f"[red]\\[x][/red] {gate.gate_name}")
        lines.append(f"    [dim]{escape(gate.detail)}[/dim]")

    summary = report.summary()
    verdict = "[green]PASSED[/green]" if report.passed else "[red]FAILED[/red]"
    mode = "strict" if report.strict else "standard"
    lines.append("")
    lines.append(f"{verdict} ({summary['passed_checks']}/{summary['total_checks']} checks, {mode})")
    return "\n".join(lines)


class TaskListWidget(Static):
    """Displays the story's tasks."""

    tasks: reactive[list] = reactive(list, always_update=True)

    def render(self) -> str:
        if not self.tasks:
            return "[dim]No tasks yet[/dim]"

        lines = [f"[bold]Tasks ({len(self.tasks)}):[/bold]"]
        lines.extend(_format_task_line(t) for t in self.tasks)
        return "\n".join(lines)


class ReportWidget(Static):
    """Displays the latest gate report."""

    report: reactive[Optional[ValidationReport]] = reactive(None, always_update=True)

    def render(self) -> str:
        if not self.report:
            return "Loading..."
        return "[bold]Validation:[/bold]\n" + _format_report_rich(self.report)


class WatchApp(App):
    """Story watch TUI application."""

    CSS = """
    #main-container {
        layout: vertical;
        padding: 1;
    }

    #tasks-box {
        border: solid blue;
        padding: 1;
        height: 1fr;
    }

    #report-box {
        border: solid green;
        padding: 1;
        height: auto;
    }

    TaskListWidget {
        height: auto;
    }

    ReportWidget {
        height: auto;
    }
    """

    BINDINGS = [
        Binding("r", "refresh", "Refresh"),
        Binding("s", "toggle_strict", "Strict"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, board_dir: Path, story_code: str, config: BoardConfig) -> None:
        super().__init__()
        self.board_dir = board_dir
        self.story_code = story_code
        self.config = config
        self.strict = config.strict_validation
        self.story: Optional[Story] = None
        self._load_error_notified = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield Container(
            VerticalScroll(TaskListWidget(id="tasks"), id="tasks-box"),
            Container(ReportWidget(id="report"), id="report-box"),
            id="main-container",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_data()
        self.set_interval(POLL_INTERVAL_SECONDS, self.refresh_data)

    def refresh_data(self) -> None:
        """Reload the story, its tasks and the gate report from files."""
        story = load_story(self.board_dir, self.story_code)
        if story is None:
            if not self._load_error_notified:
                self.notify(f"Story {self.story_code} not found", severity="error")
                self._load_error_notified = True
            return

        try:
            report = validate_story(
                self.board_dir,
                self.story_code,
                strict=self.strict,
                expect_managed=self.config.require_agent_definitions,
                known_roles=load_role_vocabulary(self.board_dir).roles,
            )
        except StoryNotFound:
            return
        self._load_error_notified = False
        self.story = story

        self.query_one("#tasks", TaskListWidget).tasks = list_tasks(self.board_dir, self.story_code)
        self.query_one("#report", ReportWidget).report = report

        self.title = f"board watch: {story.code}"
        self.sub_title = story.title

    def action_refresh(self) -> None:
        self.refresh_data()

    def action_toggle_strict(self) -> None:
        self.strict = not self.strict
        self.notify(f"Strict validation {'on' if self.strict else 'off'}", severity="information")
        self.refresh_data()


def cmd_watch(args, board_dir: Path, config: BoardConfig) -> int:
    """Watch a story."""
    if load_story(board_dir, args.code) is None:
        print(f"ERROR: Story not found: {args.code}")
        return 2

    app = WatchApp(board_dir, args.code, config)
    app.run()
    return 0
