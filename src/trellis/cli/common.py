"""Console output helpers shared by the trellis commands."""

import asyncio
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from trellis.errors import GraphConnectionError, TrellisError
from trellis.models.tasks import TaskPriority, TaskStatus

# Palette
PRIMARY = "#7aa2f7"
SECONDARY = "#9ece6a"
ACCENT = "#e0af68"
SUCCESS = "#73daca"
DANGER = "#f7768e"

STATUS_STYLES: dict[str, str] = {
    TaskStatus.BACKLOG: "dim",
    TaskStatus.TODO: SECONDARY,
    TaskStatus.DOING: PRIMARY,
    TaskStatus.BLOCKED: DANGER,
    TaskStatus.REVIEW: ACCENT,
    TaskStatus.DONE: SUCCESS,
}

PRIORITY_STYLES: dict[str, str] = {
    TaskPriority.CRITICAL: f"bold {DANGER}",
    TaskPriority.HIGH: DANGER,
    TaskPriority.MEDIUM: ACCENT,
    TaskPriority.LOW: SECONDARY,
    TaskPriority.SOMEDAY: "dim",
}

console = Console()

P = ParamSpec("P")
R = TypeVar("R")


def success(message: str) -> None:
    console.print(f"[{SUCCESS}]✓[/{SUCCESS}] {message}")


def error(message: str) -> None:
    console.print(f"[{DANGER}]✗[/{DANGER}] {message}")


def print_db_hint() -> None:
    """Point at the usual cause of a failed graph call."""
    console.print(f"[{ACCENT}]Hint:[/{ACCENT}] is FalkorDB reachable? Start it with")
    console.print(f"  [{PRIMARY}]docker run -p 6380:6379 falkordb/falkordb[/{PRIMARY}]")


def print_trellis_error(exc: TrellisError) -> None:
    """Print a classified error with its code and details.

    Validation details are expanded to one ``field.path: message`` line each.
    """
    error(f"{exc.code.value}: {exc.message}")
    for key, value in exc.details.items():
        if key == "errors" and isinstance(value, list):
            for item in value:
                loc = ".".join(str(part) for part in item.get("loc", ()))
                console.print(f"  [{DANGER}]-[/{DANGER}] {loc}: {item.get('msg', '')}")
        else:
            console.print(f"  [dim]{key}:[/dim] {value}")
    if isinstance(exc, GraphConnectionError):
        print_db_hint()


def create_table(title: str | None, *columns: str) -> Table:
    table = Table(title=title, border_style=PRIMARY)
    for position, column in enumerate(columns):
        table.add_column(column, style=ACCENT if position == 0 else None)
    return table


def create_panel(content: str, title: str | None = None) -> Panel:
    return Panel(
        content,
        title=f"[bold {PRIMARY}]{title}[/bold {PRIMARY}]" if title else None,
        border_style=PRIMARY,
    )


def spinner(description: str) -> Progress:
    """Transient spinner labelled with ``description``."""
    progress = Progress(
        SpinnerColumn(style=PRIMARY),
        TextColumn("{task.description}"),
        console=console,
        transient=True,
    )
    progress.add_task(description, total=None)
    return progress


def run_async(func: Callable[P, Awaitable[R]]) -> Callable[P, R]:
    """Run a coroutine function to completion from a sync Typer command.

    The shared graph connection is closed before the event loop ends.
    """

    async def run_and_close(*args: P.args, **kwargs: P.kwargs) -> R:
        from trellis.graph.client import close_graph_client

        try:
            return await func(*args, **kwargs)
        finally:
            await close_graph_client()

    @wraps(func)
    def runner(*args: P.args, **kwargs: P.kwargs) -> R:
        return asyncio.run(run_and_close(*args, **kwargs))

    return runner


def format_status(status: str) -> str:
    style = STATUS_STYLES.get(status, SECONDARY)
    return f"[{style}]{status}[/{style}]"


def format_priority(priority: str) -> str:
    style = PRIORITY_STYLES.get(priority, SECONDARY)
    return f"[{style}]{priority}[/{style}]"
