"""Task CLI commands.

Commands: create, bulk, show.
"""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.markdown import Markdown

from trellis.cli.common import (
    ACCENT,
    DANGER,
    PRIMARY,
    console,
    create_panel,
    error,
    format_priority,
    format_status,
    print_db_hint,
    print_trellis_error,
    run_async,
    spinner,
)
from trellis.errors import TrellisError

app = typer.Typer(
    name="task",
    help="Task creation and inspection",
    no_args_is_help=True,
)


def _print_response(text: str, as_json: bool) -> None:
    if as_json:
        console.print_json(text)
    else:
        console.print(Markdown(text))


def _load_bulk_file(path: Path) -> list[dict[str, Any]]:
    """Read a list of task objects, either bare or under a "tasks" key."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"{path} is not valid JSON: {e}", param_hint="FILE") from e
    if isinstance(data, dict):
        data = data.get("tasks", [])
    if not isinstance(data, list):
        raise typer.BadParameter(
            "expected a JSON list of tasks or an object with 'tasks'", param_hint="FILE"
        )
    return data


@app.command("create")
def create_task(
    title: Annotated[str, typer.Argument(help="Task title")],
    project: Annotated[str, typer.Option("--project", "-p", help="Project ID")],
    description: Annotated[
        str | None, typer.Option("--description", "-d", help="Task description")
    ] = None,
    priority: Annotated[
        str | None, typer.Option("--priority", help="critical, high, medium, low, someday")
    ] = None,
    status: Annotated[
        str | None, typer.Option("--status", "-s", help="backlog, todo, doing, ...")
    ] = None,
    assignee: Annotated[str | None, typer.Option("--assignee", "-a", help="Assignee")] = None,
    tags: Annotated[list[str] | None, typer.Option("--tag", help="Tag (repeatable)")] = None,
    urls: Annotated[list[str] | None, typer.Option("--url", help="Reference URL (repeatable)")] = None,
    depends_on: Annotated[
        list[str] | None, typer.Option("--depends-on", help="Dependency task ID (repeatable)")
    ] = None,
    task_type: Annotated[str | None, typer.Option("--type", help="Task type")] = None,
    task_id: Annotated[str | None, typer.Option("--id", help="Client-supplied task ID")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the JSON response")] = False,
) -> None:
    """Create a single task in a project."""

    @run_async
    async def _create() -> None:
        from trellis.tools.create_task import create_tasks

        request = {
            "mode": "single",
            "id": task_id,
            "project_id": project,
            "title": title,
            "description": description,
            "priority": priority,
            "status": status,
            "assigned_to": assignee,
            "tags": tags,
            "urls": urls,
            "dependencies": depends_on,
            "task_type": task_type,
            "response_format": "json" if as_json else "structured",
        }
        try:
            with spinner("Creating task..."):
                response = await create_tasks({k: v for k, v in request.items() if v is not None})
        except TrellisError as e:
            print_trellis_error(e)
            raise typer.Exit(code=1) from e

        _print_response(response.text, as_json)

    _create()


@app.command("bulk")
def bulk_create(
    file: Annotated[
        Path,
        typer.Argument(help="JSON file with a list of tasks", exists=True, dir_okay=False),
    ],
    as_json: Annotated[bool, typer.Option("--json", help="Print the JSON response")] = False,
) -> None:
    """Create many tasks from a JSON file, in file order."""

    @run_async
    async def _bulk() -> None:
        from trellis.tools.create_task import create_tasks

        tasks = _load_bulk_file(file)
        try:
            with spinner(f"Creating {len(tasks)} tasks..."):
                response = await create_tasks(
                    {
                        "mode": "bulk",
                        "tasks": tasks,
                        "response_format": "json" if as_json else "structured",
                    }
                )
        except TrellisError as e:
            print_trellis_error(e)
            raise typer.Exit(code=1) from e

        _print_response(response.text, as_json)
        if not response.payload.get("success", False):
            raise typer.Exit(code=1)

    _bulk()


@app.command("show")
def show_task(
    task_id: Annotated[str, typer.Argument(help="Task ID")],
) -> None:
    """Show a stored task."""

    @run_async
    async def _show() -> None:
        from trellis.graph import TaskService, get_graph_client

        try:
            with spinner("Loading task..."):
                client = await get_graph_client()
                task = await TaskService(client).get_task(task_id)
        except TrellisError as e:
            print_trellis_error(e)
            raise typer.Exit(code=1) from e
        except Exception as e:
            error(f"Failed to load task: {e}")
            print_db_hint()
            raise typer.Exit(code=1) from e

        if task is None:
            error(f"Task not found: {task_id}")
            raise typer.Exit(code=1)

        lines = [
            f"[{ACCENT}]Title:[/{ACCENT}] {task.title}",
            f"[{ACCENT}]Project:[/{ACCENT}] {task.project_id}",
            f"[{ACCENT}]Status:[/{ACCENT}] {format_status(task.status)}",
            f"[{ACCENT}]Priority:[/{ACCENT}] {format_priority(task.priority)}",
        ]
        if task.assigned_to_user_id:
            lines.append(f"[{ACCENT}]Assigned To:[/{ACCENT}] {task.assigned_to_user_id}")
        lines.extend(
            ["", f"[{PRIMARY}]Description:[/{PRIMARY}]", task.description or "[dim]No description[/dim]"]
        )
        if task.tags:
            lines.append(f"\n[{DANGER}]Tags:[/{DANGER}] {', '.join(task.tags)}")

        console.print(create_panel("\n".join(lines), title=f"Task {task.id}"))

    _show()
