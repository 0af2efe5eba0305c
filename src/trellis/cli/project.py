"""Project CLI commands.

Commands: create.
"""

from typing import Annotated

import typer

from trellis.cli.common import (
    console,
    create_panel,
    error,
    print_db_hint,
    print_trellis_error,
    run_async,
    spinner,
    success,
)
from trellis.errors import TrellisError

app = typer.Typer(
    name="project",
    help="Project management",
    no_args_is_help=True,
)


@app.command("create")
def create_project(
    name: Annotated[str, typer.Argument(help="Project name")],
    description: Annotated[
        str, typer.Option("--description", "-d", help="Project description")
    ] = "",
    project_id: Annotated[str | None, typer.Option("--id", help="Client-supplied project ID")] = None,
) -> None:
    """Create a project that tasks can be added to."""

    @run_async
    async def _create() -> None:
        from trellis.graph import ProjectService, get_graph_client

        try:
            with spinner("Creating project..."):
                client = await get_graph_client()
                project = await ProjectService(client).create_project(
                    name, description, project_id=project_id
                )
        except TrellisError as e:
            print_trellis_error(e)
            raise typer.Exit(code=1) from e
        except Exception as e:
            error(f"Failed to create project: {e}")
            print_db_hint()
            raise typer.Exit(code=1) from e

        success(f"Project created: {project.id}")
        console.print(create_panel(project.description or "[dim]No description[/dim]", title=project.name))

    _create()
