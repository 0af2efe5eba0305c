"""Main CLI application - ties all subcommands together.

This is the entry point for the trellis CLI.
"""

import typer

from trellis.cli.common import (
    ACCENT,
    DANGER,
    PRIMARY,
    SUCCESS,
    console,
    create_panel,
    create_table,
    run_async,
    spinner,
)
from trellis.cli.project import app as project_app
from trellis.cli.task import app as task_app

app = typer.Typer(
    name="trellis",
    help="Trellis - graph-backed project and task management",
    add_completion=False,
    no_args_is_help=True,
)

app.add_typer(task_app, name="task")
app.add_typer(project_app, name="project")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Host to bind to"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on"),
    transport: str | None = typer.Option(
        None,
        "--transport",
        "-t",
        help="Transport type (streamable-http, sse, stdio)",
    ),
) -> None:
    """Start the Trellis MCP server daemon.

    Examples:
        trellis serve                    # Settings defaults
        trellis serve -p 9000            # Custom port
        trellis serve -t stdio           # Subprocess mode
    """
    from trellis.main import run_server

    try:
        run_server(host=host, port=port, transport=transport)
    except KeyboardInterrupt:
        console.print(f"\n[{PRIMARY}]Shutting down...[/{PRIMARY}]")


@app.command()
def health() -> None:
    """Check graph connectivity and entity counts."""

    @run_async
    async def _health() -> None:
        from trellis.tools.admin import health_check

        with spinner("Checking health..."):
            status = await health_check()

        table = create_table("Health Status", "Metric", "Value")
        status_color = SUCCESS if status.status == "healthy" else DANGER
        table.add_row("Status", f"[{status_color}]{status.status}[/{status_color}]")
        table.add_row("Server", status.server_name)
        table.add_row("Graph Connected", "Yes" if status.graph_connected else "No")
        for entity_type, count in status.entity_counts.items():
            table.add_row(f"Entities: {entity_type}", str(count))
        console.print(table)

        if status.errors:
            console.print(f"\n[{DANGER}]Errors:[/{DANGER}]")
            for err in status.errors:
                console.print(f"  [{DANGER}]•[/{DANGER}] {err}")

    _health()


@app.command("config")
def show_config() -> None:
    """Show current configuration."""
    from trellis.config import settings

    table = create_table("Configuration", "Setting", "Value")
    table.add_row("Server Name", settings.server_name)
    table.add_row("Server", f"{settings.server_host}:{settings.server_port}")
    table.add_row("Transport", settings.transport)
    table.add_row("Log Level", settings.log_level)
    table.add_row("FalkorDB Host", settings.falkordb_host)
    table.add_row("FalkorDB Port", str(settings.falkordb_port))
    table.add_row("Graph Name", settings.falkordb_graph_name)
    table.add_row("Response Format", settings.default_response_format)
    table.add_row("Max Bulk Tasks", str(settings.max_bulk_tasks))
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from trellis import __version__

    console.print(
        create_panel(
            f"[{ACCENT}]Trellis[/{ACCENT}] [{PRIMARY}]Task graph service[/{PRIMARY}]\n"
            f"Version {__version__}"
        )
    )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
