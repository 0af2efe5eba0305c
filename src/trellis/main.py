"""Entry point for the Trellis MCP server daemon."""

import logging
import sys

import structlog

from trellis import __version__
from trellis.config import settings


def configure_logging(*, json_logs: bool | None = None) -> None:
    """Reconfigure logging for a daemon run.

    Level comes from ``settings.log_level``. Output is one JSON object per line
    unless stderr is a terminal; ``json_logs`` overrides the detection. Every
    event carries the server name.
    """
    if json_logs is None:
        json_logs = not sys.stderr.isatty()

    logging.basicConfig(
        format="%(message)s", stream=sys.stderr, level=settings.log_level, force=True
    )

    renderer: structlog.typing.Processor
    if json_logs:
        exception_processors: list[structlog.typing.Processor] = [
            structlog.processors.dict_tracebacks
        ]
        renderer = structlog.processors.JSONRenderer()
    else:
        # ConsoleRenderer formats exc_info itself
        exception_processors = []
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            *exception_processors,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(server=settings.server_name)


def run_server(
    host: str | None = None,
    port: int | None = None,
    transport: str | None = None,
) -> None:
    """Run the MCP server.

    Args:
        host: Host to bind to (defaults to settings.server_host)
        port: Port to listen on (defaults to settings.server_port)
        transport: Transport type ('streamable-http', 'sse', or 'stdio')
    """
    configure_logging()
    log = structlog.get_logger()

    host = host or settings.server_host
    port = port or settings.server_port
    transport = transport or settings.transport

    from trellis.server import create_mcp_server
    from trellis.tools.admin import mark_server_started

    mark_server_started()

    log.info(
        "Starting Trellis MCP Server",
        version=__version__,
        name=settings.server_name,
        transport=transport,
        host=host,
        port=port,
    )

    mcp = create_mcp_server(host=host, port=port)
    mcp.run(transport=transport)  # type: ignore[arg-type]


def main() -> None:
    """Main entry point for the daemon."""
    run_server()


if __name__ == "__main__":
    main()
