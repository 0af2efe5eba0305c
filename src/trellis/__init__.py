"""Trellis task service.

Graph-backed project and task management, exposed to AI agents as MCP tools.
Creates tasks (one at a time or in bulk) under existing projects and wires
their dependency edges.
"""

import logging
import sys

import structlog

# Third-party loggers that only matter when something breaks
_QUIET_LOGGERS = (
    "graphiti_core.driver.falkordb_driver",
    "httpx",
    "httpcore",
    "mcp",
    "uvicorn.access",
    "uvicorn.error",
)

# Configured before any submodule calls structlog.get_logger().
# Everything goes to stderr; stdout carries command output and the stdio transport.
structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="%H:%M:%S"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty(), pad_event=36),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    cache_logger_on_first_use=False,
)

logging.basicConfig(format="%(name)s: %(message)s", level=logging.INFO, stream=sys.stderr)
for _name in _QUIET_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

from trellis.config import Settings  # noqa: E402

__version__ = "0.1.0"
__all__ = ["Settings", "__version__"]
