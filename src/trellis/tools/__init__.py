"""MCP tool implementations.

- create_task: single and bulk task creation with dependency linking
- formatting: response shaping and rendering
- admin: health and diagnostics
"""

from trellis.tools.admin import HealthStatus, health_check, mark_server_started
from trellis.tools.create_task import (
    BulkResult,
    CreatedItem,
    CreateTasksResponse,
    FailedItem,
    TaskInitializer,
    create_tasks,
    is_duplicate_error,
    normalize_error,
)
from trellis.tools.formatting import (
    format_task_create_response,
    render_json,
    render_response,
    shape_task,
)

__all__ = [
    # Admin
    "HealthStatus",
    "health_check",
    "mark_server_started",
    # Task creation
    "BulkResult",
    "CreateTasksResponse",
    "CreatedItem",
    "FailedItem",
    "TaskInitializer",
    "create_tasks",
    "is_duplicate_error",
    "normalize_error",
    # Formatting
    "format_task_create_response",
    "render_json",
    "render_response",
    "shape_task",
]
