"""Pydantic models for the Trellis task service."""

from trellis.models.requests import (
    BulkTaskCreateInput,
    ResponseFormat,
    SingleTaskCreateInput,
    TaskCreateInput,
    TaskCreateItem,
    parse_task_create_input,
)
from trellis.models.tasks import (
    Project,
    ProjectStatus,
    RelationshipType,
    Task,
    TaskPriority,
    TaskStatus,
)

__all__ = [
    "BulkTaskCreateInput",
    "Project",
    "ProjectStatus",
    "RelationshipType",
    "ResponseFormat",
    "SingleTaskCreateInput",
    "Task",
    "TaskCreateInput",
    "TaskCreateItem",
    "TaskPriority",
    "TaskStatus",
    "parse_task_create_input",
]
