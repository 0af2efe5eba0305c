"""Project and task models stored in the graph."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

# =============================================================================
# Enums
# =============================================================================


class TaskStatus(StrEnum):
    """Workflow state of a task."""

    BACKLOG = "backlog"
    TODO = "todo"
    DOING = "doing"
    BLOCKED = "blocked"
    REVIEW = "review"
    DONE = "done"


class TaskPriority(StrEnum):
    """Relative urgency of a task."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    SOMEDAY = "someday"


class ProjectStatus(StrEnum):
    """Lifecycle state of a project."""

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class RelationshipType(StrEnum):
    """Edge types written by the task service."""

    BELONGS_TO = "BELONGS_TO"
    DEPENDS_ON = "DEPENDS_ON"


def utcnow() -> datetime:
    """Current UTC time."""
    return datetime.now(UTC)


# =============================================================================
# Entities
# =============================================================================


class Project(BaseModel):
    """Parent grouping entity every task belongs to."""

    id: str
    name: str
    description: str = ""
    status: ProjectStatus = ProjectStatus.ACTIVE
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Task(BaseModel):
    """A task record as returned by the task store.

    ``assigned_to_user_id`` is the stored assignee field; it never leaves the
    service under that name (see ``trellis.tools.formatting.shape_task``).
    """

    id: str
    project_id: str
    title: str
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    assigned_to_user_id: str | None = None
    urls: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    completion_requirements: str | None = None
    output_format: str | None = None
    task_type: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def to_payload(self) -> dict[str, Any]:
        """JSON-compatible dict of every stored field."""
        return self.model_dump(mode="json")
