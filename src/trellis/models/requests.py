"""Input schema for task creation.

A request is either a single task (``mode="single"``, the default) or a bulk
batch (``mode="bulk"`` with a ``tasks`` list). Field names are snake_case;
camelCase aliases are accepted so MCP clients can send ``projectId`` etc.
"""

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    PrivateAttr,
    Tag,
    TypeAdapter,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from trellis.config import settings
from trellis.models.tasks import TaskPriority, TaskStatus

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 10000


class ResponseFormat(StrEnum):
    """Output shape of a tool response."""

    STRUCTURED = "structured"
    JSON = "json"


def _default_response_format() -> ResponseFormat:
    return ResponseFormat(settings.default_response_format)


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class TaskCreateItem(_RequestModel):
    """Fields describing one task to create."""

    id: str | None = Field(default=None, min_length=1, description="Client-supplied task ID")
    project_id: str = Field(min_length=1)
    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str | None = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    assigned_to: str | None = None
    urls: list[str] | None = None
    tags: list[str] | None = None
    completion_requirements: str | None = None
    output_format: str | None = None
    task_type: str | None = None
    dependencies: list[str] | None = None

    _submitted: dict[str, Any] | None = PrivateAttr(default=None)

    @model_validator(mode="wrap")
    @classmethod
    def keep_submitted(cls, data: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        item = handler(data)
        if isinstance(data, dict):
            item._submitted = dict(data)
        return item

    def store_fields(self) -> dict[str, Any]:
        """Fields handed to ``TaskService.create_task`` with defaults applied."""
        return {
            "id": self.id,
            "project_id": self.project_id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority or TaskPriority.MEDIUM,
            "status": self.status or TaskStatus.TODO,
            "assigned_to": self.assigned_to,
            "urls": self.urls or [],
            "tags": self.tags or [],
            "completion_requirements": self.completion_requirements,
            "output_format": self.output_format,
            "task_type": self.task_type,
        }

    def as_submitted(self) -> dict[str, Any]:
        """The item as the client sent it, for error reporting.

        Items built in Python rather than parsed from a mapping fall back to
        the fields that were set.
        """
        if self._submitted is not None:
            return dict(self._submitted)
        return self.model_dump(mode="json", exclude_unset=True)


class SingleTaskCreateInput(TaskCreateItem):
    """Create one task."""

    mode: Literal["single"] = "single"
    response_format: ResponseFormat = Field(default_factory=_default_response_format)

    @field_validator("mode", mode="before")
    @classmethod
    def null_mode_is_single(cls, value: Any) -> Any:
        return "single" if value is None else value


class BulkTaskCreateInput(_RequestModel):
    """Create several tasks in one call."""

    mode: Literal["bulk"]
    tasks: list[TaskCreateItem] = Field(min_length=1)
    response_format: ResponseFormat = Field(default_factory=_default_response_format)

    @field_validator("tasks")
    @classmethod
    def check_batch_size(cls, tasks: list[TaskCreateItem]) -> list[TaskCreateItem]:
        if len(tasks) > settings.max_bulk_tasks:
            raise ValueError(f"A bulk request accepts at most {settings.max_bulk_tasks} tasks")
        return tasks


def _request_mode(value: Any) -> str:
    if isinstance(value, dict):
        return value.get("mode") or "single"
    return getattr(value, "mode", "single")


TaskCreateInput = Annotated[
    Annotated[SingleTaskCreateInput, Tag("single")] | Annotated[BulkTaskCreateInput, Tag("bulk")],
    Discriminator(_request_mode),
]

_input_adapter: TypeAdapter[SingleTaskCreateInput | BulkTaskCreateInput] = TypeAdapter(
    TaskCreateInput
)


def parse_task_create_input(data: Any) -> SingleTaskCreateInput | BulkTaskCreateInput:
    """Validate raw input into a single or bulk request.

    Raises:
        pydantic.ValidationError: If the input does not match either shape.
    """
    return _input_adapter.validate_python(data)
