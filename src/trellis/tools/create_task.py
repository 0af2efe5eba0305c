"""Task creation tool.

Creates one task or a bulk batch of tasks under existing projects:

    validate -> branch on mode -> per task: verify project -> create task
    -> link dependencies (best effort) -> accumulate -> format

Bulk items are processed strictly in submission order, so a task may depend
on one created earlier in the same batch. A failing item becomes an entry in
``errors``; it never aborts the batch. Dependency-link failures are logged and
otherwise ignored in both modes.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError
from structlog.stdlib import BoundLogger

from trellis.errors import (
    DuplicateNameError,
    ErrorCode,
    ProjectNotFoundError,
    TrellisError,
    ValidationError,
)
from trellis.graph.client import get_graph_client
from trellis.graph.projects import ProjectService
from trellis.graph.tasks import TaskService
from trellis.models.requests import (
    BulkTaskCreateInput,
    ResponseFormat,
    SingleTaskCreateInput,
    TaskCreateItem,
    parse_task_create_input,
)
from trellis.models.tasks import Task
from trellis.tools.formatting import render_response, shape_task

log = structlog.get_logger()


# =============================================================================
# Results
# =============================================================================


@dataclass
class CreatedItem:
    """A batch item whose task was created."""

    index: int
    task: Task


@dataclass
class FailedItem:
    """A batch item that could not be created."""

    index: int
    task: dict[str, Any]
    error: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "task": self.task, "error": self.error}


ItemOutcome = CreatedItem | FailedItem


@dataclass
class BulkResult:
    """Accumulated outcomes of one bulk call."""

    total: int
    created: list[Task] = field(default_factory=list)
    errors: list[FailedItem] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        if self.success:
            return f"Successfully created {self.total} tasks"
        return (
            f"Created {len(self.created)} of {self.total} tasks with {len(self.errors)} errors"
        )

    def record(self, outcome: ItemOutcome) -> None:
        if isinstance(outcome, CreatedItem):
            self.created.append(outcome.task)
        else:
            self.errors.append(outcome)

    def to_payload(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "created": [shape_task(task.to_payload()) for task in self.created],
            "errors": [entry.to_dict() for entry in self.errors],
        }


@dataclass
class CreateTasksResponse:
    """Rendered response plus the canonical payload it was rendered from."""

    payload: dict[str, Any]
    text: str
    response_format: ResponseFormat


# =============================================================================
# Error normalization
# =============================================================================


def is_duplicate_error(exc: BaseException) -> bool:
    """Whether an unclassified store error reports a title collision.

    The task store surfaces uniqueness violations only through its message.
    """
    return "duplicate" in str(exc).lower()


def normalize_error(
    exc: BaseException,
    *,
    title: str | None = None,
    project_id: str | None = None,
    context: str | None = None,
) -> TrellisError:
    """Map any exception onto a classified ``TrellisError``.

    Classified errors pass through unchanged. Unclassified duplicate errors
    become ``DuplicateNameError``; anything else is an internal error keeping
    the original message (prefixed with ``context`` when given).
    """
    if isinstance(exc, TrellisError):
        return exc
    if is_duplicate_error(exc):
        return DuplicateNameError(title, project_id)
    message = str(exc) or "Unknown error"
    if context:
        message = f"{context}: {message}"
    return TrellisError(message, code=ErrorCode.INTERNAL_ERROR)


def _error_subject(
    request: SingleTaskCreateInput | BulkTaskCreateInput | None,
) -> tuple[str | None, str | None]:
    if isinstance(request, SingleTaskCreateInput):
        return request.title, request.project_id
    if isinstance(request, BulkTaskCreateInput) and request.tasks:
        return request.tasks[0].title, request.tasks[0].project_id
    return None, None


# =============================================================================
# Orchestrator
# =============================================================================


class TaskInitializer:
    """Creates tasks in single or bulk mode against project and task stores."""

    def __init__(self, projects: ProjectService, tasks: TaskService) -> None:
        self._projects = projects
        self._tasks = tasks

    async def create_tasks(
        self,
        input_data: Any,
        *,
        request_id: str | None = None,
    ) -> CreateTasksResponse:
        """Validate ``input_data`` and create the task(s) it describes.

        Raises:
            ValidationError: If the input matches neither request shape.
            ProjectNotFoundError: Single mode, when the project does not exist.
            TrellisError: Any other failure outside the per-item bulk loop.
        """
        ctx_log = log.bind(
            request_id=request_id or uuid.uuid4().hex[:12],
            tool_name="create_tasks",
        )
        request: SingleTaskCreateInput | BulkTaskCreateInput | None = None

        try:
            request = self._validate(input_data, ctx_log)
            if isinstance(request, BulkTaskCreateInput):
                payload = await self._create_bulk(request, ctx_log)
            else:
                payload = await self._create_single(request, ctx_log)

            return CreateTasksResponse(
                payload=payload,
                text=render_response(payload, request.response_format),
                response_format=request.response_format,
            )

        except TrellisError:
            raise
        except Exception as e:
            ctx_log.exception(
                "Failed to initialize task(s)",
                input_received=request.model_dump(mode="json") if request else input_data,
            )
            title, project_id = _error_subject(request)
            raise normalize_error(
                e, title=title, project_id=project_id, context="Error creating task(s)"
            ) from e

    def _validate(
        self, input_data: Any, ctx_log: BoundLogger
    ) -> SingleTaskCreateInput | BulkTaskCreateInput:
        try:
            return parse_task_create_input(input_data)
        except PydanticValidationError as e:
            ctx_log.warning("Invalid task creation input", error_count=e.error_count())
            raise ValidationError(
                "Invalid task creation input",
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from e

    async def _create_single(
        self, request: SingleTaskCreateInput, ctx_log: BoundLogger
    ) -> dict[str, Any]:
        ctx_log.info("Initializing new task", title=request.title, project_id=request.project_id)

        await self._require_project(request.project_id)
        task = await self._tasks.create_task(request.store_fields())
        await self._link_dependencies(task.id, request.dependencies or [], ctx_log)

        ctx_log.info("Task initialized successfully", task_id=task.id, project_id=task.project_id)
        return shape_task(task.to_payload())

    async def _create_bulk(
        self, request: BulkTaskCreateInput, ctx_log: BoundLogger
    ) -> dict[str, Any]:
        ctx_log.info("Initializing multiple tasks", count=len(request.tasks))

        result = BulkResult(total=len(request.tasks))
        # Sequential on purpose: later items may depend on earlier ones
        for index, item in enumerate(request.tasks):
            result.record(await self._create_item(index, item, ctx_log))

        ctx_log.info(
            "Bulk task initialization completed",
            success_count=len(result.created),
            error_count=len(result.errors),
            task_ids=[task.id for task in result.created],
        )
        return result.to_payload()

    async def _create_item(
        self,
        index: int,
        item: TaskCreateItem,
        ctx_log: BoundLogger,
    ) -> ItemOutcome:
        try:
            await self._require_project(item.project_id)
            task = await self._tasks.create_task(item.store_fields())
        except Exception as e:
            error = normalize_error(e, title=item.title, project_id=item.project_id)
            ctx_log.warning(
                "Bulk item failed",
                index=index,
                code=error.code.value,
                error=error.message,
            )
            return FailedItem(index=index, task=item.as_submitted(), error=error.to_dict())

        await self._link_dependencies(task.id, item.dependencies or [], ctx_log)
        return CreatedItem(index=index, task=task)

    async def _require_project(self, project_id: str) -> None:
        if await self._projects.get_project_by_id(project_id) is None:
            raise ProjectNotFoundError(project_id)

    async def _link_dependencies(
        self,
        task_id: str,
        dependency_ids: list[str],
        ctx_log: BoundLogger,
    ) -> None:
        for dependency_id in dependency_ids:
            try:
                await self._tasks.add_task_dependency(task_id, dependency_id)
            except Exception as e:
                ctx_log.warning(
                    f"Failed to create dependency for task {task_id} to {dependency_id}",
                    task_id=task_id,
                    dependency_id_attempted=dependency_id,
                    original_error_message=str(e),
                    exc_info=True,
                )


async def create_tasks(input_data: Any, *, request_id: str | None = None) -> CreateTasksResponse:
    """Create task(s) against the process-wide graph client."""
    client = await get_graph_client()
    initializer = TaskInitializer(ProjectService(client), TaskService(client))
    return await initializer.create_tasks(input_data, request_id=request_id)
