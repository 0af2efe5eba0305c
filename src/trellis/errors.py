"""Custom exceptions for the Trellis task service.

Every condition surfaced to callers is a ``TrellisError`` carrying a ``code``
from the closed ``ErrorCode`` enumeration. Failures raised by the graph layer
that have not been classified yet use ``GraphOperationError``, which is
deliberately *not* a ``TrellisError``.
"""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Closed set of error codes exposed to callers."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    GRAPH_CONNECTION_ERROR = "GRAPH_CONNECTION_ERROR"
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"
    DUPLICATE_NAME = "DUPLICATE_NAME"
    TASK_NOT_FOUND = "TASK_NOT_FOUND"


class TrellisError(Exception):
    """Base exception for all classified Trellis errors."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the ``{code, message, details?}`` error descriptor."""
        data: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details:
            data["details"] = self.details
        return data


class ValidationError(TrellisError):
    """Raised when input validation fails."""

    code = ErrorCode.VALIDATION_ERROR


class GraphConnectionError(TrellisError):
    """Raised when unable to connect to the graph database."""

    code = ErrorCode.GRAPH_CONNECTION_ERROR


class EntityNotFoundError(TrellisError):
    """Raised when a requested entity is not found in the graph."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, entity_type: str, identifier: str) -> None:
        super().__init__(
            f"{entity_type} not found: {identifier}",
            details={"entity_type": entity_type, "identifier": identifier},
        )


class ProjectNotFoundError(TrellisError):
    """Raised when a task references a project that does not exist."""

    code = ErrorCode.PROJECT_NOT_FOUND

    def __init__(self, project_id: str) -> None:
        super().__init__(
            f"Project with ID {project_id} not found",
            details={"project_id": project_id},
        )


class DuplicateNameError(TrellisError):
    """Raised when a task title already exists within its project."""

    code = ErrorCode.DUPLICATE_NAME

    def __init__(self, title: str | None, project_id: str | None) -> None:
        super().__init__(
            "A task with this title already exists in the project",
            details={"title": title, "project_id": project_id},
        )


class GraphOperationError(Exception):
    """Unclassified failure raised by a graph store operation."""
