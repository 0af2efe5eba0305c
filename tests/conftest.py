"""Pytest configuration and fixtures."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from trellis.errors import EntityNotFoundError, GraphOperationError
from trellis.models.tasks import Project, Task
from trellis.tools.create_task import TaskInitializer


@pytest.fixture
def project_service() -> MagicMock:
    """Mock ProjectService backed by a dict, holding project P1."""
    service = MagicMock()
    service.projects = {"P1": Project(id="P1", name="Platform")}

    async def get_project_by_id(project_id: str) -> Project | None:
        return service.projects.get(project_id)

    service.get_project_by_id = AsyncMock(side_effect=get_project_by_id)
    return service


@pytest.fixture
def task_service() -> MagicMock:
    """Mock TaskService that stores tasks and edges in memory.

    Rejects a repeated title within a project the way the graph store does:
    with an unclassified error mentioning "duplicate".
    """
    service = MagicMock()
    service.tasks = {}
    service.edges = []

    async def create_task(fields: dict) -> Task:
        for existing in service.tasks.values():
            if existing.project_id == fields["project_id"] and existing.title == fields["title"]:
                raise GraphOperationError(
                    f"Cannot create task: duplicate title '{fields['title']}'"
                )
        task_id = fields.get("id") or f"task_{len(service.tasks) + 1}"
        data = {k: v for k, v in fields.items() if k not in ("id", "assigned_to")}
        task = Task(id=task_id, assigned_to_user_id=fields.get("assigned_to"), **data)
        service.tasks[task_id] = task
        return task

    async def add_task_dependency(task_id: str, depends_on_id: str) -> None:
        if depends_on_id not in service.tasks:
            raise EntityNotFoundError("Task", depends_on_id)
        service.edges.append((task_id, depends_on_id))

    service.create_task = AsyncMock(side_effect=create_task)
    service.add_task_dependency = AsyncMock(side_effect=add_task_dependency)
    return service


@pytest.fixture
def initializer(project_service: MagicMock, task_service: MagicMock) -> TaskInitializer:
    """TaskInitializer wired to the in-memory stores."""
    return TaskInitializer(project_service, task_service)


@pytest.fixture
def graph_client() -> MagicMock:
    """Mock GraphClient with awaitable query methods and a real write lock."""
    client = MagicMock()
    client.write_lock = asyncio.Lock()
    client.execute = AsyncMock(return_value=[])
    client.execute_read = AsyncMock(return_value=[])
    client.execute_write = AsyncMock(return_value=[])
    return client
