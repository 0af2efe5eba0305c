"""Tests for the graph services and client."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from trellis.errors import (
    EntityNotFoundError,
    GraphConnectionError,
    GraphOperationError,
    ProjectNotFoundError,
)
from trellis.graph.client import GraphClient
from trellis.graph.projects import ProjectService
from trellis.graph.tasks import TaskService
from trellis.models.tasks import ProjectStatus, TaskPriority, TaskStatus

TASK_FIELDS = {
    "id": None,
    "project_id": "P1",
    "title": "Write docs",
    "description": None,
    "priority": TaskPriority.MEDIUM,
    "status": TaskStatus.TODO,
    "assigned_to": "u1",
    "urls": [],
    "tags": ["docs"],
    "completion_requirements": None,
    "output_format": None,
    "task_type": None,
}


class TestProjectService:
    """Tests for project lookups."""

    @pytest.mark.asyncio
    async def test_get_missing_project(self, graph_client: MagicMock) -> None:
        assert await ProjectService(graph_client).get_project_by_id("P1") is None

    @pytest.mark.asyncio
    async def test_get_project(self, graph_client: MagicMock) -> None:
        graph_client.execute_read.return_value = [
            {
                "project": {
                    "id": "P1",
                    "name": "Platform",
                    "description": "",
                    "status": "active",
                    "created_at": "2026-01-01T00:00:00+00:00",
                    "updated_at": "2026-01-01T00:00:00+00:00",
                }
            }
        ]

        project = await ProjectService(graph_client).get_project_by_id("P1")

        assert project is not None
        assert project.name == "Platform"
        assert graph_client.execute_read.await_args.kwargs == {"project_id": "P1"}

    @pytest.mark.asyncio
    async def test_create_project(self, graph_client: MagicMock) -> None:
        project = await ProjectService(graph_client).create_project("Platform", project_id="P1")

        assert project.id == "P1"
        assert project.status == ProjectStatus.ACTIVE
        params = graph_client.execute_write.await_args.kwargs
        assert params["id"] == "P1"
        assert params["name"] == "Platform"


class TestTaskService:
    """Tests for task and dependency writes."""

    @pytest.mark.asyncio
    async def test_create_task(self, graph_client: MagicMock) -> None:
        graph_client.execute.return_value = [{"id": "generated"}]

        task = await TaskService(graph_client).create_task(dict(TASK_FIELDS))

        assert task.title == "Write docs"
        assert task.assigned_to_user_id == "u1"
        assert task.id
        query = graph_client.execute.await_args.args[0]
        assert "BELONGS_TO" in query
        params = graph_client.execute.await_args.kwargs
        assert params["assigned_to_user_id"] == "u1"
        assert params["tags"] == ["docs"]
        assert params["priority"] == "medium"

    @pytest.mark.asyncio
    async def test_create_task_uses_client_id(self, graph_client: MagicMock) -> None:
        graph_client.execute.return_value = [{"id": "t-client"}]

        task = await TaskService(graph_client).create_task({**TASK_FIELDS, "id": "t-client"})

        assert task.id == "t-client"
        assert graph_client.execute.await_args.kwargs["id"] == "t-client"

    @pytest.mark.asyncio
    async def test_duplicate_title_message(self, graph_client: MagicMock) -> None:
        graph_client.execute_read.return_value = [{"id": "existing"}]

        with pytest.raises(GraphOperationError, match="duplicate title"):
            await TaskService(graph_client).create_task(dict(TASK_FIELDS))
        graph_client.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_reused_id_rejected(self, graph_client: MagicMock) -> None:
        graph_client.execute_read.return_value = [{"id": "t1"}]

        with pytest.raises(GraphOperationError, match="already in use") as exc_info:
            await TaskService(graph_client).create_task({**TASK_FIELDS, "id": "t1"})
        assert "duplicate" not in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_project_vanished(self, graph_client: MagicMock) -> None:
        with pytest.raises(ProjectNotFoundError):
            await TaskService(graph_client).create_task(dict(TASK_FIELDS))

    @pytest.mark.asyncio
    async def test_get_task(self, graph_client: MagicMock) -> None:
        graph_client.execute_read.return_value = [
            {"task": {"id": "t1", "project_id": "P1", "title": "A", "status": "doing"}}
        ]

        task = await TaskService(graph_client).get_task("t1")

        assert task is not None
        assert task.status == TaskStatus.DOING

    @pytest.mark.asyncio
    async def test_add_dependency(self, graph_client: MagicMock) -> None:
        graph_client.execute_read.return_value = [{"id": "x"}]

        await TaskService(graph_client).add_task_dependency("a", "b")

        query = graph_client.execute_write.await_args.args[0]
        assert "MERGE" in query and "DEPENDS_ON" in query
        params = graph_client.execute_write.await_args.kwargs
        assert params["task_id"] == "a"
        assert params["depends_on_id"] == "b"
        assert params["rel_id"] == "rel_a_depends_on_b"

    @pytest.mark.asyncio
    async def test_add_dependency_missing_target(self, graph_client: MagicMock) -> None:
        graph_client.execute_read.side_effect = [[{"id": "a"}], []]

        with pytest.raises(EntityNotFoundError, match="Task not found: b"):
            await TaskService(graph_client).add_task_dependency("a", "b")
        graph_client.execute_write.assert_not_called()

    @pytest.mark.asyncio
    async def test_self_dependency_rejected(self, graph_client: MagicMock) -> None:
        with pytest.raises(GraphOperationError):
            await TaskService(graph_client).add_task_dependency("a", "a")


class _InMemoryGraph:
    """Driver double that keeps task nodes in memory and yields on every query."""

    def __init__(self) -> None:
        self.tasks: dict[str, dict] = {}
        self.creates = 0

    async def execute_query(self, query: str, **params):
        await asyncio.sleep(0)
        if "CREATE (t:Task" in query:
            self.creates += 1
            self.tasks[params["id"]] = params
            return [{"id": params["id"]}], ["id"], None
        if "t.id = $task_id OR" in query:
            rows = [
                {"id": task["id"]}
                for task in self.tasks.values()
                if task["id"] == params["task_id"]
                or (task["project_id"] == params["project_id"] and task["title"] == params["title"])
            ]
            return rows, ["id"], None
        return [], [], None


class TestConcurrentCreates:
    """Simultaneous creates of the same task write it once."""

    @pytest.mark.asyncio
    async def test_same_client_id(self) -> None:
        graph = _InMemoryGraph()
        service = TaskService(GraphClient(graph))

        results = await asyncio.gather(
            service.create_task({**TASK_FIELDS, "id": "t1"}),
            service.create_task({**TASK_FIELDS, "id": "t1", "title": "Retry"}),
            return_exceptions=True,
        )

        assert graph.creates == 1
        assert sum(isinstance(r, GraphOperationError) for r in results) == 1
        assert "already in use" in str(next(r for r in results if isinstance(r, Exception)))

    @pytest.mark.asyncio
    async def test_same_title_in_project(self) -> None:
        graph = _InMemoryGraph()
        service = TaskService(GraphClient(graph))

        results = await asyncio.gather(
            service.create_task(dict(TASK_FIELDS)),
            service.create_task(dict(TASK_FIELDS)),
            return_exceptions=True,
        )

        assert graph.creates == 1
        assert "duplicate" in str(next(r for r in results if isinstance(r, Exception)))


class TestGraphClient:
    """Tests for the client wrapper."""

    def test_driver_requires_connection(self) -> None:
        with pytest.raises(GraphConnectionError):
            _ = GraphClient().driver

    @pytest.mark.asyncio
    async def test_execute_read_returns_records(self) -> None:
        driver = MagicMock()
        driver.execute_query = AsyncMock(return_value=([{"n": 1}], ["n"], None))

        records = await GraphClient(driver).execute_read("RETURN 1 AS n")

        assert records == [{"n": 1}]

    @pytest.mark.asyncio
    async def test_execute_write_passes_params(self) -> None:
        driver = MagicMock()
        driver.execute_query = AsyncMock(return_value=([], [], None))
        client = GraphClient(driver)

        await client.execute_write("CREATE (n:Thing {id: $id})", id="x")

        driver.execute_query.assert_awaited_once_with("CREATE (n:Thing {id: $id})", id="x")
        assert not client.write_lock.locked()

    @pytest.mark.asyncio
    async def test_close(self) -> None:
        driver = MagicMock()
        driver.close = AsyncMock()
        client = GraphClient(driver)

        await client.close()

        driver.close.assert_awaited_once()
        assert client.is_connected is False
