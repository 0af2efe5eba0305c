"""Task creation and dependency edges in the graph."""

import uuid
from typing import Any

import structlog

from trellis.errors import EntityNotFoundError, GraphOperationError, ProjectNotFoundError
from trellis.graph.client import GraphClient
from trellis.models.tasks import RelationshipType, Task, TaskPriority, TaskStatus, utcnow

log = structlog.get_logger()


class TaskService:
    """Create ``Task`` nodes and ``DEPENDS_ON`` edges between them.

    A task is written together with its ``BELONGS_TO`` edge to the project.
    Title collisions inside a project and reused task IDs are rejected with a
    plain ``GraphOperationError``; callers classify them by message.
    """

    def __init__(self, client: GraphClient) -> None:
        self._client = client

    async def get_task(self, task_id: str) -> Task | None:
        records = await self._client.execute_read(
            "MATCH (t:Task {id: $task_id}) RETURN properties(t) AS task LIMIT 1",
            task_id=task_id,
        )
        if not records:
            return None
        return Task.model_validate(records[0]["task"])

    async def create_task(self, fields: dict[str, Any]) -> Task:
        """Create a task under its project.

        Args:
            fields: Task fields; ``id`` is optional (generated when absent) and
                ``assigned_to`` is stored as ``assigned_to_user_id``.

        Returns:
            The stored task.

        Raises:
            GraphOperationError: On a duplicate title or an ID already in use.
            ProjectNotFoundError: If the project disappeared before the write.
        """
        task_id = fields.get("id") or str(uuid.uuid4())
        project_id = fields["project_id"]
        title = fields["title"]

        now = utcnow()
        task = Task(
            id=task_id,
            project_id=project_id,
            title=title,
            description=fields.get("description"),
            priority=fields.get("priority") or TaskPriority.MEDIUM,
            status=fields.get("status") or TaskStatus.TODO,
            assigned_to_user_id=fields.get("assigned_to"),
            urls=list(fields.get("urls") or []),
            tags=list(fields.get("tags") or []),
            completion_requirements=fields.get("completion_requirements"),
            output_format=fields.get("output_format"),
            task_type=fields.get("task_type"),
            created_at=now,
            updated_at=now,
        )

        log.debug("Creating task node", task_id=task_id, project_id=project_id)
        # Check and create under one lock so concurrent calls cannot both pass the check
        async with self._client.write_lock:
            await self._check_unique(task_id, project_id, title)
            records = await self._client.execute(
                f"""
                MATCH (p:Project {{id: $project_id}})
                CREATE (t:Task {{
                    id: $id,
                    project_id: $project_id,
                    title: $title,
                    description: $description,
                    priority: $priority,
                    status: $status,
                    assigned_to_user_id: $assigned_to_user_id,
                    urls: $urls,
                    tags: $tags,
                    completion_requirements: $completion_requirements,
                    output_format: $output_format,
                    task_type: $task_type,
                    created_at: $created_at,
                    updated_at: $updated_at
                }})-[:{RelationshipType.BELONGS_TO}]->(p)
                RETURN t.id AS id
                """,
                **task.model_dump(mode="json"),
            )
        if not records:
            raise ProjectNotFoundError(project_id)
        return task

    async def add_task_dependency(self, task_id: str, depends_on_id: str) -> None:
        """Create ``(task)-[:DEPENDS_ON]->(dependency)``.

        Raises:
            GraphOperationError: If a task is made to depend on itself.
            EntityNotFoundError: If either task does not exist.
        """
        if task_id == depends_on_id:
            raise GraphOperationError(f"Task {task_id} cannot depend on itself")

        for candidate in (task_id, depends_on_id):
            if not await self._task_exists(candidate):
                raise EntityNotFoundError("Task", candidate)

        await self._client.execute_write(
            f"""
            MATCH (t:Task {{id: $task_id}}), (d:Task {{id: $depends_on_id}})
            MERGE (t)-[r:{RelationshipType.DEPENDS_ON}]->(d)
            ON CREATE SET r.id = $rel_id, r.created_at = $created_at
            """,
            task_id=task_id,
            depends_on_id=depends_on_id,
            rel_id=f"rel_{task_id}_depends_on_{depends_on_id}",
            created_at=utcnow().isoformat(),
        )
        log.debug("Dependency created", task_id=task_id, depends_on_id=depends_on_id)

    async def _task_exists(self, task_id: str) -> bool:
        records = await self._client.execute_read(
            "MATCH (t:Task {id: $task_id}) RETURN t.id AS id LIMIT 1",
            task_id=task_id,
        )
        return bool(records)

    async def _check_unique(self, task_id: str, project_id: str, title: str) -> None:
        records = await self._client.execute_read(
            """
            MATCH (t:Task)
            WHERE t.id = $task_id OR (t.project_id = $project_id AND t.title = $title)
            RETURN t.id AS id
            """,
            task_id=task_id,
            project_id=project_id,
            title=title,
        )
        if not records:
            return
        if any(record["id"] == task_id for record in records):
            raise GraphOperationError(f"Task ID already in use: {task_id}")
        raise GraphOperationError(
            f"Cannot create task: duplicate title '{title}' in project {project_id}"
        )
