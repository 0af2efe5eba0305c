"""Project lookups and creation in the graph."""

import uuid

import structlog

from trellis.graph.client import GraphClient
from trellis.models.tasks import Project, ProjectStatus, utcnow

log = structlog.get_logger()


class ProjectService:
    """Read and create ``Project`` nodes."""

    def __init__(self, client: GraphClient) -> None:
        self._client = client

    async def get_project_by_id(self, project_id: str) -> Project | None:
        """Fetch a project, or ``None`` when no project has this ID."""
        records = await self._client.execute_read(
            "MATCH (p:Project {id: $project_id}) RETURN properties(p) AS project LIMIT 1",
            project_id=project_id,
        )
        if not records:
            log.debug("Project not found", project_id=project_id)
            return None
        return Project.model_validate(records[0]["project"])

    async def create_project(
        self,
        name: str,
        description: str = "",
        *,
        project_id: str | None = None,
    ) -> Project:
        """Create a project node and return it."""
        now = utcnow()
        project = Project(
            id=project_id or str(uuid.uuid4()),
            name=name,
            description=description,
            status=ProjectStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )
        log.info("Creating project", project_id=project.id, name=name)

        await self._client.execute_write(
            """
            CREATE (p:Project {
                id: $id,
                name: $name,
                description: $description,
                status: $status,
                created_at: $created_at,
                updated_at: $updated_at
            })
            """,
            id=project.id,
            name=project.name,
            description=project.description,
            status=project.status.value,
            created_at=now.isoformat(),
            updated_at=now.isoformat(),
        )
        return project
