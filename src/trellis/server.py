"""FastMCP server exposing task creation to agents.

Tools: task_create, project_create. Resource: trellis://health.
Classified errors reach the client as a ToolError whose message is the JSON
error descriptor.
"""

import json
from dataclasses import asdict
from typing import Any, Literal

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from trellis.config import settings
from trellis.errors import TrellisError


def create_mcp_server(
    host: str = "localhost",
    port: int = 3335,
) -> FastMCP:
    """Build a server with every tool and resource registered."""
    mcp = FastMCP(
        settings.server_name,
        host=host,
        port=port,
        stateless_http=False,
    )

    _register_tools(mcp)
    _register_resources(mcp)
    return mcp


def _tool_error(exc: TrellisError) -> ToolError:
    """Carry the error code and details through the MCP error message."""
    return ToolError(json.dumps(exc.to_dict(), default=str))


def _register_tools(mcp: FastMCP) -> None:
    """Register all MCP tools on the server instance."""

    # =========================================================================
    # TOOL 1: task_create
    # =========================================================================

    @mcp.tool()
    async def task_create(
        mode: Literal["single", "bulk"] = "single",
        project_id: str | None = None,
        title: str | None = None,
        description: str | None = None,
        priority: str | None = None,
        status: str | None = None,
        assigned_to: str | None = None,
        urls: list[str] | None = None,
        tags: list[str] | None = None,
        completion_requirements: str | None = None,
        output_format: str | None = None,
        task_type: str | None = None,
        dependencies: list[str] | None = None,
        id: str | None = None,  # noqa: A002 - client-supplied task ID
        tasks: list[dict[str, Any]] | None = None,
        response_format: Literal["structured", "json"] | None = None,
    ) -> str:
        """Create one task, or many in bulk, under existing projects.

        Single mode uses the top-level task fields. Bulk mode takes `tasks`, a
        list of objects with the same fields; items are created in order and
        each one succeeds or fails on its own. Dependencies that cannot be
        linked are skipped without failing the task.

        Args:
            mode: "single" (default) or "bulk"
            project_id: Project the task belongs to (single mode)
            title: Task title (single mode)
            description: Task description
            priority: critical, high, medium (default), low, someday
            status: backlog, todo (default), doing, blocked, review, done
            assigned_to: Assignee identifier
            urls: Reference URLs
            tags: Tags for categorization
            completion_requirements: What "done" means for this task
            output_format: Expected deliverable format
            task_type: Free-form task classification
            dependencies: IDs of tasks this task depends on
            id: Client-supplied task ID
            tasks: Task objects to create (bulk mode)
            response_format: "structured" (readable text) or "json"

        Returns:
            The created task, or a bulk summary with created tasks and
            per-item errors.

        Examples:
            task_create(project_id="proj_1", title="Write migration")
            task_create(mode="bulk", tasks=[{"project_id": "proj_1", "title": "A"},
                                            {"project_id": "proj_1", "title": "B",
                                             "dependencies": ["task_a"]}])
        """
        from trellis.tools.create_task import create_tasks

        arguments = {
            "mode": mode,
            "project_id": project_id,
            "title": title,
            "description": description,
            "priority": priority,
            "status": status,
            "assigned_to": assigned_to,
            "urls": urls,
            "tags": tags,
            "completion_requirements": completion_requirements,
            "output_format": output_format,
            "task_type": task_type,
            "dependencies": dependencies,
            "id": id,
            "tasks": tasks,
            "response_format": response_format,
        }
        try:
            response = await create_tasks(
                {key: value for key, value in arguments.items() if value is not None}
            )
        except TrellisError as e:
            raise _tool_error(e) from e
        return response.text

    # =========================================================================
    # TOOL 2: project_create
    # =========================================================================

    @mcp.tool()
    async def project_create(
        name: str,
        description: str = "",
        project_id: str | None = None,
    ) -> dict[str, Any]:
        """Create a project that tasks can be attached to.

        Args:
            name: Project name
            description: Project description
            project_id: Client-supplied project ID (generated when omitted)

        Returns:
            The created project
        """
        from trellis.graph import ProjectService, get_graph_client

        try:
            client = await get_graph_client()
            project = await ProjectService(client).create_project(
                name, description, project_id=project_id
            )
        except TrellisError as e:
            raise _tool_error(e) from e
        return project.model_dump(mode="json")


def _register_resources(mcp: FastMCP) -> None:
    @mcp.resource("trellis://health")
    async def health_resource() -> str:
        """Graph reachability, uptime and project/task counts as JSON."""
        from trellis.tools.admin import health_check

        health = await health_check()
        return json.dumps(asdict(health), indent=2)
