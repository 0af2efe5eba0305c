"""Graph database client and operations."""

from trellis.graph.client import GraphClient, close_graph_client, get_graph_client
from trellis.graph.projects import ProjectService
from trellis.graph.tasks import TaskService

__all__ = ["GraphClient", "ProjectService", "TaskService", "close_graph_client", "get_graph_client"]
