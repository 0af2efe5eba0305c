"""Health reporting for the daemon and the `trellis health` command."""

import time
from dataclasses import dataclass, field
from typing import Literal

import structlog

from trellis.config import settings
from trellis.graph.client import get_graph_client

log = structlog.get_logger()

HealthState = Literal["healthy", "degraded", "unhealthy"]

COUNTED_LABELS = ("Project", "Task")

_started_at: float | None = None


@dataclass
class HealthStatus:
    status: HealthState
    server_name: str
    uptime_seconds: float
    graph_connected: bool
    entity_counts: dict[str, int] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


def mark_server_started() -> None:
    global _started_at
    _started_at = time.monotonic()


def _uptime() -> float:
    return 0.0 if _started_at is None else time.monotonic() - _started_at


async def health_check() -> HealthStatus:
    """Report graph reachability and how many projects and tasks it holds.

    ``unhealthy`` when the graph cannot be reached, ``degraded`` when it is
    reachable but counting fails.
    """
    status = HealthStatus(
        status="healthy",
        server_name=settings.server_name,
        uptime_seconds=_uptime(),
        graph_connected=False,
    )

    try:
        client = await get_graph_client()
    except Exception as e:
        log.warning("Health check could not reach graph", error=str(e))
        status.status = "unhealthy"
        status.errors.append(f"Graph connection failed: {e}")
        return status

    status.graph_connected = True
    try:
        records = await client.execute_read(
            "MATCH (n) WHERE labels(n)[0] IN $labels "
            "RETURN labels(n)[0] AS label, count(n) AS total",
            labels=list(COUNTED_LABELS),
        )
    except Exception as e:
        log.warning("Health check count failed", error=str(e))
        status.status = "degraded"
        status.errors.append(f"Counting entities failed: {e}")
        return status

    totals = {record["label"]: int(record["total"]) for record in records}
    status.entity_counts = {label.lower(): totals.get(label, 0) for label in COUNTED_LABELS}
    return status
