"""FalkorDB connection management.

Wraps graphiti-core's ``FalkorDriver`` and hands out a process-wide client.
Writes are serialized through ``write_lock``.
"""

import asyncio
from typing import TYPE_CHECKING, Any

import structlog

from trellis.config import settings
from trellis.errors import GraphConnectionError

if TYPE_CHECKING:
    from graphiti_core.driver.driver import GraphDriver

log = structlog.get_logger()


class GraphClient:
    """Thin async client over a FalkorDB graph."""

    def __init__(self, driver: "GraphDriver | None" = None) -> None:
        self._driver = driver
        self.write_lock = asyncio.Lock()

    @property
    def driver(self) -> "GraphDriver":
        if self._driver is None:
            raise GraphConnectionError("Graph client is not connected")
        return self._driver

    @property
    def is_connected(self) -> bool:
        return self._driver is not None

    async def connect(self) -> None:
        """Open the driver and verify the graph answers a trivial query."""
        if self._driver is not None:
            return

        from graphiti_core.driver.falkordb_driver import FalkorDriver

        log.info(
            "Connecting to FalkorDB",
            host=settings.falkordb_host,
            port=settings.falkordb_port,
            graph=settings.falkordb_graph_name,
        )
        try:
            driver = FalkorDriver(
                host=settings.falkordb_host,
                port=settings.falkordb_port,
                password=settings.falkordb_password or None,
                database=settings.falkordb_graph_name,
            )
            await driver.execute_query("RETURN 1")
        except Exception as e:
            log.exception("FalkorDB connection failed", error=str(e))
            raise GraphConnectionError(
                f"Unable to connect to FalkorDB at {settings.falkordb_host}:{settings.falkordb_port}",
                details={"error": str(e)},
            ) from e
        self._driver = driver

    async def execute(self, query: str, **params: Any) -> list[dict[str, Any]]:
        """Run a query without taking ``write_lock``.

        For writes issued by a caller that already holds the lock.
        """
        records, _, _ = await self.driver.execute_query(query, **params)
        return list(records or [])

    async def execute_read(self, query: str, **params: Any) -> list[dict[str, Any]]:
        """Run a read query and return its records as dicts."""
        return await self.execute(query, **params)

    async def execute_write(self, query: str, **params: Any) -> list[dict[str, Any]]:
        """Run a write query under the write lock."""
        async with self.write_lock:
            return await self.execute(query, **params)

    async def close(self) -> None:
        if self._driver is not None:
            await self._driver.close()
            self._driver = None


# Module-level client instance (created lazily)
_client: GraphClient | None = None
_client_lock = asyncio.Lock()


async def get_graph_client() -> GraphClient:
    """Get or create the connected process-wide graph client."""
    global _client
    async with _client_lock:
        if _client is None:
            client = GraphClient()
            await client.connect()
            _client = client
    return _client


async def close_graph_client() -> None:
    """Close and forget the process-wide graph client."""
    global _client
    async with _client_lock:
        if _client is not None:
            await _client.close()
            _client = None
