"""Pool lifespan middleware - binds the connection pool to the ASGI lifespan."""

import logging
from typing import Any

from psycopg_pool import AsyncConnectionPool

logger = logging.getLogger(__name__)


class PoolLifespanMiddleware:
    """Opens the pool on startup and closes it on shutdown.

    With ``wait`` set, startup fails unless ``min_size`` connections can be
    established within ``timeout`` seconds.
    """

    def __init__(self, pool: AsyncConnectionPool, wait: bool = False, timeout: float = 30.0) -> None:
        self._pool = pool
        self._wait = wait
        self._timeout = timeout

    async def process_startup(self, scope: dict[str, Any], event: dict[str, Any]) -> None:
        await self._pool.open(wait=self._wait, timeout=self._timeout)
        logger.info("Connection pool opened (min=%d, max=%d)", self._pool.min_size, self._pool.max_size)

    async def process_shutdown(self, scope: dict[str, Any], event: dict[str, Any]) -> None:
        await self._pool.close()
        logger.info("Connection pool closed")
