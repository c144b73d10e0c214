"""PostgreSQL async connection pool."""

from psycopg_pool import AsyncConnectionPool


def create_pool(conninfo: str, min_size: int = 2, max_size: int = 10) -> AsyncConnectionPool:
    """Create a closed pool; PoolLifespanMiddleware opens it on ASGI startup."""
    return AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        open=False,
    )


async def ping(pool: AsyncConnectionPool) -> None:
    """Run a trivial query on a pooled connection; raises when the database is unreachable."""
    async with pool.connection() as conn:
        await conn.execute("SELECT 1")
