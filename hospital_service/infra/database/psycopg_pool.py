"""Alternative execution path using psycopg's native connection pool.

Search queries are plain positional SQL, so they can skip SQLAlchemy
entirely. Select this path with ``DB_EXECUTOR=psycopg_pool``.

Usage:
    pool = await get_db_pool()
    executor = PsycopgPoolExecutor(pool)
    page = await paginator.paginate(limit=20)
"""

from __future__ import annotations

import asyncio
import logging

from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

from hospital_service.core.settings import get_db_settings

logger = logging.getLogger(__name__)

# Global pool instance
_pool: AsyncConnectionPool | None = None
_pool_lock = asyncio.Lock()


async def create_pool() -> AsyncConnectionPool:
    """Create and open a psycopg connection pool from PostgresSettings.

    Returns:
        Opened AsyncConnectionPool instance.

    Raises:
        psycopg.Error: If the pool cannot connect to the database.
    """
    db_settings = get_db_settings()

    logger.info(
        "Creating psycopg connection pool",
        extra={
            "min_size": db_settings.pg_min_size,
            "max_size": db_settings.pg_max_size,
        },
    )

    pool = AsyncConnectionPool(
        conninfo=db_settings.psycopg_url,
        configure=configure_connection,
        open=False,
        **db_settings.psycopg_pool_kwargs(),
    )
    try:
        await pool.open(wait=True)
    except Exception as e:
        logger.error("Failed to create psycopg connection pool", extra={"error": str(e)})
        await pool.close()
        raise

    logger.info("psycopg connection pool created successfully")
    return pool


async def configure_connection(conn: AsyncConnection) -> None:
    """Configure each new pooled connection.

    Search connections are read-only and report timestamps in UTC.
    """
    await conn.execute("SET timezone = 'UTC'")
    await conn.execute("SET default_transaction_read_only = on")
    # configure must leave the connection idle
    await conn.commit()


async def get_db_pool() -> AsyncConnectionPool:
    """Get or create the global database connection pool."""
    global _pool

    if _pool is None:
        async with _pool_lock:
            if _pool is None:
                _pool = await create_pool()

    return _pool


async def close_pool() -> None:
    """Close the database connection pool.

    Should be called during application shutdown.
    """
    global _pool

    if _pool is not None:
        logger.info("Closing psycopg connection pool")
        await _pool.close()
        _pool = None
        logger.info("psycopg connection pool closed successfully")


__all__ = ["close_pool", "configure_connection", "create_pool", "get_db_pool"]
