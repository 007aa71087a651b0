"""Async SQLAlchemy engine management with the psycopg3 driver.

The engine is created on first use from ``PostgresSettings`` and shared by
every request. Search queries run on plain connections; there is no ORM
layer and no write path.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from hospital_service.core.settings import get_app_settings, get_db_settings
from hospital_service.infra.metrics.prometheus import (
    database_connections_active,
    database_query_duration_seconds,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from hospital_service.core.settings.postgres import PostgresSettings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None

_OPERATIONS = ("SELECT", "INSERT", "UPDATE", "DELETE", "BEGIN", "COMMIT", "ROLLBACK")


def build_engine(db_settings: PostgresSettings, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine and attach metrics listeners.

    Args:
        db_settings: Connection and pool settings.
        echo: Force SQL echo (e.g. in debug mode).

    Returns:
        Configured AsyncEngine.
    """
    kwargs = db_settings.sqlalchemy_engine_kwargs()
    kwargs["echo"] = kwargs.get("echo", False) or echo
    async_engine = create_async_engine(db_settings.url, **kwargs)
    instrument_engine(async_engine)
    return async_engine


def instrument_engine(async_engine: AsyncEngine) -> None:
    """Record connection counts and statement durations for ``async_engine``."""
    sync_engine = async_engine.sync_engine

    @event.listens_for(sync_engine.pool, "connect")
    def _receive_connect(dbapi_conn: Any, connection_record: Any) -> None:
        _ = dbapi_conn, connection_record
        database_connections_active.inc()

    @event.listens_for(sync_engine.pool, "close")
    def _receive_close(dbapi_conn: Any, connection_record: Any) -> None:
        _ = dbapi_conn, connection_record
        database_connections_active.dec()

    @event.listens_for(sync_engine, "before_cursor_execute")
    def _before_cursor_execute(
        conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: Any
    ) -> None:
        _ = conn, cursor, statement, parameters, executemany
        context._query_start_time = time.perf_counter()

    @event.listens_for(sync_engine, "after_cursor_execute")
    def _after_cursor_execute(
        conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: Any
    ) -> None:
        _ = conn, cursor, parameters, executemany
        start = getattr(context, "_query_start_time", None)
        if start is None:
            return
        duration = time.perf_counter() - start
        operation = _operation_of(statement)

        # Link the observation to the active trace when there is one
        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            database_query_duration_seconds.labels(operation=operation).observe(
                duration, exemplar={"trace_id": format(span_context.trace_id, "032x")}
            )
        else:
            database_query_duration_seconds.labels(operation=operation).observe(duration)


def _operation_of(statement: str | None) -> str:
    head = (statement or "").lstrip().upper()
    for operation in _OPERATIONS:
        if head.startswith(operation):
            return operation
    return "UNKNOWN"


def get_engine() -> AsyncEngine:
    """Return the shared engine, creating it on first use."""
    global _engine

    if _engine is None:
        _engine = build_engine(get_db_settings(), echo=get_app_settings().debug)
    return _engine


@asynccontextmanager
async def get_async_connection() -> AsyncGenerator[AsyncConnection]:
    """Get a connection from the shared engine.

    Yields:
        AsyncConnection returned to the pool on exit.

    Example:
        async with get_async_connection() as conn:
            executor = SQLAlchemyExecutor(conn)
            page = await paginator.paginate(limit=20)
    """
    async with get_engine().connect() as conn:
        yield conn


async def init_database() -> None:
    """Check database connectivity at startup.

    Raises:
        sqlalchemy.exc.SQLAlchemyError: If the database cannot be reached.
    """
    logger.info("Initializing database connection")
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Failed to connect to database", extra={"error": str(e)})
        raise
    logger.info("Database connection established successfully")


async def close_database() -> None:
    """Dispose of the shared engine.

    This should be called during application shutdown.
    """
    global _engine

    if _engine is None:
        return
    logger.info("Closing database connection")
    await _engine.dispose()
    _engine = None
    logger.info("Database connection closed successfully")


__all__ = [
    "build_engine",
    "close_database",
    "get_async_connection",
    "get_engine",
    "init_database",
    "instrument_engine",
]
