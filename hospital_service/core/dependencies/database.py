"""Database dependencies for FastAPI route handlers.

``get_query_executor`` yields the execution capability the search
repositories run on. The implementation follows ``DB_EXECUTOR``:

- ``sqlalchemy`` (default): a ``SQLAlchemyExecutor`` over one connection
  from the shared async engine, returned to the pool when the request ends
- ``psycopg_pool``: a ``PsycopgPoolExecutor`` over the shared native pool

Usage:
    @router.get("/medications")
    async def search_medications(executor: QueryExecutorDep, ...):
        ...

Tests override the dependency:
    app.dependency_overrides[get_query_executor] = lambda: fake_executor
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends

from hospital_service.core.pagination import QueryExecutor
from hospital_service.core.settings import get_db_settings
from hospital_service.infra.database import PsycopgPoolExecutor, SQLAlchemyExecutor
from hospital_service.infra.database.psycopg_pool import get_db_pool
from hospital_service.infra.database.session import get_async_connection


async def get_query_executor() -> AsyncGenerator[QueryExecutor]:
    """FastAPI dependency yielding a request-scoped query executor."""
    if get_db_settings().executor == "psycopg_pool":
        yield PsycopgPoolExecutor(await get_db_pool())
        return

    async with get_async_connection() as conn:
        yield SQLAlchemyExecutor(conn)


QueryExecutorDep = Annotated[QueryExecutor, Depends(get_query_executor)]

__all__ = ["QueryExecutorDep", "get_query_executor"]
