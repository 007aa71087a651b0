"""Query executors: the execution capability the paginator runs on.

An executor takes positionally-parameterized SQL plus its parameters and
returns rows as mappings, in result order. It also tells the renderer which
placeholder style and LIKE flavour the underlying driver expects.

Two implementations ship:
- ``SQLAlchemyExecutor``: any SQLAlchemy async connection or session
  (PostgreSQL via psycopg, SQLite via aiosqlite in tests)
- ``PsycopgPoolExecutor``: psycopg's native ``AsyncConnectionPool``
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool
from sqlalchemy.engine import Dialect
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession

from hospital_service.core.pagination.query import POSTGRES_FORMAT, ParamStyle, SqlDialect

# DB-API paramstyle -> positional style the renderer emits
_PARAM_STYLES = {
    "qmark": ParamStyle.QMARK,
    "format": ParamStyle.FORMAT,
    "pyformat": ParamStyle.FORMAT,
    "numeric": ParamStyle.NUMERIC,
    "numeric_dollar": ParamStyle.NUMERIC_DOLLAR,
}


def dialect_for(sa_dialect: Dialect) -> SqlDialect:
    """Derive the rendering dialect from a SQLAlchemy dialect.

    Raises:
        ValueError: If the driver only supports named parameters
    """
    try:
        style = _PARAM_STYLES[sa_dialect.paramstyle]
    except KeyError:
        msg = f"Unsupported paramstyle for positional SQL: {sa_dialect.paramstyle!r}"
        raise ValueError(msg) from None

    if sa_dialect.name == "postgresql":
        return SqlDialect("postgresql", style)
    # LIKE without a default escape character elsewhere
    return SqlDialect(sa_dialect.name, style, case_insensitive_like="LIKE", like_escape="\\")


class SQLAlchemyExecutor:
    """Run driver-level SQL on a SQLAlchemy async connection or session.

    Usage:
        async with engine.connect() as conn:
            executor = SQLAlchemyExecutor(conn)
            rows = await executor.execute("SELECT 1 AS one", ())
    """

    __slots__ = ("_bind", "_dialect")

    def __init__(self, bind: AsyncConnection | AsyncSession) -> None:
        self._bind = bind
        sa_dialect = bind.dialect if isinstance(bind, AsyncConnection) else bind.get_bind().dialect
        self._dialect = dialect_for(sa_dialect)

    @property
    def dialect(self) -> SqlDialect:
        return self._dialect

    async def execute(self, sql: str, params: Sequence[Any]) -> Sequence[Mapping[str, Any]]:
        if isinstance(self._bind, AsyncConnection):
            conn = self._bind
        else:
            conn = await self._bind.connection()
        result = await conn.exec_driver_sql(sql, tuple(params))
        return [dict(row) for row in result.mappings().all()]


class PsycopgPoolExecutor:
    """Run SQL on a connection borrowed from a psycopg ``AsyncConnectionPool``.

    Each call holds one pooled connection for the duration of the query.
    """

    __slots__ = ("_pool",)

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    @property
    def dialect(self) -> SqlDialect:
        return POSTGRES_FORMAT

    async def execute(self, sql: str, params: Sequence[Any]) -> Sequence[Mapping[str, Any]]:
        async with self._pool.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(sql, tuple(params))
                return await cur.fetchall()


__all__ = ["PsycopgPoolExecutor", "SQLAlchemyExecutor", "dialect_for"]
