"""Database infrastructure: engine, native pool and query executors."""

from hospital_service.infra.database.executors import (
    PsycopgPoolExecutor,
    SQLAlchemyExecutor,
    dialect_for,
)
from hospital_service.infra.database.session import (
    build_engine,
    close_database,
    get_async_connection,
    get_engine,
    init_database,
)

__all__ = [
    "PsycopgPoolExecutor",
    "SQLAlchemyExecutor",
    "build_engine",
    "close_database",
    "dialect_for",
    "get_async_connection",
    "get_engine",
    "init_database",
]
