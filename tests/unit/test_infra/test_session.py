"""Tests for engine construction and query instrumentation."""

from __future__ import annotations

import pytest
from sqlalchemy import text

from hospital_service.core.settings import PostgresSettings
from hospital_service.infra.database import session
from hospital_service.infra.database.session import (
    _operation_of,
    build_engine,
    close_database,
    get_async_connection,
    get_engine,
    init_database,
)
from hospital_service.infra.metrics import REGISTRY


def select_count() -> float:
    return REGISTRY.get_sample_value(
        "database_query_duration_seconds_count", {"operation": "SELECT"}
    ) or 0.0


@pytest.mark.parametrize(
    ("statement", "operation"),
    [
        ("SELECT 1", "SELECT"),
        ("  select concept_id FROM concept", "SELECT"),
        ("BEGIN", "BEGIN"),
        ("WITH x AS (SELECT 1) SELECT * FROM x", "UNKNOWN"),
        (None, "UNKNOWN"),
    ],
)
def test_operation_of(statement, operation):
    assert _operation_of(statement) == operation


async def test_build_engine_records_query_duration():
    engine = build_engine(PostgresSettings(DATABASE_URL="sqlite+aiosqlite:///:memory:"))
    before = select_count()
    try:
        async with engine.connect() as conn:
            assert (await conn.execute(text("SELECT 1"))).scalar() == 1
    finally:
        await engine.dispose()

    assert select_count() == before + 1


async def test_shared_engine_lifecycle(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    await close_database()

    await init_database()
    engine = get_engine()
    assert get_engine() is engine

    async with get_async_connection() as conn:
        assert (await conn.execute(text("SELECT 2"))).scalar() == 2

    await close_database()
    assert session._engine is None
