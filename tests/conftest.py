"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings defaults so tests never reach a real database
    - Executor Fixtures: a recording fake executor for SQL-level assertions
    - Database Fixtures: an in-memory SQLite connection seeded with search data
    - Application Fixtures: FastAPI app and HTTP client with executor override
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Callable, Mapping, Sequence
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncConnection, create_async_engine

from hospital_service.core.pagination import SQLITE, SqlDialect
from hospital_service.core.settings import clear_all_caches

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Drop cached settings so monkeypatched env vars take effect."""
    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Executor Fixtures
# ============================================================================


class RecordingExecutor:
    """Fake query executor that records every call.

    Rows come from ``rows`` (returned for every query) or from ``responder``,
    which receives the rendered SQL and parameters. ``error`` is raised
    instead of answering.
    """

    def __init__(
        self,
        dialect: SqlDialect = SQLITE,
        rows: Sequence[Mapping[str, Any]] = (),
        *,
        responder: Callable[[str, Sequence[Any]], Sequence[Mapping[str, Any]]] | None = None,
        error: Exception | None = None,
    ) -> None:
        self._dialect = dialect
        self.rows = list(rows)
        self.responder = responder
        self.error = error
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    @property
    def dialect(self) -> SqlDialect:
        return self._dialect

    @property
    def last_sql(self) -> str:
        return self.calls[-1][0]

    @property
    def last_params(self) -> tuple[Any, ...]:
        return self.calls[-1][1]

    async def execute(self, sql: str, params: Sequence[Any]) -> Sequence[Mapping[str, Any]]:
        self.calls.append((sql, tuple(params)))
        if self.error is not None:
            raise self.error
        if self.responder is not None:
            return self.responder(sql, params)
        return self.rows


@pytest.fixture
def recording_executor() -> type[RecordingExecutor]:
    """Factory for recording executors.

    Example:
        def test_sql(recording_executor):
            executor = recording_executor(POSTGRES_NUMERIC, rows=[...])
    """
    return RecordingExecutor


# ============================================================================
# Database Fixtures
# ============================================================================

SCHEMA = (
    """
    CREATE TABLE drug_exposure (
        drug_exposure_id INTEGER PRIMARY KEY,
        person_id INTEGER NOT NULL,
        drug_concept_id INTEGER NOT NULL,
        drug_exposure_start TEXT NOT NULL,
        drug_exposure_end TEXT,
        drug_type_concept_id INTEGER NOT NULL,
        quantity REAL,
        visit_occurrence_id INTEGER,
        instructions TEXT,
        created_at TEXT,
        updated_at TEXT
    )
    """,
    """
    CREATE TABLE person (
        person_id INTEGER PRIMARY KEY,
        user_id TEXT,
        first_name TEXT,
        last_name TEXT,
        gender_concept_id INTEGER NOT NULL,
        year_of_birth INTEGER NOT NULL,
        month_of_birth INTEGER,
        day_of_birth INTEGER,
        birth_datetime TEXT,
        race_concept_id INTEGER,
        ethnicity_concept_id INTEGER,
        mrn TEXT NOT NULL,
        created_at TEXT,
        updated_at TEXT
    )
    """,
    """
    CREATE TABLE concept (
        concept_id INTEGER PRIMARY KEY,
        concept_name TEXT NOT NULL,
        vocabulary_id TEXT NOT NULL,
        concept_code TEXT NOT NULL,
        domain_id TEXT,
        concept_class_id TEXT
    )
    """,
)

# drug_exposure_id values owned by person 7; every other exposure belongs to person 1
PERSON_7_EXPOSURES = (3, 11, 19)
DRUG_EXPOSURE_COUNT = 25

PEOPLE = (
    (1, "John", "Doe", 8507, 1980, 4, 2, "MRN-0001"),
    (2, "Jane", "Smith", 8532, 1975, 11, 30, "MRN-0002"),
    (3, "Johnny", "Smithers", 8507, 1980, 4, 2, "MRN-0003"),
    (4, "Maria", "Garcia", 8532, 1992, 1, 15, "XYZ-1000"),
)

CONCEPTS = (
    (201826, "Type 2 diabetes mellitus", "SNOMED", "44054006", "Condition"),
    (201254, "Type 1 diabetes mellitus", "SNOMED", "46635009", "Condition"),
    (320128, "Essential hypertension", "SNOMED", "59621000", "Condition"),
    (1503297, "Metformin", "RxNorm", "6809", "Drug"),
    (4000001, "100% oxygen", "SNOMED", "100000", "Drug"),
    (4000002, "1000 mg oxygen tablets", "SNOMED", "100001", "Drug"),
    (45576876, "Type 2 diabetes mellitus without complications", "ICD10CM", "E11.9", "Condition"),
)


async def seed_search_tables(conn: AsyncConnection) -> None:
    """Create the searchable tables on ``conn`` and fill them with fixtures."""
    for ddl in SCHEMA:
        await conn.exec_driver_sql(ddl)

    for exposure_id in range(1, DRUG_EXPOSURE_COUNT + 1):
        person_id = 7 if exposure_id in PERSON_7_EXPOSURES else 1
        await conn.exec_driver_sql(
            "INSERT INTO drug_exposure (drug_exposure_id, person_id, drug_concept_id, "
            "drug_exposure_start, drug_type_concept_id, quantity, visit_occurrence_id) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                exposure_id,
                person_id,
                1503297,
                f"2024-01-{exposure_id:02d}T08:00:00",
                38000177,
                30.0,
                100 + exposure_id % 2,
            ),
        )

    for person in PEOPLE:
        await conn.exec_driver_sql(
            "INSERT INTO person (person_id, first_name, last_name, gender_concept_id, "
            "year_of_birth, month_of_birth, day_of_birth, mrn) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            person,
        )

    for concept in CONCEPTS:
        await conn.exec_driver_sql(
            "INSERT INTO concept (concept_id, concept_name, vocabulary_id, concept_code, "
            "domain_id) VALUES (?, ?, ?, ?, ?)",
            concept,
        )


@pytest.fixture
async def sqlite_conn() -> AsyncGenerator[AsyncConnection]:
    """In-memory SQLite connection with seeded search tables.

    The database lives only as long as this one connection.
    """
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    try:
        async with engine.connect() as conn:
            await seed_search_tables(conn)
            yield conn
    finally:
        await engine.dispose()


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app():
    """Create a FastAPI application with the database executor overridable.

    Tests assign ``app.state.test_executor`` (or override the dependency
    directly) to control what the search routes run on.
    """
    from hospital_service.app.main import create_app
    from hospital_service.core.dependencies import get_query_executor

    application = create_app()
    application.state.test_executor = RecordingExecutor()
    application.dependency_overrides[get_query_executor] = lambda: application.state.test_executor
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client bound to the test application."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
