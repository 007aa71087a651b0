"""Tests for the search routers.

Routes run against a recording executor, so each test can assert both the
HTTP response and the SQL that produced it.
"""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID

import pytest
from sqlalchemy.exc import OperationalError

from hospital_service.core.pagination import SQLITE, CursorCodec
from hospital_service.core.settings import PaginationSettings
from hospital_service.features.medications import MedicationRepository, get_medication_repository

PREFIX = "/api/v1"


def medication_row(exposure_id: int, person_id: int = 1) -> dict:
    return {
        "drug_exposure_id": exposure_id,
        "person_id": person_id,
        "drug_concept_id": 1503297,
        "drug_exposure_start": "2024-01-15T08:00:00",
        "drug_exposure_end": None,
        "drug_type_concept_id": 38000177,
        "quantity": 30.0,
        "visit_occurrence_id": None,
        "instructions": None,
        "created_at": None,
        "updated_at": None,
    }


def visit_row(visit_id: int) -> dict:
    return {
        "visit_occurrence_id": visit_id,
        "person_id": 1,
        "visit_concept_id": 9202,
        "visit_start": "2024-01-15T08:00:00",
        "visit_end": None,
        "visit_type": "OPD",
        "department_id": None,
        "provider_id": None,
        "reason": None,
        "visit_number": f"V-{visit_id}",
        "created_at": None,
        "updated_at": None,
    }


# ──────────────────────────────────────────────────────────────
# Medications
# ──────────────────────────────────────────────────────────────


class TestMedicationsRouter:
    """Tests for GET /medications."""

    async def test_first_page_has_next_cursor(self, app, client, recording_executor):
        app.state.test_executor = recording_executor(
            SQLITE, rows=[medication_row(i) for i in range(25, 4, -1)]
        )

        response = await client.get(f"{PREFIX}/medications", params={"limit": "20"})

        assert response.status_code == 200
        body = response.json()
        assert len(body["items"]) == 20
        assert body["items"][0]["drug_exposure_id"] == 25
        assert CursorCodec.decode(body["nextCursor"]) == {"drug_exposure_id": 6}

    async def test_last_page_omits_next_cursor(self, app, client, recording_executor):
        app.state.test_executor = recording_executor(
            SQLITE, rows=[medication_row(i, person_id=7) for i in (19, 11, 3)]
        )

        response = await client.get(f"{PREFIX}/medications", params={"person_id": "7"})

        assert response.status_code == 200
        body = response.json()
        assert [item["drug_exposure_id"] for item in body["items"]] == [19, 11, 3]
        assert "nextCursor" not in body
        assert "next_cursor" not in body

    async def test_filters_bind_in_declared_order(self, app, client, recording_executor):
        executor = recording_executor(SQLITE)
        app.state.test_executor = executor

        await client.get(
            f"{PREFIX}/medications",
            params={
                "date_from": "2024-01-01",
                "person_id": "7",
                "cursor": CursorCodec.encode({"drug_exposure_id": 321}),
            },
        )

        assert (
            "WHERE drug_exposure_id < ? AND person_id = ? AND drug_exposure_start >= ?"
            in executor.last_sql
        )
        assert executor.last_params == (321, 7, datetime(2024, 1, 1, tzinfo=UTC), 21)

    @pytest.mark.parametrize(
        "params",
        [
            {"limit": "abc"},
            {"person_id": "abc"},
            {"date_from": "last tuesday"},
            {"cursor": "garbage"},
            {"unknown": "x"},
        ],
    )
    async def test_bad_inputs_are_forgiven(self, app, client, recording_executor, params):
        executor = recording_executor(SQLITE)
        app.state.test_executor = executor

        response = await client.get(f"{PREFIX}/medications", params=params)

        assert response.status_code == 200
        assert response.json() == {"items": []}
        assert "WHERE" not in executor.last_sql
        assert executor.last_params == (21,)

    async def test_limit_is_clamped(self, app, client, recording_executor):
        executor = recording_executor(SQLITE)
        app.state.test_executor = executor

        await client.get(f"{PREFIX}/medications", params={"limit": "500"})

        assert executor.last_params == (101,)

    async def test_strict_cursor_returns_problem(self, app, client, recording_executor):
        executor = recording_executor(SQLITE)
        app.state.test_executor = executor
        app.dependency_overrides[get_medication_repository] = lambda: MedicationRepository(
            settings=PaginationSettings(strict_cursors=True)
        )

        response = await client.get(
            f"{PREFIX}/medications",
            params={"cursor": "garbage"},
            headers={"X-Request-ID": "req-400"},
        )

        assert response.status_code == 400
        problem = response.json()
        assert problem["type"] == "invalid-cursor"
        assert problem["status"] == 400
        assert problem["title"] == "Bad Request"
        assert problem["entity"] == "medication"
        assert problem["instance"] == f"{PREFIX}/medications"
        assert problem["request_id"] == "req-400"
        assert executor.calls == []

    async def test_storage_failure_returns_503(self, app, client, recording_executor):
        app.state.test_executor = recording_executor(
            SQLITE, error=OperationalError("SELECT", (), Exception("could not connect"))
        )

        response = await client.get(f"{PREFIX}/medications")

        assert response.status_code == 503
        problem = response.json()
        assert problem["type"] == "search-unavailable"
        assert problem["entity"] == "medication"
        assert "could not connect" not in response.text


# ──────────────────────────────────────────────────────────────
# Other entities
# ──────────────────────────────────────────────────────────────


class TestEntityFilters:
    """Filter translation for patients, visits, procedures and concepts."""

    async def test_patient_search_matches_name_or_mrn(self, app, client, recording_executor):
        executor = recording_executor(SQLITE)
        app.state.test_executor = executor

        await client.get(f"{PREFIX}/patients", params={"search": "Smith"})

        assert (
            "((first_name || ' ' || last_name) LIKE ? ESCAPE '\\' OR mrn LIKE ? ESCAPE '\\')"
            in executor.last_sql
        )
        assert executor.last_params == ("%Smith%", "%Smith%", 21)
        assert "ORDER BY person_id DESC" in executor.last_sql

    async def test_patient_dob_expands(self, app, client, recording_executor):
        executor = recording_executor(SQLITE)
        app.state.test_executor = executor

        await client.get(f"{PREFIX}/patients", params={"dob": "1980-04-02"})

        assert (
            "year_of_birth = ? AND month_of_birth = ? AND day_of_birth = ?" in executor.last_sql
        )
        assert executor.last_params == (1980, 4, 2, 21)

    @pytest.mark.parametrize(
        ("dob", "params"),
        [("1980", (1980, 21)), ("1980-04", (1980, 4, 21))],
    )
    async def test_patient_partial_dob(self, app, client, recording_executor, dob, params):
        executor = recording_executor(SQLITE)
        app.state.test_executor = executor

        await client.get(f"{PREFIX}/patients", params={"dob": dob})

        assert "year_of_birth = ?" in executor.last_sql
        assert "day_of_birth = ?" not in executor.last_sql
        assert executor.last_params == params

    @pytest.mark.parametrize("dob", ["1980-02-31", "1980-13", "80", "1980-4-2"])
    async def test_patient_invalid_dob_is_ignored(self, app, client, recording_executor, dob):
        executor = recording_executor(SQLITE)
        app.state.test_executor = executor

        response = await client.get(f"{PREFIX}/patients", params={"dob": dob})

        assert response.status_code == 200
        assert executor.last_params == (21,)

    async def test_visit_filters(self, app, client, recording_executor):
        executor = recording_executor(SQLITE, rows=[visit_row(987)])
        app.state.test_executor = executor
        provider = "12345678-1234-5678-1234-567812345678"

        response = await client.get(
            f"{PREFIX}/visits",
            params={"type": "opd", "provider_id": provider, "date_to": "2024-01-31"},
        )

        assert response.status_code == 200
        assert response.json()["items"][0]["visit_type"] == "OPD"
        assert "(visit_end IS NULL OR visit_end <= ?)" in executor.last_sql
        assert executor.last_params == (
            UUID(provider),
            "OPD",
            datetime(2024, 1, 31, tzinfo=UTC),
            21,
        )

    async def test_null_columns_are_kept(self, app, client, recording_executor):
        app.state.test_executor = recording_executor(SQLITE, rows=[visit_row(987)])

        response = await client.get(f"{PREFIX}/visits")

        body = response.json()
        assert "nextCursor" not in body
        item = body["items"][0]
        assert item["visit_end"] is None
        for column in ("department_id", "provider_id", "reason", "created_at", "updated_at"):
            assert column in item
            assert item[column] is None

    async def test_visit_unknown_type_is_ignored(self, app, client, recording_executor):
        executor = recording_executor(SQLITE)
        app.state.test_executor = executor

        await client.get(f"{PREFIX}/visits", params={"type": "ICU"})

        assert "WHERE" not in executor.last_sql
        assert executor.last_params == (21,)

    async def test_procedure_filters(self, app, client, recording_executor):
        executor = recording_executor(SQLITE)
        app.state.test_executor = executor

        await client.get(
            f"{PREFIX}/procedures", params={"person_id": "5", "visit_occurrence_id": "9"}
        )

        assert "FROM procedure_occurrence" in executor.last_sql
        assert "ORDER BY procedure_occurrence_id DESC" in executor.last_sql
        assert executor.last_params == (5, 9, 21)

    async def test_concept_system_lookup(self, app, client, recording_executor):
        executor = recording_executor(SQLITE)
        app.state.test_executor = executor

        await client.get(
            f"{PREFIX}/terminology/concepts",
            params={
                "q": "diab",
                "system": "icd10",
                "cursor": CursorCodec.encode({"concept_id": 7}),
            },
        )

        assert "concept_id > ?" in executor.last_sql
        assert "ORDER BY concept_id ASC" in executor.last_sql
        assert executor.last_params == (7, "%diab%", "ICD10CM", 21)


# ──────────────────────────────────────────────────────────────
# Application surface
# ──────────────────────────────────────────────────────────────


class TestApplicationSurface:
    """Tests for middleware, metrics and OpenAPI wiring."""

    async def test_request_id_is_echoed(self, client):
        response = await client.get(f"{PREFIX}/medications", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    async def test_request_id_is_generated(self, client):
        response = await client.get(f"{PREFIX}/medications")

        assert UUID(response.headers["X-Request-ID"])

    async def test_metrics_endpoint(self, client):
        await client.get(f"{PREFIX}/terminology/concepts")

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "search_pages_total" in response.text

    async def test_openapi_lists_search_routes(self, client):
        response = await client.get("/openapi.json")

        paths = response.json()["paths"]
        for path in ("patients", "visits", "procedures", "medications", "terminology/concepts"):
            assert f"{PREFIX}/{path}" in paths
        assert "/metrics" not in paths
        parameters = {p["name"] for p in paths[f"{PREFIX}/visits"]["get"]["parameters"]}
        assert {"limit", "cursor", "person_id", "provider_id", "type", "date_from"} <= parameters
