"""API router for the medications feature."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from hospital_service.core.dependencies import QueryExecutorDep
from hospital_service.core.pagination import Page
from hospital_service.features.medications.repository import (
    MedicationRepository,
    get_medication_repository,
)
from hospital_service.features.medications.schemas import Medication
from hospital_service.infra.logging import get_lazy_logger

router = APIRouter(prefix="/medications", tags=["medications"])

# Lazy logger for DEBUG (zero overhead when DEBUG disabled)
lazy_logger = get_lazy_logger(__name__)


@router.get(
    "",
    response_model=Page[Medication],
    summary="Search medications",
    description="""
Search drug exposures, newest first.

**Usage:**
1. First request: `GET /medications?limit=20&person_id=123`
2. Next page: `GET /medications?limit=20&person_id=123&cursor={nextCursor}`
3. Repeat until the response has no `nextCursor`

Filter values that cannot be parsed are ignored; an unusable cursor restarts
from the first page.
""",
)
async def search_medications(
    executor: QueryExecutorDep,
    repo: Annotated[MedicationRepository, Depends(get_medication_repository)],
    limit: Annotated[str | None, Query(description="Items per page (1-100, default 20)")] = None,
    cursor: Annotated[str | None, Query(description="Pagination cursor")] = None,
    person_id: Annotated[str | None, Query(description="Filter by patient ID")] = None,
    visit_occurrence_id: Annotated[str | None, Query(description="Filter by visit ID")] = None,
    date_from: Annotated[
        str | None, Query(description="Exposures starting on or after (ISO 8601)")
    ] = None,
    date_to: Annotated[
        str | None, Query(description="Exposures starting on or before (ISO 8601)")
    ] = None,
) -> Page[Medication]:
    """Search medications with keyset pagination."""
    lazy_logger.debug(lambda: f"medications.search: person_id={person_id!r} cursor={bool(cursor)}")
    return await repo.search(
        executor,
        limit=limit,
        cursor=cursor,
        filters={
            "person_id": person_id,
            "visit_occurrence_id": visit_occurrence_id,
            "date_from": date_from,
            "date_to": date_to,
        },
    )
