"""API router for the visits feature."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from hospital_service.core.dependencies import QueryExecutorDep
from hospital_service.core.pagination import Page
from hospital_service.features.visits.repository import VisitRepository, get_visit_repository
from hospital_service.features.visits.schemas import Visit

router = APIRouter(prefix="/visits", tags=["visits"])


@router.get(
    "",
    response_model=Page[Visit],
    summary="Search visits",
    description="Search visits by patient, provider, type or date range, newest first.",
)
async def search_visits(
    executor: QueryExecutorDep,
    repo: Annotated[VisitRepository, Depends(get_visit_repository)],
    limit: Annotated[str | None, Query(description="Items per page (1-100, default 20)")] = None,
    cursor: Annotated[str | None, Query(description="Pagination cursor")] = None,
    person_id: Annotated[str | None, Query(description="Filter by patient ID")] = None,
    provider_id: Annotated[str | None, Query(description="Filter by provider UUID")] = None,
    visit_type: Annotated[
        str | None, Query(alias="type", description="Visit type: OPD, IPD or ER")
    ] = None,
    date_from: Annotated[
        str | None, Query(description="Visits starting on or after (ISO 8601)")
    ] = None,
    date_to: Annotated[
        str | None, Query(description="Visits ended on or before, or still open (ISO 8601)")
    ] = None,
) -> Page[Visit]:
    """Search visits with keyset pagination."""
    return await repo.search(
        executor,
        limit=limit,
        cursor=cursor,
        filters={
            "person_id": person_id,
            "provider_id": provider_id,
            "type": visit_type,
            "date_from": date_from,
            "date_to": date_to,
        },
    )
