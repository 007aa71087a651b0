"""API router for the procedures feature."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from hospital_service.core.dependencies import QueryExecutorDep
from hospital_service.core.pagination import Page
from hospital_service.features.procedures.repository import (
    ProcedureRepository,
    get_procedure_repository,
)
from hospital_service.features.procedures.schemas import Procedure

router = APIRouter(prefix="/procedures", tags=["procedures"])


@router.get(
    "",
    response_model=Page[Procedure],
    summary="Search procedures",
    description=(
        "Search procedure occurrences, newest first. "
        "Pass `nextCursor` back as `cursor` for the next page."
    ),
)
async def search_procedures(
    executor: QueryExecutorDep,
    repo: Annotated[ProcedureRepository, Depends(get_procedure_repository)],
    limit: Annotated[str | None, Query(description="Items per page (1-100, default 20)")] = None,
    cursor: Annotated[str | None, Query(description="Pagination cursor")] = None,
    person_id: Annotated[str | None, Query(description="Filter by patient ID")] = None,
    visit_occurrence_id: Annotated[str | None, Query(description="Filter by visit ID")] = None,
    date_from: Annotated[
        str | None, Query(description="Procedures on or after (ISO 8601)")
    ] = None,
    date_to: Annotated[
        str | None, Query(description="Procedures on or before (ISO 8601)")
    ] = None,
) -> Page[Procedure]:
    """Search procedures with keyset pagination."""
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
