"""API router for the patients feature."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from hospital_service.core.dependencies import QueryExecutorDep
from hospital_service.core.pagination import Page
from hospital_service.features.patients.repository import (
    PatientRepository,
    get_patient_repository,
)
from hospital_service.features.patients.schemas import Patient

router = APIRouter(prefix="/patients", tags=["patients"])


@router.get(
    "",
    response_model=Page[Patient],
    summary="Search patients",
    description="Search patients by name, MRN, date of birth or gender, newest first.",
)
async def search_patients(
    executor: QueryExecutorDep,
    repo: Annotated[PatientRepository, Depends(get_patient_repository)],
    limit: Annotated[str | None, Query(description="Items per page (1-100, default 20)")] = None,
    cursor: Annotated[str | None, Query(description="Pagination cursor")] = None,
    search: Annotated[str | None, Query(description="Search by name or MRN")] = None,
    dob: Annotated[str | None, Query(description="Date of birth (YYYY-MM-DD)")] = None,
    gender_concept_id: Annotated[
        str | None, Query(description="Filter by gender concept ID")
    ] = None,
) -> Page[Patient]:
    """Search patients with keyset pagination."""
    return await repo.search(
        executor,
        limit=limit,
        cursor=cursor,
        filters={"search": search, "dob": dob, "gender_concept_id": gender_concept_id},
    )
