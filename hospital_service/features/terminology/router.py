"""API router for the terminology feature."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from hospital_service.core.dependencies import QueryExecutorDep
from hospital_service.core.pagination import Page
from hospital_service.features.terminology.repository import (
    ConceptRepository,
    get_concept_repository,
)
from hospital_service.features.terminology.schemas import Concept

router = APIRouter(prefix="/terminology", tags=["terminology"])


@router.get(
    "/concepts",
    response_model=Page[Concept],
    summary="Search concepts",
    description="Search vocabulary concepts by name, code or vocabulary, in concept_id order.",
)
async def search_concepts(
    executor: QueryExecutorDep,
    repo: Annotated[ConceptRepository, Depends(get_concept_repository)],
    limit: Annotated[str | None, Query(description="Items per page (1-100, default 20)")] = None,
    cursor: Annotated[str | None, Query(description="Pagination cursor")] = None,
    q: Annotated[str | None, Query(description="Text search on concept name")] = None,
    code: Annotated[str | None, Query(description="Exact concept code")] = None,
    system: Annotated[
        str | None, Query(description="Vocabulary system: SNOMED, ICD10, RXNORM or LOINC")
    ] = None,
    vocabulary_id: Annotated[str | None, Query(description="Vocabulary ID")] = None,
) -> Page[Concept]:
    """Search concepts with keyset pagination."""
    return await repo.search(
        executor,
        limit=limit,
        cursor=cursor,
        filters={"q": q, "code": code, "system": system, "vocabulary_id": vocabulary_id},
    )
