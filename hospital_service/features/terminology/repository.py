"""Repository for the terminology feature.

Concepts are reference data and page in ascending ``concept_id`` order.
"""

from __future__ import annotations

from typing import Any

from hospital_service.core.database import SearchRepository
from hospital_service.core.pagination import (
    FilterField,
    FilterOperator,
    SortDirection,
    TableAdapter,
    lookup,
)
from hospital_service.features.terminology.schemas import Concept

# Request ``system`` value -> vocabulary_id stored in the concept table
VOCABULARY_SYSTEMS = {
    "SNOMED": "SNOMED",
    "ICD10": "ICD10CM",
    "RXNORM": "RxNorm",
    "LOINC": "LOINC",
}

CONCEPT_ADAPTER: TableAdapter[Concept] = TableAdapter(
    name="concept",
    table="concept",
    key_column="concept_id",
    direction=SortDirection.ASC,
    columns=(
        "concept_id",
        "concept_name",
        "vocabulary_id",
        "concept_code",
        "domain_id",
        "concept_class_id",
    ),
    row_mapper=Concept.model_validate,
    filters=(
        FilterField("q", "concept_name", FilterOperator.CONTAINS),
        FilterField("code", "concept_code"),
        FilterField("system", "vocabulary_id", coerce=lookup(VOCABULARY_SYSTEMS)),
        FilterField("vocabulary_id", "vocabulary_id"),
    ),
)


class ConceptRepository(SearchRepository[Concept]):
    """Keyset search over vocabulary concepts."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(CONCEPT_ADAPTER, **kwargs)


_concept_repository: ConceptRepository | None = None


def get_concept_repository() -> ConceptRepository:
    """Get the shared ConceptRepository instance."""
    global _concept_repository
    if _concept_repository is None:
        _concept_repository = ConceptRepository()
    return _concept_repository
