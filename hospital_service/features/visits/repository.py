"""Repository for the visits feature.

Open visits (no ``visit_end``) always pass the ``date_to`` filter.
"""

from __future__ import annotations

from typing import Any, get_args

from hospital_service.core.database import SearchRepository
from hospital_service.core.pagination import (
    FilterField,
    FilterOperator,
    SortDirection,
    TableAdapter,
    coerce_bigint,
    coerce_datetime,
    coerce_uuid,
    one_of,
)
from hospital_service.features.visits.schemas import Visit, VisitType

VISIT_ADAPTER: TableAdapter[Visit] = TableAdapter(
    name="visit",
    table="visit_occurrence",
    key_column="visit_occurrence_id",
    direction=SortDirection.DESC,
    columns=(
        "visit_occurrence_id",
        "person_id",
        "visit_concept_id",
        "visit_start",
        "visit_end",
        "visit_type",
        "department_id",
        "provider_id",
        "reason",
        "visit_number",
        "created_at",
        "updated_at",
    ),
    row_mapper=Visit.model_validate,
    filters=(
        FilterField("person_id", "person_id", coerce=coerce_bigint),
        FilterField("provider_id", "provider_id", coerce=coerce_uuid),
        FilterField("type", "visit_type", coerce=one_of(get_args(VisitType))),
        FilterField("date_from", "visit_start", FilterOperator.GTE, coerce_datetime),
        FilterField(
            "date_to", "visit_end", FilterOperator.LTE, coerce_datetime, null_passes=True
        ),
    ),
)


class VisitRepository(SearchRepository[Visit]):
    """Keyset search over visit occurrences."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(VISIT_ADAPTER, **kwargs)


_visit_repository: VisitRepository | None = None


def get_visit_repository() -> VisitRepository:
    """Get the shared VisitRepository instance."""
    global _visit_repository
    if _visit_repository is None:
        _visit_repository = VisitRepository()
    return _visit_repository
