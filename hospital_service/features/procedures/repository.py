"""Repository for the procedures feature."""

from __future__ import annotations

from typing import Any

from hospital_service.core.database import SearchRepository
from hospital_service.core.pagination import (
    FilterField,
    FilterOperator,
    SortDirection,
    TableAdapter,
    coerce_bigint,
    coerce_datetime,
)
from hospital_service.features.procedures.schemas import Procedure

PROCEDURE_ADAPTER: TableAdapter[Procedure] = TableAdapter(
    name="procedure",
    table="procedure_occurrence",
    key_column="procedure_occurrence_id",
    direction=SortDirection.DESC,
    columns=(
        "procedure_occurrence_id",
        "person_id",
        "procedure_concept_id",
        "procedure_date",
        "procedure_type_concept_id",
        "visit_occurrence_id",
        "created_at",
        "updated_at",
    ),
    row_mapper=Procedure.model_validate,
    filters=(
        FilterField("person_id", "person_id", coerce=coerce_bigint),
        FilterField("visit_occurrence_id", "visit_occurrence_id", coerce=coerce_bigint),
        FilterField("date_from", "procedure_date", FilterOperator.GTE, coerce_datetime),
        FilterField("date_to", "procedure_date", FilterOperator.LTE, coerce_datetime),
    ),
)


class ProcedureRepository(SearchRepository[Procedure]):
    """Keyset search over procedure occurrences."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(PROCEDURE_ADAPTER, **kwargs)


_procedure_repository: ProcedureRepository | None = None


def get_procedure_repository() -> ProcedureRepository:
    """Get the shared ProcedureRepository instance."""
    global _procedure_repository
    if _procedure_repository is None:
        _procedure_repository = ProcedureRepository()
    return _procedure_repository
