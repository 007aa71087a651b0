"""Repository for the medications feature.

Medications are drug exposures, newest first by ``drug_exposure_id``.
"""

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
from hospital_service.features.medications.schemas import Medication

MEDICATION_ADAPTER: TableAdapter[Medication] = TableAdapter(
    name="medication",
    table="drug_exposure",
    key_column="drug_exposure_id",
    direction=SortDirection.DESC,
    columns=(
        "drug_exposure_id",
        "person_id",
        "drug_concept_id",
        "drug_exposure_start",
        "drug_exposure_end",
        "drug_type_concept_id",
        "quantity",
        "visit_occurrence_id",
        "instructions",
        "created_at",
        "updated_at",
    ),
    row_mapper=Medication.model_validate,
    filters=(
        FilterField("person_id", "person_id", coerce=coerce_bigint),
        FilterField("visit_occurrence_id", "visit_occurrence_id", coerce=coerce_bigint),
        FilterField("date_from", "drug_exposure_start", FilterOperator.GTE, coerce_datetime),
        FilterField("date_to", "drug_exposure_start", FilterOperator.LTE, coerce_datetime),
    ),
)


class MedicationRepository(SearchRepository[Medication]):
    """Keyset search over drug exposures."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(MEDICATION_ADAPTER, **kwargs)


_medication_repository: MedicationRepository | None = None


def get_medication_repository() -> MedicationRepository:
    """Get the shared MedicationRepository instance.

    Usage in FastAPI routes:
        repo: Annotated[MedicationRepository, Depends(get_medication_repository)]
    """
    global _medication_repository
    if _medication_repository is None:
        _medication_repository = MedicationRepository()
    return _medication_repository
