"""Repository for the patients feature.

``search`` matches the full name or the MRN; ``dob`` expands into the three
birth-date columns.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any

from hospital_service.core.database import SearchRepository
from hospital_service.core.pagination import (
    ExpandingFilter,
    FilterField,
    FilterOperator,
    SortDirection,
    TableAdapter,
    coerce_bigint,
    coerce_date,
    coerce_text,
)
from hospital_service.features.patients.schemas import Patient

_PARTIAL_DATE = re.compile(r"^(\d{4})(?:-(\d{2})(?:-(\d{2}))?)?$")

FULL_NAME = "(first_name || ' ' || last_name)"


def split_date_of_birth(value: Any) -> tuple[int, int | None, int | None]:
    """Split ``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD`` into (year, month, day).

    Missing parts come back as None and are not filtered on.

    Raises:
        ValueError, TypeError: If the value is not a (partial) date
    """
    text = coerce_text(value)
    match = _PARTIAL_DATE.match(text)
    if match is None:
        raise ValueError(f"Invalid date of birth: {text!r}")
    year, month, day = match.groups()
    if day is not None:
        dob = coerce_date(text)
        return dob.year, dob.month, dob.day
    if month is not None:
        # Validates the month
        date(int(year), int(month), 1)
        return int(year), int(month), None
    return int(year), None, None


PATIENT_ADAPTER: TableAdapter[Patient] = TableAdapter(
    name="patient",
    table="person",
    key_column="person_id",
    direction=SortDirection.DESC,
    columns=(
        "person_id",
        "user_id",
        "first_name",
        "last_name",
        "gender_concept_id",
        "year_of_birth",
        "month_of_birth",
        "day_of_birth",
        "birth_datetime",
        "race_concept_id",
        "ethnicity_concept_id",
        "mrn",
        "created_at",
        "updated_at",
    ),
    row_mapper=Patient.model_validate,
    filters=(
        FilterField("search", (FULL_NAME, "mrn"), FilterOperator.CONTAINS),
        ExpandingFilter(
            "dob",
            parts=(
                ("year_of_birth", FilterOperator.EQ),
                ("month_of_birth", FilterOperator.EQ),
                ("day_of_birth", FilterOperator.EQ),
            ),
            split=split_date_of_birth,
        ),
        FilterField("gender_concept_id", "gender_concept_id", coerce=coerce_bigint),
    ),
)


class PatientRepository(SearchRepository[Patient]):
    """Keyset search over persons."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(PATIENT_ADAPTER, **kwargs)


_patient_repository: PatientRepository | None = None


def get_patient_repository() -> PatientRepository:
    """Get the shared PatientRepository instance."""
    global _patient_repository
    if _patient_repository is None:
        _patient_repository = PatientRepository()
    return _patient_repository
