"""Pydantic schemas for the patients feature."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Patient(BaseModel):
    """A person record as returned by patient search.

    Contact details are not part of search results.
    """

    model_config = ConfigDict(from_attributes=True)

    person_id: int = Field(..., examples=[123])
    user_id: UUID | None = None
    first_name: str | None = Field(default=None, examples=["John"])
    last_name: str | None = Field(default=None, examples=["Doe"])
    gender_concept_id: int = Field(..., examples=[8507])
    year_of_birth: int = Field(..., examples=[1980])
    month_of_birth: int | None = Field(default=None, examples=[5])
    day_of_birth: int | None = Field(default=None, examples=[15])
    birth_datetime: datetime | None = None
    race_concept_id: int | None = None
    ethnicity_concept_id: int | None = None
    mrn: str = Field(..., examples=["MRN-2024-000123"])
    created_at: datetime | None = None
    updated_at: datetime | None = None
