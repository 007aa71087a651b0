"""Pydantic schemas for the medications feature."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Medication(BaseModel):
    """A drug exposure record."""

    model_config = ConfigDict(from_attributes=True)

    drug_exposure_id: int = Field(..., examples=[321])
    person_id: int = Field(..., examples=[123])
    drug_concept_id: int = Field(..., examples=[19122137])
    drug_exposure_start: datetime
    drug_exposure_end: datetime | None = None
    drug_type_concept_id: int = Field(..., examples=[38000177])
    quantity: float | None = Field(default=None, examples=[14])
    visit_occurrence_id: int | None = Field(default=None, examples=[987])
    instructions: str | None = Field(default=None, examples=["Take with food, twice daily"])
    created_at: datetime | None = None
    updated_at: datetime | None = None
