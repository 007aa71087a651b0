"""Pydantic schemas for the procedures feature."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Procedure(BaseModel):
    """A procedure occurrence record."""

    model_config = ConfigDict(from_attributes=True)

    procedure_occurrence_id: int = Field(..., examples=[456])
    person_id: int = Field(..., examples=[123])
    procedure_concept_id: int = Field(..., examples=[4273629])
    procedure_date: datetime
    procedure_type_concept_id: int = Field(..., examples=[38000275])
    visit_occurrence_id: int | None = Field(default=None, examples=[987])
    created_at: datetime | None = None
    updated_at: datetime | None = None
