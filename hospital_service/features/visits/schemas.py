"""Pydantic schemas for the visits feature."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

VisitType = Literal["OPD", "IPD", "ER"]


class Visit(BaseModel):
    """A visit occurrence record."""

    model_config = ConfigDict(from_attributes=True)

    visit_occurrence_id: int = Field(..., examples=[987])
    person_id: int = Field(..., examples=[123])
    visit_concept_id: int = Field(..., examples=[9202])
    visit_start: datetime
    visit_end: datetime | None = None
    visit_type: VisitType = Field(..., examples=["OPD"])
    department_id: int | None = None
    provider_id: UUID | None = None
    reason: str | None = Field(default=None, examples=["Follow-up consultation"])
    visit_number: str = Field(..., examples=["V-2024-000987"])
    created_at: datetime | None = None
    updated_at: datetime | None = None
