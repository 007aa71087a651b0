"""Pydantic schemas for the terminology feature."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Concept(BaseModel):
    """A standardized vocabulary concept."""

    model_config = ConfigDict(from_attributes=True)

    concept_id: int = Field(..., examples=[201826])
    concept_name: str = Field(..., examples=["Type 2 diabetes mellitus"])
    vocabulary_id: str = Field(..., examples=["SNOMED"])
    concept_code: str = Field(..., examples=["44054006"])
    domain_id: str | None = Field(default=None, examples=["Condition"])
    concept_class_id: str | None = Field(default=None, examples=["Clinical Finding"])
