"""Shared response schemas."""

from hospital_service.core.schemas.problem_details import ProblemDetails

__all__ = ["ProblemDetails"]
