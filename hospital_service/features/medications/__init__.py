"""Medications feature package."""

from .repository import MEDICATION_ADAPTER, MedicationRepository, get_medication_repository
from .router import router

__all__ = [
    "MEDICATION_ADAPTER",
    "MedicationRepository",
    "get_medication_repository",
    "router",
]
