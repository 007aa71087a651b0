"""Patients feature package."""

from .repository import PATIENT_ADAPTER, PatientRepository, get_patient_repository
from .router import router

__all__ = [
    "PATIENT_ADAPTER",
    "PatientRepository",
    "get_patient_repository",
    "router",
]
