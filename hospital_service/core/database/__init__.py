"""Search repository layer shared by the features."""

from hospital_service.core.database.repository import STORAGE_ERRORS, SearchRepository

__all__ = ["STORAGE_ERRORS", "SearchRepository"]
