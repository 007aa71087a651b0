"""Visits feature package."""

from .repository import VISIT_ADAPTER, VisitRepository, get_visit_repository
from .router import router

__all__ = [
    "VISIT_ADAPTER",
    "VisitRepository",
    "get_visit_repository",
    "router",
]
