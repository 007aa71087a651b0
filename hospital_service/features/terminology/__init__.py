"""Terminology feature package."""

from .repository import CONCEPT_ADAPTER, ConceptRepository, get_concept_repository
from .router import router

__all__ = [
    "CONCEPT_ADAPTER",
    "ConceptRepository",
    "get_concept_repository",
    "router",
]
