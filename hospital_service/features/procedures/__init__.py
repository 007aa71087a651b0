"""Procedures feature package."""

from .repository import PROCEDURE_ADAPTER, ProcedureRepository, get_procedure_repository
from .router import router

__all__ = [
    "PROCEDURE_ADAPTER",
    "ProcedureRepository",
    "get_procedure_repository",
    "router",
]
