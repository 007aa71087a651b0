"""FastAPI dependencies for route handlers.

Features import dependencies from here, not directly from infra.
"""

from hospital_service.core.dependencies.database import QueryExecutorDep, get_query_executor

__all__ = ["QueryExecutorDep", "get_query_executor"]
