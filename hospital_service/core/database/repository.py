"""Generic search repository over a keyset paginator.

Each feature owns one repository bound to its entity adapter. The repository
builds a paginator per request (the executor is request-scoped) and
translates engine and storage errors into application exceptions.

Example:
    class MedicationRepository(SearchRepository[Medication]):
        def __init__(self, **kwargs: Any) -> None:
            super().__init__(MEDICATION_ADAPTER, **kwargs)

    repo = MedicationRepository()
    page = await repo.search(executor, limit="20", filters={"person_id": "42"})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import psycopg
from sqlalchemy.exc import SQLAlchemyError

from hospital_service.core.exceptions import InvalidCursorException, SearchUnavailableException
from hospital_service.core.pagination import (
    InvalidCursorError,
    KeysetPaginator,
    default_observer,
)
from hospital_service.core.settings import get_pagination_settings
from hospital_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

    from hospital_service.core.pagination import (
        EntityAdapter,
        Page,
        PaginationObserver,
        QueryExecutor,
    )
    from hospital_service.core.settings import PaginationSettings

# Errors that mean the storage layer could not answer
STORAGE_ERRORS: tuple[type[Exception], ...] = (SQLAlchemyError, psycopg.Error, OSError)

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)


class SearchRepository[T]:
    """Keyset search over one entity.

    Attributes:
        adapter: Entity configuration
        settings: Pagination settings (loaded lazily when omitted)
        observer: Event sink shared by every paginator this repository builds
    """

    def __init__(
        self,
        adapter: EntityAdapter[T],
        *,
        settings: PaginationSettings | None = None,
        observer: PaginationObserver | None = None,
    ) -> None:
        self.adapter = adapter
        self.settings = settings or get_pagination_settings()
        self.observer = observer or default_observer()

    def paginator(self, executor: QueryExecutor) -> KeysetPaginator[T]:
        """Build a paginator bound to ``executor``."""
        return KeysetPaginator.from_settings(
            self.adapter, executor, self.settings, observer=self.observer
        )

    async def search(
        self,
        executor: QueryExecutor,
        *,
        limit: Any = None,
        cursor: str | None = None,
        filters: Mapping[str, Any] | None = None,
    ) -> Page[T]:
        """Fetch one page of results.

        Args:
            executor: Request-scoped query executor
            limit: Requested page size, raw
            cursor: Cursor from the previous page
            filters: Raw filter values keyed by filter name

        Raises:
            InvalidCursorException: Unusable cursor while strict cursors are on
            SearchUnavailableException: The query failed in the storage layer
        """
        lazy_logger.debug(
            lambda: f"repository.search: {self.adapter.name} limit={limit!r} "
            f"filters={sorted(k for k, v in (filters or {}).items() if v is not None)}"
        )
        try:
            return await self.paginator(executor).paginate(
                limit=limit, cursor=cursor, filters=filters
            )
        except InvalidCursorError as exc:
            raise InvalidCursorException(exc.entity) from exc
        except STORAGE_ERRORS as exc:
            logger.exception(
                "Search failed in storage layer",
                extra={"entity": self.adapter.name, "error_type": type(exc).__name__},
            )
            raise SearchUnavailableException(self.adapter.name) from exc


__all__ = ["STORAGE_ERRORS", "SearchRepository"]
