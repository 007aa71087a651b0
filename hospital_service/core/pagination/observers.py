"""Observability hooks for the keyset paginator.

The engine reports what happens during a page request to an injected
``PaginationObserver`` instead of logging directly. ``NullObserver`` is the
engine's default; repositories wire ``LoggingObserver`` and
``PrometheusObserver`` together through ``CompositeObserver``.

Usage:
    observer = CompositeObserver(LoggingObserver(), PrometheusObserver())
    paginator = KeysetPaginator(adapter, executor, observer=observer)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

from hospital_service.infra.logging import get_lazy_logger
from hospital_service.infra.metrics import prometheus


class PaginationObserver(Protocol):
    """Receives events from a page request. Implementations must not raise."""

    def invalid_cursor(self, entity: str, token: str) -> None: ...

    def filter_rejected(self, entity: str, name: str, reason: str) -> None: ...

    def query_executed(
        self,
        entity: str,
        sql: str,
        params: Sequence[Any],
        row_count: int,
        duration: float,
    ) -> None: ...

    def query_failed(self, entity: str, sql: str, error: BaseException, duration: float) -> None: ...

    def page_assembled(self, entity: str, item_count: int, has_more: bool) -> None: ...


class NullObserver:
    """Observer that ignores every event."""

    def invalid_cursor(self, entity: str, token: str) -> None:
        pass

    def filter_rejected(self, entity: str, name: str, reason: str) -> None:
        pass

    def query_executed(
        self,
        entity: str,
        sql: str,
        params: Sequence[Any],
        row_count: int,
        duration: float,
    ) -> None:
        pass

    def query_failed(self, entity: str, sql: str, error: BaseException, duration: float) -> None:
        pass

    def page_assembled(self, entity: str, item_count: int, has_more: bool) -> None:
        pass


class LoggingObserver:
    """Report pagination events through standard logging.

    Invalid cursors and rejected filters are WARNING, query failures are
    ERROR, everything else is lazy DEBUG (zero overhead when disabled).
    """

    __slots__ = ("_lazy", "_logger")

    def __init__(self, name: str = "hospital_service.pagination") -> None:
        # Standard logger for WARNING/ERROR
        self._logger = logging.getLogger(name)
        # Lazy logger for DEBUG
        self._lazy = get_lazy_logger(name)

    def invalid_cursor(self, entity: str, token: str) -> None:
        self._logger.warning(
            "Invalid cursor ignored, restarting from first page",
            extra={"entity": entity, "cursor_length": len(token)},
        )

    def filter_rejected(self, entity: str, name: str, reason: str) -> None:
        self._logger.warning(
            "Filter value ignored",
            extra={"entity": entity, "filter": name, "reason": reason},
        )

    def query_executed(
        self,
        entity: str,
        sql: str,
        params: Sequence[Any],
        row_count: int,
        duration: float,
    ) -> None:
        self._lazy.debug(
            lambda: (
                f"search.query: {entity} -> {row_count} rows in {duration * 1000:.1f}ms "
                f"({len(params)} params) {' '.join(sql.split())}"
            )
        )

    def query_failed(self, entity: str, sql: str, error: BaseException, duration: float) -> None:
        self._logger.error(
            "Search query failed",
            extra={
                "entity": entity,
                "error_type": type(error).__name__,
                "duration_ms": round(duration * 1000, 1),
                "query": " ".join(sql.split())[:200],
            },
        )

    def page_assembled(self, entity: str, item_count: int, has_more: bool) -> None:
        self._lazy.debug(
            lambda: f"search.page: {entity} -> {item_count} items, has_more={has_more}"
        )


class PrometheusObserver:
    """Record pagination events as Prometheus metrics."""

    def invalid_cursor(self, entity: str, token: str) -> None:
        prometheus.search_invalid_cursors_total.labels(entity=entity).inc()

    def filter_rejected(self, entity: str, name: str, reason: str) -> None:
        prometheus.search_rejected_filters_total.labels(entity=entity, filter=name).inc()

    def query_executed(
        self,
        entity: str,
        sql: str,
        params: Sequence[Any],
        row_count: int,
        duration: float,
    ) -> None:
        prometheus.search_query_duration_seconds.labels(entity=entity).observe(duration)

    def query_failed(self, entity: str, sql: str, error: BaseException, duration: float) -> None:
        prometheus.search_query_duration_seconds.labels(entity=entity).observe(duration)
        prometheus.search_query_errors_total.labels(
            entity=entity, error_type=type(error).__name__
        ).inc()

    def page_assembled(self, entity: str, item_count: int, has_more: bool) -> None:
        prometheus.search_page_items.labels(entity=entity).observe(item_count)
        prometheus.search_pages_total.labels(entity=entity, has_more=str(has_more).lower()).inc()


class CompositeObserver:
    """Fan every event out to several observers, in order."""

    __slots__ = ("observers",)

    def __init__(self, *observers: PaginationObserver) -> None:
        self.observers = observers

    def invalid_cursor(self, entity: str, token: str) -> None:
        for observer in self.observers:
            observer.invalid_cursor(entity, token)

    def filter_rejected(self, entity: str, name: str, reason: str) -> None:
        for observer in self.observers:
            observer.filter_rejected(entity, name, reason)

    def query_executed(
        self,
        entity: str,
        sql: str,
        params: Sequence[Any],
        row_count: int,
        duration: float,
    ) -> None:
        for observer in self.observers:
            observer.query_executed(entity, sql, params, row_count, duration)

    def query_failed(self, entity: str, sql: str, error: BaseException, duration: float) -> None:
        for observer in self.observers:
            observer.query_failed(entity, sql, error, duration)

    def page_assembled(self, entity: str, item_count: int, has_more: bool) -> None:
        for observer in self.observers:
            observer.page_assembled(entity, item_count, has_more)


def default_observer() -> PaginationObserver:
    """Observer used by the feature repositories: logs plus metrics."""
    return CompositeObserver(LoggingObserver(), PrometheusObserver())


__all__ = [
    "CompositeObserver",
    "LoggingObserver",
    "NullObserver",
    "PaginationObserver",
    "PrometheusObserver",
    "default_observer",
]
