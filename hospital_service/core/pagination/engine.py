"""Generic keyset pagination engine.

One ``KeysetPaginator`` serves one entity. Each call to ``paginate``:

1. Clamps the requested limit to [1, max_limit]
2. Decodes the cursor (an unusable cursor restarts at the first page)
3. Composes the cursor predicate and the entity's filters
4. Issues exactly one query asking for ``limit + 1`` rows
5. Trims the extra row and derives the next cursor from the last kept row

Storage errors raised by the executor propagate unchanged; the owning
repository decides how to present them.

Example:
    paginator = KeysetPaginator(MEDICATION_ADAPTER, executor)

    page = await paginator.paginate(limit=20, filters={"person_id": "42"})
    while page.next_cursor:
        page = await paginator.paginate(
            limit=20, cursor=page.next_cursor, filters={"person_id": "42"}
        )
"""

from __future__ import annotations

import time
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol

from hospital_service.core.pagination.coercion import coerce_int
from hospital_service.core.pagination.cursor import MAX_CURSOR_LENGTH, CursorCodec
from hospital_service.core.pagination.exceptions import InvalidCursorError
from hospital_service.core.pagination.filters import compose_predicates
from hospital_service.core.pagination.observers import NullObserver, PaginationObserver
from hospital_service.core.pagination.query import QueryPlan, SqlDialect
from hospital_service.core.pagination.schemas import Page

if TYPE_CHECKING:
    from hospital_service.core.pagination.adapters import EntityAdapter
    from hospital_service.core.settings.pagination import PaginationSettings

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20


class QueryExecutor(Protocol):
    """Execution capability supplied by the storage layer.

    Attributes:
        dialect: Placeholder style and LIKE flavour of the underlying driver
    """

    @property
    def dialect(self) -> SqlDialect: ...

    async def execute(self, sql: str, params: Sequence[Any]) -> Sequence[Mapping[str, Any]]:
        """Run a positionally-parameterized query and return its rows in order."""
        ...


def clamp_limit(
    limit: Any,
    *,
    default: int = DEFAULT_PAGE_SIZE,
    maximum: int = MAX_PAGE_SIZE,
) -> int:
    """Clamp a requested page size into [1, maximum].

    Missing or non-integer limits fall back to ``default``. Out-of-range
    values are adjusted, never rejected.

    Example:
        clamp_limit(500)    # 100
        clamp_limit(0)      # 1
        clamp_limit(None)   # 20
        clamp_limit("abc")  # 20
    """
    maximum = max(MIN_PAGE_SIZE, min(maximum, MAX_PAGE_SIZE))
    value = default
    if limit is not None and limit != "":
        try:
            value = coerce_int(limit)
        except (ValueError, TypeError):
            value = default
    return max(MIN_PAGE_SIZE, min(value, maximum))


class KeysetPaginator[T]:
    """Keyset pagination over one entity.

    Instances hold configuration only; every ``paginate`` call is an
    independent read and the paginator may be shared across requests.

    Attributes:
        adapter: Entity configuration
        executor: Query execution capability
        observer: Receives pagination events (no-op by default)
    """

    __slots__ = (
        "adapter",
        "default_limit",
        "executor",
        "max_cursor_length",
        "max_limit",
        "observer",
        "strict_cursors",
    )

    def __init__(
        self,
        adapter: EntityAdapter[T],
        executor: QueryExecutor,
        *,
        default_limit: int = DEFAULT_PAGE_SIZE,
        max_limit: int = MAX_PAGE_SIZE,
        strict_cursors: bool = False,
        max_cursor_length: int = MAX_CURSOR_LENGTH,
        observer: PaginationObserver | None = None,
    ) -> None:
        """Initialize paginator.

        Args:
            adapter: Entity configuration
            executor: Query execution capability
            default_limit: Page size when the request gives none
            max_limit: Upper bound for page sizes (never above 100)
            strict_cursors: Raise InvalidCursorError instead of restarting
            max_cursor_length: Longest cursor token that is decoded at all
            observer: Event sink for logging and metrics
        """
        self.adapter = adapter
        self.executor = executor
        self.max_limit = max(MIN_PAGE_SIZE, min(max_limit, MAX_PAGE_SIZE))
        self.default_limit = clamp_limit(default_limit, maximum=self.max_limit)
        self.strict_cursors = strict_cursors
        self.max_cursor_length = max_cursor_length
        self.observer: PaginationObserver = observer or NullObserver()

    @classmethod
    def from_settings(
        cls,
        adapter: EntityAdapter[T],
        executor: QueryExecutor,
        settings: PaginationSettings,
        *,
        observer: PaginationObserver | None = None,
    ) -> KeysetPaginator[T]:
        """Build a paginator configured from PaginationSettings."""
        return cls(
            adapter,
            executor,
            default_limit=settings.default_limit,
            max_limit=settings.max_limit,
            strict_cursors=settings.strict_cursors,
            max_cursor_length=settings.max_cursor_length,
            observer=observer,
        )

    def resolve_cursor(self, token: str | None) -> Any | None:
        """Decode ``token`` into the ordering-key value to seek past.

        A cursor that does not decode, names a different key, or carries a
        value of the wrong type is reported to the observer and ignored.

        Raises:
            InvalidCursorError: If the cursor is unusable and strict mode is on
        """
        if not token:
            return None

        state = CursorCodec.decode(token, max_length=self.max_cursor_length)
        value = None
        if state is not None and self.adapter.key_column in state:
            try:
                value = self.adapter.coerce_key(state[self.adapter.key_column])
            except (ValueError, TypeError):
                value = None

        if value is None:
            self.observer.invalid_cursor(self.adapter.name, str(token))
            if self.strict_cursors:
                raise InvalidCursorError(self.adapter.name)
        return value

    def plan(
        self,
        *,
        limit: Any = None,
        cursor: str | None = None,
        filters: Mapping[str, Any] | None = None,
    ) -> QueryPlan:
        """Build the query plan for one page request."""
        page_size = clamp_limit(limit, default=self.default_limit, maximum=self.max_limit)
        cursor_value = self.resolve_cursor(cursor)

        composed = compose_predicates(self.adapter, filters, cursor_value=cursor_value)
        for name, reason in composed.rejected.items():
            self.observer.filter_rejected(self.adapter.name, name, reason)

        return QueryPlan(
            table=self.adapter.table,
            columns=self.adapter.columns,
            key_column=self.adapter.key_column,
            direction=self.adapter.direction,
            predicates=tuple(composed.predicates),
            limit=page_size,
        )

    async def fetch(self, plan: QueryPlan) -> list[Mapping[str, Any]]:
        """Execute ``plan`` once and return the raw rows (up to limit + 1)."""
        rendered = plan.render(self.executor.dialect)
        start = time.perf_counter()
        try:
            rows = await self.executor.execute(rendered.sql, rendered.params)
        except Exception as exc:
            self.observer.query_failed(
                self.adapter.name, rendered.sql, exc, time.perf_counter() - start
            )
            raise

        rows = list(rows)
        self.observer.query_executed(
            self.adapter.name,
            rendered.sql,
            rendered.params,
            len(rows),
            time.perf_counter() - start,
        )
        return rows

    def assemble(self, rows: Sequence[Mapping[str, Any]], limit: int) -> Page[T]:
        """Turn up to ``limit + 1`` raw rows into a page.

        The extra row only signals that another page exists; the next cursor
        comes from the last row that is returned.
        """
        has_more = len(rows) > limit
        kept = rows[:limit] if has_more else rows

        next_cursor = None
        if has_more and kept:
            next_cursor = CursorCodec.create_cursor(kept[-1], self.adapter.key_column)

        items = [self.adapter.map_row(row) for row in kept]
        self.observer.page_assembled(self.adapter.name, len(items), has_more)
        return Page[Any](items=items, next_cursor=next_cursor)

    async def paginate(
        self,
        *,
        limit: Any = None,
        cursor: str | None = None,
        filters: Mapping[str, Any] | None = None,
    ) -> Page[T]:
        """Fetch one page.

        Args:
            limit: Requested page size (clamped, default when missing)
            cursor: ``next_cursor`` from the previous page, or None to start
            filters: Raw filter values keyed by filter name

        Returns:
            Page with items and, if more rows exist, ``next_cursor``
        """
        plan = self.plan(limit=limit, cursor=cursor, filters=filters)
        rows = await self.fetch(plan)
        return self.assemble(rows, plan.limit)


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "MIN_PAGE_SIZE",
    "KeysetPaginator",
    "QueryExecutor",
    "clamp_limit",
]
