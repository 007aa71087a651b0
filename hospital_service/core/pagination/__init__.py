"""Keyset (cursor) pagination shared by every search endpoint.

Pages are fetched with an indexed seek on one immutable ordering key instead
of an OFFSET scan, so results stay stable while rows are inserted:
- One query per page, asking for ``limit + 1`` rows
- The extra row only signals that another page exists
- ``nextCursor`` encodes the ordering key of the last returned row

REST usage:
    @router.get("/medications", response_model=Page[Medication])
    async def search_medications(request: Request, executor: ...) -> Page[Medication]:
        paginator = KeysetPaginator(MEDICATION_ADAPTER, executor)
        return await paginator.paginate(
            limit=request.query_params.get("limit"),
            cursor=request.query_params.get("cursor"),
            filters=request.query_params,
        )

Cursors are opaque base64 strings that clients pass back unchanged. An
unusable cursor restarts pagination at the first page.
"""

from hospital_service.core.pagination.adapters import EntityAdapter, TableAdapter
from hospital_service.core.pagination.coercion import (
    Coercer,
    coerce_bigint,
    coerce_date,
    coerce_datetime,
    coerce_int,
    coerce_text,
    coerce_uuid,
    lookup,
    one_of,
)
from hospital_service.core.pagination.cursor import MAX_CURSOR_LENGTH, CursorCodec, CursorState
from hospital_service.core.pagination.engine import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
    KeysetPaginator,
    QueryExecutor,
    clamp_limit,
)
from hospital_service.core.pagination.exceptions import InvalidCursorError, PaginationError
from hospital_service.core.pagination.filters import (
    ComposedFilters,
    ExpandingFilter,
    FilterField,
    SearchFilter,
    compose_predicates,
    escape_like,
)
from hospital_service.core.pagination.observers import (
    CompositeObserver,
    LoggingObserver,
    NullObserver,
    PaginationObserver,
    PrometheusObserver,
    default_observer,
)
from hospital_service.core.pagination.query import (
    POSTGRES_FORMAT,
    POSTGRES_NUMERIC,
    SQLITE,
    Condition,
    FilterOperator,
    ParameterBinder,
    ParamStyle,
    Predicate,
    QueryPlan,
    RenderedQuery,
    SortDirection,
    SqlDialect,
    StaticCondition,
)
from hospital_service.core.pagination.schemas import Page

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_CURSOR_LENGTH",
    "MAX_PAGE_SIZE",
    "MIN_PAGE_SIZE",
    "POSTGRES_FORMAT",
    "POSTGRES_NUMERIC",
    "SQLITE",
    # Filters
    "Coercer",
    "ComposedFilters",
    "CompositeObserver",
    "Condition",
    # Cursor
    "CursorCodec",
    "CursorState",
    # Adapters
    "EntityAdapter",
    "ExpandingFilter",
    "FilterField",
    "FilterOperator",
    "InvalidCursorError",
    # Engine
    "KeysetPaginator",
    # Observers
    "LoggingObserver",
    "NullObserver",
    # Schemas
    "Page",
    "PaginationError",
    "PaginationObserver",
    "ParamStyle",
    "ParameterBinder",
    "Predicate",
    "PrometheusObserver",
    "QueryExecutor",
    # Query
    "QueryPlan",
    "RenderedQuery",
    "SearchFilter",
    "SortDirection",
    "SqlDialect",
    "StaticCondition",
    "TableAdapter",
    "clamp_limit",
    "coerce_bigint",
    "coerce_date",
    "coerce_datetime",
    "coerce_int",
    "coerce_text",
    "coerce_uuid",
    "compose_predicates",
    "default_observer",
    "escape_like",
    "lookup",
    "one_of",
]
