"""Keyset query plans rendered to positionally-parameterized SQL.

A ``QueryPlan`` is an immutable description of one page request: the table,
the selected columns, the ordered predicates, the ordering key and the page
size. Rendering walks the predicates once and appends every parameter through
a ``ParameterBinder``, which hands back the placeholder for the position the
value was stored at. Placeholder numbering and parameter order therefore
cannot drift apart.

Example:
    plan = QueryPlan(
        table="drug_exposure",
        columns=("drug_exposure_id", "person_id"),
        key_column="drug_exposure_id",
        direction=SortDirection.DESC,
        predicates=(
            Predicate(("drug_exposure_id",), FilterOperator.LT, 321),
            Predicate(("person_id",), FilterOperator.EQ, 42),
        ),
        limit=20,
    )
    rendered = plan.render(POSTGRES_NUMERIC)
    # SELECT drug_exposure_id, person_id
    # FROM drug_exposure
    # WHERE drug_exposure_id < $1 AND person_id = $2
    # ORDER BY drug_exposure_id DESC
    # LIMIT $3
    # rendered.params == (321, 42, 21)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol


class SortDirection(StrEnum):
    """Fixed ordering direction of an entity's ordering key."""

    ASC = "asc"
    DESC = "desc"

    @property
    def seek_operator(self) -> FilterOperator:
        """Comparison that selects rows after the cursor in this direction."""
        return FilterOperator.LT if self is SortDirection.DESC else FilterOperator.GT


class FilterOperator(StrEnum):
    """SQL comparison used by a predicate."""

    EQ = "eq"
    GTE = "gte"
    LTE = "lte"
    LT = "lt"
    GT = "gt"
    CONTAINS = "contains"


_COMPARISONS = {
    FilterOperator.EQ: "=",
    FilterOperator.GTE: ">=",
    FilterOperator.LTE: "<=",
    FilterOperator.LT: "<",
    FilterOperator.GT: ">",
}


class ParamStyle(StrEnum):
    """DB-API positional parameter styles (PEP 249 names)."""

    QMARK = "qmark"
    FORMAT = "format"
    NUMERIC = "numeric"
    NUMERIC_DOLLAR = "numeric_dollar"

    def placeholder(self, position: int) -> str:
        """Placeholder for the 1-based parameter ``position``."""
        if self is ParamStyle.QMARK:
            return "?"
        if self is ParamStyle.FORMAT:
            return "%s"
        if self is ParamStyle.NUMERIC:
            return f":{position}"
        return f"${position}"


@dataclass(frozen=True, slots=True)
class SqlDialect:
    """What the renderer needs to know about the target database.

    Attributes:
        name: Dialect name (informational, used in logs)
        param_style: Positional placeholder style of the driver
        case_insensitive_like: Operator for contains matching
        like_escape: Escape character to declare with ``ESCAPE``, or None
            when the database already treats backslash as the LIKE escape
    """

    name: str
    param_style: ParamStyle
    case_insensitive_like: str = "ILIKE"
    like_escape: str | None = None


# asyncpg and SQLAlchemy's asyncpg dialect
POSTGRES_NUMERIC = SqlDialect("postgresql", ParamStyle.NUMERIC_DOLLAR)
# psycopg 3 (native pool or SQLAlchemy psycopg dialect)
POSTGRES_FORMAT = SqlDialect("postgresql", ParamStyle.FORMAT)
# SQLite has no ILIKE; its LIKE is case-insensitive for ASCII
SQLITE = SqlDialect("sqlite", ParamStyle.QMARK, case_insensitive_like="LIKE", like_escape="\\")


class ParameterBinder:
    """Collect parameters and hand out matching placeholders."""

    __slots__ = ("_style", "params")

    def __init__(self, style: ParamStyle) -> None:
        self._style = style
        self.params: list[Any] = []

    def bind(self, value: Any) -> str:
        """Append ``value`` and return its placeholder."""
        self.params.append(value)
        return self._style.placeholder(len(self.params))


class Condition(Protocol):
    """Anything that renders to a WHERE-clause condition."""

    def render(self, binder: ParameterBinder, dialect: SqlDialect) -> str: ...


@dataclass(frozen=True, slots=True)
class Predicate:
    """A single SQL condition bound to one value.

    A predicate over several columns matches if any column matches, and binds
    the value once per column. With ``null_passes`` rows whose column is NULL
    also match.

    Attributes:
        columns: Column names or SQL expressions compared against the value
        operator: Comparison operator
        value: Value bound as the query parameter (already wildcarded for
            CONTAINS)
        null_passes: Also match rows where the column is NULL
    """

    columns: tuple[str, ...]
    operator: FilterOperator
    value: Any
    null_passes: bool = False

    def render(self, binder: ParameterBinder, dialect: SqlDialect) -> str:
        parts: list[str] = []
        for column in self.columns:
            if self.null_passes:
                parts.append(f"{column} IS NULL")
            parts.append(self._render_comparison(column, binder, dialect))

        if len(parts) == 1:
            return parts[0]
        return f"({' OR '.join(parts)})"

    def _render_comparison(
        self,
        column: str,
        binder: ParameterBinder,
        dialect: SqlDialect,
    ) -> str:
        if self.operator is FilterOperator.CONTAINS:
            fragment = f"{column} {dialect.case_insensitive_like} {binder.bind(self.value)}"
            if dialect.like_escape:
                fragment += f" ESCAPE '{dialect.like_escape}'"
            return fragment
        return f"{column} {_COMPARISONS[self.operator]} {binder.bind(self.value)}"


@dataclass(frozen=True, slots=True)
class StaticCondition:
    """A parameterless condition that always applies (e.g. ``x IS NOT NULL``)."""

    sql: str

    def render(self, binder: ParameterBinder, dialect: SqlDialect) -> str:
        return self.sql


@dataclass(frozen=True, slots=True)
class RenderedQuery:
    """Final SQL text and its positional parameters."""

    sql: str
    params: tuple[Any, ...]


@dataclass(frozen=True, slots=True)
class QueryPlan:
    """One keyset page request, ready to render.

    ``limit`` is the page size; the rendered query asks for one extra row so
    the assembler can tell whether another page exists.
    """

    table: str
    columns: tuple[str, ...]
    key_column: str
    direction: SortDirection
    predicates: tuple[Condition, ...] = field(default_factory=tuple)
    limit: int = 20

    @property
    def fetch_limit(self) -> int:
        return self.limit + 1

    def render(self, dialect: SqlDialect) -> RenderedQuery:
        """Render to SQL for ``dialect``.

        Parameters are bound in predicate order, then the LIMIT value.
        """
        binder = ParameterBinder(dialect.param_style)
        conditions = [predicate.render(binder, dialect) for predicate in self.predicates]

        lines = [
            f"SELECT {', '.join(self.columns)}",
            f"FROM {self.table}",
        ]
        if conditions:
            lines.append(f"WHERE {' AND '.join(conditions)}")
        lines.append(f"ORDER BY {self.key_column} {self.direction.value.upper()}")
        lines.append(f"LIMIT {binder.bind(self.fetch_limit)}")

        return RenderedQuery(sql="\n".join(lines), params=tuple(binder.params))


__all__ = [
    "POSTGRES_FORMAT",
    "POSTGRES_NUMERIC",
    "SQLITE",
    "Condition",
    "FilterOperator",
    "ParamStyle",
    "ParameterBinder",
    "Predicate",
    "QueryPlan",
    "RenderedQuery",
    "SortDirection",
    "SqlDialect",
    "StaticCondition",
]
