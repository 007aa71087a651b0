"""Search filter declarations and the filter composer.

Each entity declares its filters once, in a fixed order. At request time the
composer walks that declaration, pulls the matching raw value out of the
request's filter mapping, coerces it, and emits predicates in declared order.

Usage:
    filters = (
        FilterField("person_id", "person_id", coerce=coerce_int),
        FilterField("date_from", "drug_exposure_start", FilterOperator.GTE, coerce_datetime),
        FilterField("q", "concept_name", FilterOperator.CONTAINS),
    )
    composed = compose_predicates(adapter, {"person_id": "42", "bogus": "x"})
    # composed.predicates -> [Predicate(("person_id",), EQ, 42)]
    # "bogus" is not declared and is ignored

Policy:
- Filters the entity does not declare are ignored.
- Values that fail coercion are treated as absent and reported in
  ``ComposedFilters.rejected``; they never fail the request.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from hospital_service.core.pagination.coercion import Coercer, coerce_text
from hospital_service.core.pagination.query import Condition, FilterOperator, Predicate

if TYPE_CHECKING:
    from hospital_service.core.pagination.adapters import EntityAdapter


def escape_like(text: str, escape: str = "\\") -> str:
    """Escape LIKE metacharacters so user text matches literally."""
    return (
        text.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )


class SearchFilter(Protocol):
    """A named filter that turns one raw request value into predicates."""

    @property
    def name(self) -> str: ...

    def predicates(self, raw: Any) -> list[Predicate]:
        """Build predicates for ``raw``.

        Raises:
            ValueError, TypeError: If the value cannot be used
        """
        ...


@dataclass(frozen=True, slots=True)
class FilterField:
    """A filter comparing one value against one or more columns.

    Attributes:
        name: Request parameter name
        column: Column (or SQL expression), or several columns OR-ed together
        operator: Comparison applied to every column
        coerce: Converts the raw request value; raises to drop the filter
        null_passes: Also match rows where the column is NULL

    Example:
        # (visit_end IS NULL OR visit_end <= $n)
        FilterField(
            "date_to", "visit_end", FilterOperator.LTE, coerce_datetime, null_passes=True
        )
    """

    name: str
    column: str | tuple[str, ...]
    operator: FilterOperator = FilterOperator.EQ
    coerce: Coercer = coerce_text
    null_passes: bool = False

    @property
    def columns(self) -> tuple[str, ...]:
        return (self.column,) if isinstance(self.column, str) else tuple(self.column)

    def predicates(self, raw: Any) -> list[Predicate]:
        value = self.coerce(raw)
        if self.operator is FilterOperator.CONTAINS:
            value = f"%{escape_like(str(value))}%"
        return [Predicate(self.columns, self.operator, value, self.null_passes)]


@dataclass(frozen=True, slots=True)
class ExpandingFilter:
    """A filter whose single request value fans out to several columns.

    ``split`` returns one value per entry in ``parts``; a None value skips that
    part. Every emitted predicate binds its own parameter.

    Example:
        # dob=1980-04-02 -> year_of_birth = 1980 AND month_of_birth = 4 AND day_of_birth = 2
        ExpandingFilter(
            "dob",
            parts=(
                ("year_of_birth", FilterOperator.EQ),
                ("month_of_birth", FilterOperator.EQ),
                ("day_of_birth", FilterOperator.EQ),
            ),
            split=split_date_of_birth,
        )
    """

    name: str
    parts: tuple[tuple[str, FilterOperator], ...]
    split: Callable[[Any], Sequence[Any | None]]

    def predicates(self, raw: Any) -> list[Predicate]:
        values = self.split(raw)
        if len(values) != len(self.parts):
            msg = f"Filter {self.name!r} produced {len(values)} values for {len(self.parts)} columns"
            raise ValueError(msg)
        return [
            Predicate((column,), operator, value)
            for (column, operator), value in zip(self.parts, values, strict=True)
            if value is not None
        ]


@dataclass(slots=True)
class ComposedFilters:
    """Result of composing a request's filters against an entity.

    Attributes:
        predicates: Conditions in binding order
        applied: Names of filters that contributed predicates
        rejected: Filter name -> reason, for values that failed coercion
    """

    predicates: list[Condition] = field(default_factory=list)
    applied: list[str] = field(default_factory=list)
    rejected: dict[str, str] = field(default_factory=dict)


def _is_absent(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def compose_predicates(
    adapter: EntityAdapter[Any],
    filters: Mapping[str, Any] | None = None,
    *,
    cursor_value: Any | None = None,
) -> ComposedFilters:
    """Compose an entity's WHERE conditions in binding order.

    Order: the entity's fixed conditions (no parameters), the cursor seek
    predicate, then each declared filter the caller supplied, in the
    entity's declared order.

    Args:
        adapter: Entity configuration
        filters: Raw request filters keyed by filter name
        cursor_value: Decoded ordering-key value to seek past, if any

    Returns:
        ComposedFilters with predicates and bookkeeping
    """
    filters = filters or {}
    composed = ComposedFilters(predicates=list(adapter.base_conditions))

    if cursor_value is not None:
        composed.predicates.append(
            Predicate((adapter.key_column,), adapter.direction.seek_operator, cursor_value)
        )

    for search_filter in adapter.filters:
        raw = filters.get(search_filter.name)
        if _is_absent(raw):
            continue
        try:
            predicates = search_filter.predicates(raw)
        except (ValueError, TypeError) as exc:
            composed.rejected[search_filter.name] = str(exc)
            continue
        if predicates:
            composed.predicates.extend(predicates)
            composed.applied.append(search_filter.name)

    return composed


__all__ = [
    "ComposedFilters",
    "ExpandingFilter",
    "FilterField",
    "SearchFilter",
    "compose_predicates",
    "escape_like",
]
