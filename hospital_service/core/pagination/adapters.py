"""Entity adapter contract for the keyset paginator.

An entity adapter tells the engine everything it needs about one table:
where the rows live, which column orders them, which filters exist and how
raw rows become typed entities. Adapters are immutable and built once per
entity at import time.

Example:
    MEDICATION_ADAPTER = TableAdapter(
        name="medication",
        table="drug_exposure",
        key_column="drug_exposure_id",
        direction=SortDirection.DESC,
        columns=("drug_exposure_id", "person_id", "drug_exposure_start"),
        row_mapper=Medication.model_validate,
        filters=(FilterField("person_id", "person_id", coerce=coerce_int),),
    )
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from hospital_service.core.pagination.coercion import Coercer, coerce_bigint
from hospital_service.core.pagination.filters import SearchFilter
from hospital_service.core.pagination.query import Condition, SortDirection

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


class EntityAdapter[T](Protocol):
    """What the paginator requires from each searchable entity."""

    @property
    def name(self) -> str: ...

    @property
    def table(self) -> str: ...

    @property
    def key_column(self) -> str: ...

    @property
    def direction(self) -> SortDirection: ...

    @property
    def columns(self) -> tuple[str, ...]: ...

    @property
    def filters(self) -> tuple[SearchFilter, ...]: ...

    @property
    def base_conditions(self) -> tuple[Condition, ...]: ...

    def map_row(self, row: Mapping[str, Any]) -> T: ...

    def coerce_key(self, value: Any) -> Any: ...


@dataclass(frozen=True, slots=True)
class TableAdapter[T]:
    """Generic single-table entity adapter.

    Attributes:
        name: Entity name used in logs and metrics
        table: Table identifier
        key_column: Ordering-key column (unique, immutable, totally ordered)
        direction: Fixed ORDER BY direction for the key
        columns: Selected columns; must include the key column
        row_mapper: Converts a raw row mapping into the entity type
        filters: Declared filters, in binding order
        base_conditions: Parameterless conditions applied to every query
        key_coercer: Validates the key value read back from a cursor
    """

    name: str
    table: str
    key_column: str
    direction: SortDirection
    columns: tuple[str, ...]
    row_mapper: Callable[[Mapping[str, Any]], T]
    filters: tuple[SearchFilter, ...] = ()
    base_conditions: tuple[Condition, ...] = ()
    key_coercer: Coercer = coerce_bigint

    def __post_init__(self) -> None:
        for label, identifier in (("table", self.table), ("key_column", self.key_column)):
            if not _IDENTIFIER.match(identifier):
                msg = f"Invalid {label} identifier for {self.name!r}: {identifier!r}"
                raise ValueError(msg)
        if self.key_column not in self.columns:
            msg = f"Key column {self.key_column!r} must be selected for {self.name!r}"
            raise ValueError(msg)

        names = [f.name for f in self.filters]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            msg = f"Duplicate filter names for {self.name!r}: {sorted(duplicates)}"
            raise ValueError(msg)

    @property
    def filter_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.filters)

    def map_row(self, row: Mapping[str, Any]) -> T:
        return self.row_mapper(row)

    def coerce_key(self, value: Any) -> Any:
        return self.key_coercer(value)


__all__ = ["EntityAdapter", "TableAdapter"]
