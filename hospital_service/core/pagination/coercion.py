"""Value coercion for search filters.

Filter values arrive as raw query-string text. Each filter declares a
coercer that turns the raw value into the type bound to the SQL parameter.
A coercer raises ``ValueError`` or ``TypeError`` when the value is unusable;
the filter composer then treats that filter as absent.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping
from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID

Coercer = Callable[[Any], Any]


def coerce_int(value: Any) -> int:
    """Coerce to int, rejecting booleans, floats with a fraction and blanks."""
    if isinstance(value, bool):
        raise TypeError("Boolean is not an integer filter value")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Non-integral value: {value!r}")
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise TypeError(f"Cannot coerce {type(value).__name__} to int")


BIGINT_MIN = -(2**63)
BIGINT_MAX = 2**63 - 1


def coerce_bigint(value: Any) -> int:
    """Coerce to an int that fits a signed 64-bit BIGINT column."""
    number = coerce_int(value)
    if not BIGINT_MIN <= number <= BIGINT_MAX:
        raise ValueError(f"Integer out of BIGINT range: {number}")
    return number


def coerce_text(value: Any) -> str:
    """Coerce to a stripped, non-empty string."""
    if not isinstance(value, str | int) or isinstance(value, bool):
        raise TypeError(f"Cannot coerce {type(value).__name__} to text")
    text = str(value).strip()
    if not text:
        raise ValueError("Empty text filter")
    return text


def coerce_date(value: Any) -> date:
    """Coerce an ISO 8601 date (``YYYY-MM-DD``) or a datetime to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise TypeError(f"Cannot coerce {type(value).__name__} to date")


def coerce_datetime(value: Any) -> datetime:
    """Coerce an ISO 8601 date or datetime to a timezone-aware datetime.

    Bare dates become midnight; naive datetimes are taken as UTC.
    """
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        result = datetime.fromisoformat(text)
    else:
        raise TypeError(f"Cannot coerce {type(value).__name__} to datetime")

    if result.tzinfo is None:
        result = result.replace(tzinfo=UTC)
    return result


def coerce_uuid(value: Any) -> UUID:
    """Coerce to UUID."""
    if isinstance(value, UUID):
        return value
    if isinstance(value, str):
        return UUID(value.strip())
    raise TypeError(f"Cannot coerce {type(value).__name__} to UUID")


def one_of(choices: Collection[str], *, case_insensitive: bool = True) -> Coercer:
    """Build a coercer accepting only one of ``choices``.

    Example:
        coerce_visit_type = one_of({"OPD", "IPD", "ER"})
        coerce_visit_type("opd")  # "OPD"
    """
    canonical = {(c.upper() if case_insensitive else c): c for c in choices}

    def _coerce(value: Any) -> str:
        text = coerce_text(value)
        key = text.upper() if case_insensitive else text
        if key not in canonical:
            raise ValueError(f"{text!r} is not one of {sorted(canonical.values())}")
        return canonical[key]

    return _coerce


def lookup(table: Mapping[str, Any], *, case_insensitive: bool = True) -> Coercer:
    """Build a coercer mapping a request value through ``table``.

    Unknown values raise ``ValueError``, so the filter is dropped.

    Example:
        coerce_system = lookup({"ICD10": "ICD10CM"})
        coerce_system("icd10")  # "ICD10CM"
    """
    normalized = {(k.upper() if case_insensitive else k): v for k, v in table.items()}

    def _coerce(value: Any) -> Any:
        text = coerce_text(value)
        key = text.upper() if case_insensitive else text
        try:
            return normalized[key]
        except KeyError:
            raise ValueError(f"Unknown value {text!r}") from None

    return _coerce


__all__ = [
    "BIGINT_MAX",
    "BIGINT_MIN",
    "Coercer",
    "coerce_bigint",
    "coerce_date",
    "coerce_datetime",
    "coerce_int",
    "coerce_text",
    "coerce_uuid",
    "lookup",
    "one_of",
]
