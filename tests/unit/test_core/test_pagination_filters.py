"""Tests for filter declarations, predicate composition and entity adapters."""

from __future__ import annotations

from typing import Any

import pytest

from hospital_service.core.pagination import (
    ExpandingFilter,
    FilterField,
    FilterOperator,
    Predicate,
    SortDirection,
    StaticCondition,
    TableAdapter,
    coerce_int,
    compose_predicates,
    escape_like,
)


def _identity(row: Any) -> Any:
    return row


def make_adapter(**overrides: Any) -> TableAdapter[dict]:
    options: dict[str, Any] = {
        "name": "medication",
        "table": "drug_exposure",
        "key_column": "drug_exposure_id",
        "direction": SortDirection.DESC,
        "columns": ("drug_exposure_id", "person_id", "visit_occurrence_id"),
        "row_mapper": _identity,
        "filters": (
            FilterField("person_id", "person_id", coerce=coerce_int),
            FilterField("visit_occurrence_id", "visit_occurrence_id", coerce=coerce_int),
        ),
    }
    options.update(overrides)
    return TableAdapter(**options)


# ──────────────────────────────────────────────────────────────
# LIKE escaping
# ──────────────────────────────────────────────────────────────


class TestEscapeLike:
    """Tests for LIKE metacharacter escaping."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("smith", "smith"),
            ("100%", "100\\%"),
            ("a_b", "a\\_b"),
            ("c:\\temp", "c:\\\\temp"),
        ],
    )
    def test_escape_like(self, text, expected):
        assert escape_like(text) == expected

    def test_contains_filter_wraps_escaped_value(self):
        search = FilterField("q", "concept_name", FilterOperator.CONTAINS)

        (predicate,) = search.predicates("100%")

        assert predicate.value == "%100\\%%"


# ──────────────────────────────────────────────────────────────
# Filter declarations
# ──────────────────────────────────────────────────────────────


class TestFilterDeclarations:
    """Tests for FilterField and ExpandingFilter."""

    def test_filter_field_multi_column(self):
        search = FilterField("search", ("first_name", "mrn"), FilterOperator.CONTAINS)

        (predicate,) = search.predicates("jo")

        assert predicate.columns == ("first_name", "mrn")
        assert predicate.value == "%jo%"

    def test_filter_field_null_passes(self):
        date_to = FilterField("date_to", "visit_end", FilterOperator.LTE, null_passes=True)

        (predicate,) = date_to.predicates("2024-01-31")

        assert predicate.null_passes is True

    def test_expanding_filter_emits_one_predicate_per_part(self):
        dob = ExpandingFilter(
            "dob",
            parts=(("year_of_birth", FilterOperator.EQ), ("month_of_birth", FilterOperator.EQ)),
            split=lambda raw: (1980, 4),
        )

        assert dob.predicates("x") == [
            Predicate(("year_of_birth",), FilterOperator.EQ, 1980),
            Predicate(("month_of_birth",), FilterOperator.EQ, 4),
        ]

    def test_expanding_filter_skips_none_parts(self):
        dob = ExpandingFilter(
            "dob",
            parts=(("year_of_birth", FilterOperator.EQ), ("month_of_birth", FilterOperator.EQ)),
            split=lambda raw: (1980, None),
        )

        assert dob.predicates("x") == [Predicate(("year_of_birth",), FilterOperator.EQ, 1980)]

    def test_expanding_filter_rejects_wrong_arity(self):
        dob = ExpandingFilter(
            "dob",
            parts=(("year_of_birth", FilterOperator.EQ),),
            split=lambda raw: (1980, 4),
        )

        with pytest.raises(ValueError, match="produced 2 values"):
            dob.predicates("x")


# ──────────────────────────────────────────────────────────────
# Composition
# ──────────────────────────────────────────────────────────────


class TestComposePredicates:
    """Tests for compose_predicates ordering and policy."""

    def test_no_filters(self):
        composed = compose_predicates(make_adapter(), None)

        assert composed.predicates == []
        assert composed.applied == []
        assert composed.rejected == {}

    def test_cursor_precedes_filters(self):
        composed = compose_predicates(
            make_adapter(),
            {"visit_occurrence_id": "9", "person_id": "42"},
            cursor_value=321,
        )

        assert composed.predicates == [
            Predicate(("drug_exposure_id",), FilterOperator.LT, 321),
            Predicate(("person_id",), FilterOperator.EQ, 42),
            Predicate(("visit_occurrence_id",), FilterOperator.EQ, 9),
        ]
        # Declared order, not request order
        assert composed.applied == ["person_id", "visit_occurrence_id"]

    def test_ascending_cursor_seeks_forward(self):
        composed = compose_predicates(
            make_adapter(direction=SortDirection.ASC), {}, cursor_value=5
        )

        assert composed.predicates == [Predicate(("drug_exposure_id",), FilterOperator.GT, 5)]

    def test_base_conditions_come_first(self):
        adapter = make_adapter(base_conditions=(StaticCondition("quantity IS NOT NULL"),))

        composed = compose_predicates(adapter, {"person_id": "1"}, cursor_value=10)

        assert composed.predicates[0] == StaticCondition("quantity IS NOT NULL")
        assert composed.predicates[1].operator is FilterOperator.LT

    def test_unknown_filters_are_ignored(self):
        composed = compose_predicates(make_adapter(), {"drug_concept_id": "5", "bogus": "x"})

        assert composed.predicates == []
        assert composed.rejected == {}

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_values_are_absent(self, raw):
        composed = compose_predicates(make_adapter(), {"person_id": raw})

        assert composed.predicates == []
        assert composed.rejected == {}

    def test_uncoercible_values_are_rejected_not_raised(self):
        composed = compose_predicates(
            make_adapter(), {"person_id": "abc", "visit_occurrence_id": "9"}
        )

        assert composed.predicates == [Predicate(("visit_occurrence_id",), FilterOperator.EQ, 9)]
        assert list(composed.rejected) == ["person_id"]
        assert composed.applied == ["visit_occurrence_id"]


# ──────────────────────────────────────────────────────────────
# Adapters
# ──────────────────────────────────────────────────────────────


class TestTableAdapter:
    """Tests for TableAdapter validation."""

    def test_valid_adapter(self):
        adapter = make_adapter()

        assert adapter.filter_names == ("person_id", "visit_occurrence_id")
        assert adapter.map_row({"drug_exposure_id": 1}) == {"drug_exposure_id": 1}
        assert adapter.coerce_key("12") == 12

    def test_key_column_must_be_selected(self):
        with pytest.raises(ValueError, match="must be selected"):
            make_adapter(columns=("person_id",))

    @pytest.mark.parametrize(
        "overrides",
        [
            {"table": "drug_exposure; DROP TABLE person"},
            {"key_column": "id desc"},
        ],
    )
    def test_identifiers_are_validated(self, overrides):
        with pytest.raises(ValueError, match="Invalid"):
            make_adapter(**overrides)

    def test_duplicate_filter_names(self):
        with pytest.raises(ValueError, match="Duplicate filter names"):
            make_adapter(
                filters=(
                    FilterField("person_id", "person_id"),
                    FilterField("person_id", "visit_occurrence_id"),
                )
            )
