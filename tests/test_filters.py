from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from conftest import make_expense, make_sale
from shop_reports.models import FilterSpec
from shop_reports.report.accessors import EXPENSES, INVENTORY, SALES
from shop_reports.report.filters import apply_filters, parse_filter_date, quick_range
from shop_reports.report.trend import bucketize


def test_no_spec_fields_passes_everything_through(expenses) -> None:
    assert apply_filters(expenses, FilterSpec(), EXPENSES) == expenses
    assert apply_filters(expenses, None, EXPENSES) == expenses


def test_search_matches_notes_case_insensitively(expenses) -> None:
    out = apply_filters(expenses, FilterSpec(search="paper"), EXPENSES)
    assert [e.notes for e in out] == ["A4 Paper Bundles (10)"]


def test_sales_search_matches_service_name_or_notes(sales) -> None:
    by_name = apply_filters(sales, FilterSpec(search="xerox"), SALES)
    assert [s.id for s in by_name] == ["1", "5"]
    by_note = apply_filters(sales, FilterSpec(search="RESUME"), SALES)
    assert [s.id for s in by_note] == ["2"]


def test_missing_notes_never_match() -> None:
    rows = [make_expense("Rent", 100), make_expense("Rent", 50, notes="rent for may")]
    out = apply_filters(rows, FilterSpec(search="rent"), EXPENSES)
    assert out == [rows[1]]


def test_same_day_range_returns_exactly_that_day() -> None:
    rows = [
        make_sale("1", 1, 2, datetime(2025, 12, 9, 23, 59, 59)),
        make_sale("1", 1, 2, datetime(2025, 12, 10, 0, 0)),
        make_sale("1", 1, 2, datetime(2025, 12, 10, 23, 59, 59, 999000)),
        make_sale("1", 1, 2, datetime(2025, 12, 11, 0, 0)),
    ]
    out = apply_filters(rows, FilterSpec(date_from="2025-12-10", date_to="2025-12-10"), SALES)
    assert out == rows[1:3]


def test_date_bounds_accept_date_objects(expenses) -> None:
    out = apply_filters(expenses, FilterSpec(date_from=date(2025, 12, 2), date_to=date(2025, 12, 8)), EXPENSES)
    assert [e.id for e in out] == ["2", "3", "4"]


def test_unparseable_date_is_skipped(expenses) -> None:
    out = apply_filters(expenses, FilterSpec(date_from="not-a-date", date_to="2025-12-05"), EXPENSES)
    assert [e.id for e in out] == ["3", "4", "5"]


def test_category_filter_uses_service_id_for_sales(sales) -> None:
    out = apply_filters(sales, FilterSpec(category="6"), SALES)
    assert [s.service_type.name for s in out] == ["Lamination"]


def test_inventory_filters_by_unit_category_and_name(inventory) -> None:
    assert [i.id for i in apply_filters(inventory, FilterSpec(unit="Boxes"), INVENTORY)] == ["3", "5"]
    assert [i.id for i in apply_filters(inventory, FilterSpec(category="Paper"), INVENTORY)] == ["1"]
    assert [i.id for i in apply_filters(inventory, FilterSpec(search="paper"), INVENTORY)] == ["1", "4"]


def test_inventory_ignores_date_bounds(inventory) -> None:
    assert apply_filters(inventory, FilterSpec(date_from="2030-01-01"), INVENTORY) == inventory


def test_filtering_is_idempotent_and_keeps_input_intact(sales) -> None:
    original = list(sales)
    spec = FilterSpec(date_from="2025-12-08", search="i")
    once = apply_filters(sales, spec, SALES)
    assert apply_filters(once, spec, SALES) == once
    assert sales == original
    assert once is not sales


def test_parse_filter_date() -> None:
    assert parse_filter_date("2025-12-01") == date(2025, 12, 1)
    assert parse_filter_date(datetime(2025, 12, 1, 18, 30)) == date(2025, 12, 1)
    assert parse_filter_date("") is None
    assert parse_filter_date("31/31/2025") is None


def test_quick_range() -> None:
    wednesday = date(2025, 12, 10)
    assert quick_range("today", wednesday) == (wednesday, wednesday)
    assert quick_range("week", wednesday) == (date(2025, 12, 8), wednesday)
    assert quick_range("month", wednesday) == (date(2025, 12, 1), wednesday)
    with pytest.raises(ValueError):
        quick_range("year", wednesday)


def test_unit_is_ignored_for_record_types_without_units(sales, expenses) -> None:
    assert apply_filters(sales, FilterSpec(unit="Boxes"), SALES) == sales
    assert apply_filters(expenses, FilterSpec(unit="Boxes"), EXPENSES) == expenses


def test_aware_timestamps_compare_on_local_calendar_day() -> None:
    local_noon = datetime(2025, 12, 10, 12, 0).astimezone()
    sale = make_sale("1", 1, 2, local_noon.astimezone(timezone.utc))

    out = apply_filters([sale], FilterSpec(date_from="2025-12-10", date_to="2025-12-10"), SALES)
    assert out == [sale]

    trend = bucketize([sale], date(2025, 12, 9), date(2025, 12, 11), SALES)
    assert trend.values == [0.0, 2.0, 0.0]
