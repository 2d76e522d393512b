from __future__ import annotations

import pytest

from conftest import make_expense
from shop_reports.report.accessors import EXPENSES, INVENTORY, SALES
from shop_reports.report.aggregate import category_breakdown, kpi_summary, summarize


def test_summarize_expense_example() -> None:
    rows = [make_expense("Rent", 15000), make_expense("Internet", 1200), make_expense("Rent", 500)]
    kpis, breakdown = summarize(rows, EXPENSES)

    assert kpis.count == 3
    assert kpis.total == 16700
    assert kpis.average == pytest.approx(5566.67, abs=0.01)
    assert kpis.maximum == 15000

    rent = breakdown[0]
    assert (rent.key, rent.count, rent.total, rent.average) == ("Rent", 2, 15500, 7750)
    assert rent.percentage == pytest.approx(92.81, abs=0.01)
    assert breakdown[1].key == "Internet"


def test_empty_input_degrades_to_zeros() -> None:
    kpis, breakdown = summarize([], EXPENSES)
    assert (kpis.count, kpis.total, kpis.average, kpis.maximum) == (0, 0, 0, 0)
    assert breakdown == []


def test_breakdown_totals_partition_the_kpi_total(expenses, sales) -> None:
    for rows, accessors in ((expenses, EXPENSES), (sales, SALES)):
        kpis, breakdown = summarize(rows, accessors)
        assert sum(b.total for b in breakdown) == pytest.approx(kpis.total)
        assert sum(b.count for b in breakdown) == kpis.count
        assert sum(b.percentage for b in breakdown) == pytest.approx(100.0)


def test_breakdown_sorted_descending_with_stable_ties() -> None:
    rows = [
        make_expense("Internet", 300),
        make_expense("Maintenance", 500),
        make_expense("Electricity", 300),
        make_expense("Maintenance", 100),
    ]
    keys = [b.key for b in category_breakdown(rows, EXPENSES)]
    assert keys == ["Maintenance", "Internet", "Electricity"]

    rows.reverse()
    keys = [b.key for b in category_breakdown(rows, EXPENSES)]
    assert keys == ["Maintenance", "Electricity", "Internet"]


def test_unknown_group_keys_are_aggregated(inventory) -> None:
    odd = inventory[0].model_copy(update={"category": "Binding Wire"})
    breakdown = category_breakdown([odd, inventory[1]], INVENTORY)
    assert [b.key for b in breakdown] == ["Binding Wire", "Toner"]
    assert breakdown[0].total == 50


def test_sales_breakdown_reports_quantity_and_average_rate(sales) -> None:
    breakdown = category_breakdown(sales, SALES)
    assert [b.key for b in breakdown] == [
        "Lamination",
        "Xerox (Color)",
        "Printout (B/W)",
        "Xerox (B/W)",
        "Internet Browsing",
    ]
    lamination = breakdown[0]
    assert lamination.quantity == 2
    assert lamination.average_rate == 40
    assert lamination.percentage == pytest.approx(80 / 175 * 100)


def test_expense_breakdown_has_no_quantity(expenses) -> None:
    assert all(b.quantity is None and b.average_rate is None for b in category_breakdown(expenses, EXPENSES))


def test_kpi_summary_for_inventory_counts_units(inventory) -> None:
    kpis = kpi_summary(inventory, INVENTORY)
    assert kpis.count == 6
    assert kpis.total == 200
    assert kpis.maximum == 100
