from __future__ import annotations

from datetime import date

import pytest

from shop_reports import cli
from shop_reports.store.demo_data import demo_expenses, demo_inventory, demo_sales
from shop_reports.store.memory import InMemoryRecordStore
from shop_reports.models import Expense, InventoryItem, Sale


@pytest.fixture
def stores() -> dict:
    return {
        "sales": InMemoryRecordStore(Sale, demo_sales()),
        "expenses": InMemoryRecordStore(Expense, demo_expenses()),
        "inventory": InMemoryRecordStore(InventoryItem, demo_inventory()),
    }


def run(argv: list[str], stores: dict) -> None:
    cli.dispatch(cli.build_parser().parse_args(argv), stores)


def test_report_expenses_with_search(stores, capsys) -> None:
    run(["report", "expenses", "--search", "paper"], stores)
    out = capsys.readouterr().out
    assert "== expenses (1 records)" in out
    assert "Printing Materials" in out
    assert "Rent" not in out


def test_report_sales_with_trend(stores, capsys) -> None:
    run(["report", "sales", "--from", "2025-12-07", "--to", "2025-12-10", "--trend"], stores)
    out = capsys.readouterr().out
    assert "total=175.00" in out
    assert "avg rate" in out
    assert "Dec 7" in out and "Dec 10" in out


def test_overview(stores, capsys) -> None:
    run(["overview", "--from", "2025-12-08", "--to", "2025-12-10"], stores)
    out = capsys.readouterr().out
    assert "revenue=175.00" in out
    assert "Dec 9" in out
    assert "today income=40.00 expenses=15,000.00" in out
    assert "month income=175.00" in out
    assert "Oct" in out and "Nov" in out
    assert "Internet Browsing x1" in out
    assert "Rent - Office Rent for December" in out


def test_add_expense_and_sale(stores, capsys) -> None:
    run(["add-expense", "--category", "Internet", "--amount", "499", "--date", "2025-12-11"], stores)
    run(["add-sale", "--service", "6", "--quantity", "3"], stores)
    assert stores["expenses"].list()[0].expense_date == date(2025, 12, 11)
    sale = stores["sales"].list()[0]
    assert sale.rate == 40 and sale.total == 120
    assert "Saved sale" in capsys.readouterr().out


def test_update_stock_reports_low_level(stores, capsys) -> None:
    run(["update-stock", "--id", "2", "--quantity", "1"], stores)
    assert stores["inventory"].get("2").quantity == 1
    assert "(low)" in capsys.readouterr().out

    run(["low-stock"], stores)
    assert "Black Toner Cartridge" in capsys.readouterr().out


def test_seed_requires_mongo(stores) -> None:
    with pytest.raises(RuntimeError):
        run(["seed"], stores)


def test_main_reports_bad_input_and_exits_2(monkeypatch, stores, capsys) -> None:
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setattr(cli, "configure_logging", lambda *a, **k: None)
    monkeypatch.setattr(cli, "open_stores", lambda settings: stores)
    with pytest.raises(SystemExit) as exc:
        cli.main(["add-sale", "--service", "99", "--quantity", "1"])
    assert exc.value.code == 2
    assert "Unknown service id" in capsys.readouterr().err


def test_main_reports_seed_without_mongo_and_exits_2(monkeypatch, stores, capsys) -> None:
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setattr(cli, "configure_logging", lambda *a, **k: None)
    monkeypatch.setattr(cli, "open_stores", lambda settings: stores)
    with pytest.raises(SystemExit) as exc:
        cli.main(["seed"])
    assert exc.value.code == 2
    assert "seed requires STORE_BACKEND=mongo" in capsys.readouterr().err
