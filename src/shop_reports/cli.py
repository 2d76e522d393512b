"""Command-line interface for the shop reports.

Provides subcommands: `report`, `overview`, `low-stock`, `add-sale`,
`add-expense`, `update-stock` and `seed`. Each command is implemented as a
`cmd_*` function that accepts an argparse namespace and the open stores.
"""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, datetime, timedelta
from typing import Any, Sequence

import pandas as pd

from shop_reports.config import get_settings
from shop_reports.logging_config import configure_logging
from shop_reports.models import (
    EXPENSE_CATEGORIES,
    INVENTORY_UNITS,
    PAYMENT_METHODS,
    Expense,
    FilterSpec,
    Sale,
)
from shop_reports.report.accessors import ACCESSORS
from shop_reports.report.filters import QUICK_RANGES, quick_range
from shop_reports.report.overview import (
    dashboard_kpis,
    low_stock_items,
    monthly_revenue,
    overview_kpis,
    recent_activity,
    revenue_vs_expense,
    stock_level,
)
from shop_reports.report.session import DEFAULT_TREND_DAYS, build_report
from shop_reports.store.base import RecordStore
from shop_reports.store.demo_data import service_type
from shop_reports.store.factory import DEMO_RECORDS, open_stores
from shop_reports.store.mongo import MongoRecordStore

log = logging.getLogger(__name__)

Stores = dict[str, RecordStore[Any]]


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _money(value: float) -> str:
    return f"{value:,.2f}"


def _table(rows: list[dict[str, Any]]) -> str:
    """Render rows as a fixed-width table (or a placeholder when empty)."""
    if not rows:
        return "(no rows)"
    return pd.DataFrame(rows).to_string(index=False)


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from None


def _filter_spec(args: argparse.Namespace) -> FilterSpec:
    date_from, date_to = args.date_from, args.date_to
    if args.quick:
        date_from, date_to = quick_range(args.quick)
    return FilterSpec(
        search=args.search,
        category=args.category,
        unit=args.unit,
        date_from=date_from,
        date_to=date_to,
    )


# --------------------------------------------------
# REPORTS
# --------------------------------------------------
def cmd_report(args: argparse.Namespace, stores: Stores) -> None:
    """Print KPIs, the group breakdown and (for dated records) the daily trend.

    Args:
        args: argparse namespace with `kind` and the filter options.
        stores: Open record stores keyed by kind.
    """
    accessors = ACCESSORS[args.kind]
    spec = _filter_spec(args)
    report = build_report(stores[args.kind].list(), spec, accessors)
    kpis = report.kpis

    print(f"== {args.kind} ({kpis.count} records)")
    print(f"total={_money(kpis.total)} average={_money(kpis.average)} max={_money(kpis.maximum)}")
    print()
    print(_table([
        {
            "key": s.key,
            "count": s.count,
            "total": _money(s.total),
            "average": _money(s.average),
            "share %": f"{s.percentage:.1f}",
            **({"quantity": s.quantity, "avg rate": _money(s.average_rate or 0.0)}
               if s.quantity is not None else {}),
        }
        for s in report.breakdown
    ]))

    if report.trend is not None and args.trend:
        print()
        print(_table([
            {"day": p.label, "value": _money(p.value), "count": p.count}
            for p in report.trend.points
        ]))


def cmd_overview(args: argparse.Namespace, stores: Stores) -> None:
    """Print shop totals, the dashboard figures and a daily comparison.

    The `--to` day (default today) is the reference day for the today and
    month figures, the monthly revenue and the daily window.
    """
    sales = stores["sales"].list()
    expenses = stores["expenses"].list()
    inventory = stores["inventory"].list()

    kpis = overview_kpis(sales, expenses)
    print(
        f"revenue={_money(kpis.total_revenue)} expenses={_money(kpis.total_expenses)} "
        f"net={_money(kpis.net_profit)} transactions={kpis.total_transactions}"
    )

    date_to = args.date_to or date.today()
    date_from = args.date_from or date_to - timedelta(days=6)

    home = dashboard_kpis(sales, expenses, today=date_to)
    print(
        f"today income={_money(home.today_income)} expenses={_money(home.today_expenses)} "
        f"profit={_money(home.today_profit)} month income={_money(home.month_income)}"
    )
    print()
    print(_table([
        {
            "day": p.label,
            "revenue": _money(p.revenue),
            "expense": _money(p.expense),
            "net": _money(p.net),
        }
        for p in revenue_vs_expense(sales, expenses, date_from, date_to)
    ]))
    print()
    print(_table([
        {"month": p.label, "revenue": _money(p.total), "sales": p.count}
        for p in monthly_revenue(sales, today=date_to)
    ]))
    print()
    print(_table([
        {
            "when": "" if a.when is None else f"{a.when:%Y-%m-%d %H:%M}",
            "type": a.kind,
            "activity": a.description,
            "amount": "" if a.amount is None else _money(a.amount),
            "status": a.status,
        }
        for a in recent_activity(sales, expenses, inventory)
    ]))


def cmd_low_stock(_: argparse.Namespace, stores: Stores) -> None:
    """List inventory items at or below their reorder level."""
    items = low_stock_items(stores["inventory"].list())
    print(_table([
        {
            "id": i.id,
            "item": i.item_name,
            "quantity": i.quantity,
            "unit": i.unit,
            "reorder at": i.reorder_level,
            "level": stock_level(i),
        }
        for i in items
    ]))


# --------------------------------------------------
# FORMS
# --------------------------------------------------
def cmd_add_sale(args: argparse.Namespace, stores: Stores) -> None:
    """Record a sale; the rate defaults to the service's default rate."""
    try:
        service = service_type(args.service)
    except KeyError:
        raise ValueError(f"Unknown service id {args.service!r}") from None

    sale = Sale(
        service_type=service,
        quantity=args.quantity,
        rate=service.default_rate if args.rate is None else args.rate,
        notes=args.notes,
        date_created=datetime.now(),
    )
    saved = stores["sales"].add(sale)
    print(f"Saved sale {saved.id}: {service.name} x{saved.quantity} = {_money(saved.total)}")


def cmd_add_expense(args: argparse.Namespace, stores: Stores) -> None:
    """Record an expense."""
    expense = Expense(
        expense_date=args.date or date.today(),
        category=args.category,
        amount=args.amount,
        payment_method=args.payment_method,
        notes=args.notes,
    )
    saved = stores["expenses"].add(expense)
    print(f"Saved expense {saved.id}: {saved.category} {_money(saved.amount)}")


def cmd_update_stock(args: argparse.Namespace, stores: Stores) -> None:
    """Set the quantity (and optionally reorder level) of an inventory item."""
    store = stores["inventory"]
    item = store.get(args.id)
    if item is None:
        raise ValueError(f"No inventory item with id {args.id!r}")

    changes: dict[str, Any] = {"quantity": args.quantity}
    if args.reorder_level is not None:
        changes["reorder_level"] = args.reorder_level
    updated = store.update(item.model_dump() | changes)
    print(f"Updated {updated.item_name}: {updated.quantity} {updated.unit} ({stock_level(updated)})")


def cmd_seed(_: argparse.Namespace, stores: Stores) -> None:
    """Load the demo records into the MongoDB collections."""
    for kind, store in stores.items():
        if not isinstance(store, MongoRecordStore):
            raise RuntimeError("seed requires STORE_BACKEND=mongo")
        store.seed(DEMO_RECORDS[kind]())
    log.info("Seed completed.")


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="shop-reports")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_report = sub.add_parser("report")
    p_report.add_argument("kind", choices=sorted(ACCESSORS))
    p_report.add_argument("--from", dest="date_from", default=None)
    p_report.add_argument("--to", dest="date_to", default=None)
    p_report.add_argument("--category", "--service", dest="category", default=None)
    p_report.add_argument("--unit", choices=INVENTORY_UNITS, default=None)
    p_report.add_argument("--search", default=None)
    p_report.add_argument("--quick", choices=QUICK_RANGES, default=None)
    p_report.add_argument(
        "--trend",
        action="store_true",
        help=f"print the daily trend (defaults to the last {DEFAULT_TREND_DAYS} days)",
    )

    p_overview = sub.add_parser("overview")
    p_overview.add_argument("--from", dest="date_from", type=_iso_date, default=None)
    p_overview.add_argument("--to", dest="date_to", type=_iso_date, default=None)

    sub.add_parser("low-stock")

    p_sale = sub.add_parser("add-sale")
    p_sale.add_argument("--service", required=True)
    p_sale.add_argument("--quantity", type=int, required=True)
    p_sale.add_argument("--rate", type=float, default=None)
    p_sale.add_argument("--notes", default=None)

    p_expense = sub.add_parser("add-expense")
    p_expense.add_argument("--date", type=_iso_date, default=None)
    p_expense.add_argument("--category", choices=EXPENSE_CATEGORIES, required=True)
    p_expense.add_argument("--amount", type=float, required=True)
    p_expense.add_argument("--payment-method", choices=PAYMENT_METHODS, default="Cash")
    p_expense.add_argument("--notes", default=None)

    p_stock = sub.add_parser("update-stock")
    p_stock.add_argument("--id", required=True)
    p_stock.add_argument("--quantity", type=int, required=True)
    p_stock.add_argument("--reorder-level", type=int, default=None)

    sub.add_parser("seed")

    return p


def dispatch(args: argparse.Namespace, stores: Stores) -> None:
    """Run the command selected by `args.cmd`."""
    if args.cmd == "report":
        cmd_report(args, stores)
    elif args.cmd == "overview":
        cmd_overview(args, stores)
    elif args.cmd == "low-stock":
        cmd_low_stock(args, stores)
    elif args.cmd == "add-sale":
        cmd_add_sale(args, stores)
    elif args.cmd == "add-expense":
        cmd_add_expense(args, stores)
    elif args.cmd == "update-stock":
        cmd_update_stock(args, stores)
    elif args.cmd == "seed":
        cmd_seed(args, stores)
    else:
        raise SystemExit(2)


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    args = build_parser().parse_args(argv)

    s = get_settings()
    configure_logging(s.log_path, s.log_level)

    try:
        dispatch(args, open_stores(s))
    except (ValueError, RuntimeError) as exc:  # ValueError includes pydantic.ValidationError
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc


if __name__ == "__main__":
    main()
