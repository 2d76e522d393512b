"""Shop-wide views that combine record types.

Revenue against expenses, net profit and the inventory stock indicators
shown on the reports page and the inventory list, plus the dashboard home:
today's and this month's figures, monthly revenue and the activity feed.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

import pandas as pd

from shop_reports.models import (
    DashboardKPIs,
    Expense,
    FilterSpec,
    InventoryItem,
    MonthlyRevenuePoint,
    OverviewKPIs,
    RecentActivity,
    RevenueExpensePoint,
    Sale,
)
from shop_reports.report.accessors import EXPENSES, SALES
from shop_reports.report.aggregate import kpi_summary
from shop_reports.report.filters import apply_filters, naive_local, quick_range
from shop_reports.report.trend import bucketize

DEFAULT_MONTHS = 3
DEFAULT_ACTIVITY_LIMIT = 5


def overview_kpis(sales: Iterable[Sale], expenses: Iterable[Expense]) -> OverviewKPIs:
    """Return revenue, expenses, net profit and the number of sales."""
    revenue = kpi_summary(sales, SALES)
    spent = kpi_summary(expenses, EXPENSES)
    return OverviewKPIs(
        total_revenue=revenue.total,
        total_expenses=spent.total,
        net_profit=revenue.total - spent.total,
        total_transactions=revenue.count,
    )


def revenue_vs_expense(
    sales: Iterable[Sale],
    expenses: Iterable[Expense],
    date_from: date,
    date_to: date,
) -> list[RevenueExpensePoint]:
    """Return one zero-filled revenue/expense/net point per day in the range."""
    revenue = bucketize(sales, date_from, date_to, SALES)
    spent = bucketize(expenses, date_from, date_to, EXPENSES)
    return [
        RevenueExpensePoint(
            day=r.day,
            label=r.label,
            revenue=r.value,
            expense=e.value,
            net=r.value - e.value,
        )
        for r, e in zip(revenue.points, spent.points)
    ]


def is_low_stock(item: InventoryItem) -> bool:
    """True when a reorder level is set and stock has fallen to it."""
    return bool(item.reorder_level) and item.quantity <= item.reorder_level


def stock_level(item: InventoryItem) -> str:
    """Classify stock as "low", "healthy" (over twice the reorder level) or "normal"."""
    if is_low_stock(item):
        return "low"
    if item.quantity > (item.reorder_level or 0) * 2:
        return "healthy"
    return "normal"


def low_stock_items(items: Iterable[InventoryItem]) -> list[InventoryItem]:
    return [i for i in items if is_low_stock(i)]


# --------------------------------------------------
# Dashboard home
# --------------------------------------------------
def dashboard_kpis(
    sales: Iterable[Sale],
    expenses: Iterable[Expense],
    today: date | None = None,
) -> DashboardKPIs:
    """Return today's income, expenses and profit plus month-to-date income."""
    sales, expenses = list(sales), list(expenses)
    day_from, day_to = quick_range("today", today)
    month_from, month_to = quick_range("month", today)
    day = FilterSpec(date_from=day_from, date_to=day_to)
    month = FilterSpec(date_from=month_from, date_to=month_to)

    income = kpi_summary(apply_filters(sales, day, SALES), SALES).total
    spent = kpi_summary(apply_filters(expenses, day, EXPENSES), EXPENSES).total
    return DashboardKPIs(
        today_income=income,
        today_expenses=spent,
        today_profit=income - spent,
        month_income=kpi_summary(apply_filters(sales, month, SALES), SALES).total,
    )


def monthly_revenue(
    sales: Iterable[Sale],
    months: int = DEFAULT_MONTHS,
    today: date | None = None,
) -> list[MonthlyRevenuePoint]:
    """Return zero-filled sales totals for the last `months` calendar months.

    The current month is the last point; sales after it are ignored.
    """
    today = today or date.today()
    index = pd.date_range(end=pd.Timestamp(today.year, today.month, 1), periods=months, freq="MS")
    if len(index) == 0:
        return []

    rows = []
    for s in sales:
        ts = naive_local(SALES.timestamp(s))
        rows.append({"month": pd.Timestamp(ts.year, ts.month, 1), "amount": float(s.total)})

    if rows:
        monthly = (
            pd.DataFrame(rows)
            .groupby("month")
            .agg(total=("amount", "sum"), count=("amount", "size"))
            .reindex(index, fill_value=0)
        )
        totals = monthly["total"].tolist()
        counts = monthly["count"].tolist()
    else:
        totals = [0.0] * len(index)
        counts = [0] * len(index)

    return [
        MonthlyRevenuePoint(month=m.date(), label=f"{m:%b}", total=float(t), count=int(c))
        for m, t, c in zip(index, totals, counts)
    ]


def _activity_sort_key(entry: RecentActivity) -> tuple[bool, datetime]:
    if entry.when is None:
        return False, datetime.min
    return True, naive_local(entry.when)


def recent_activity(
    sales: Iterable[Sale],
    expenses: Iterable[Expense],
    inventory: Iterable[InventoryItem],
    limit: int = DEFAULT_ACTIVITY_LIMIT,
) -> list[RecentActivity]:
    """Merge sales, expenses and low-stock alerts into a newest-first feed.

    Entries without a time (alerts for items never updated) sort last.
    """
    feed = [
        RecentActivity(
            id=s.id,
            kind="sale",
            description=f"{s.service_type.name} x{s.quantity}",
            amount=s.total,
            when=s.date_created,
        )
        for s in sales
    ]
    feed += [
        RecentActivity(
            id=e.id,
            kind="expense",
            description=f"{e.category} - {e.notes}" if e.notes else e.category,
            amount=e.amount,
            when=EXPENSES.timestamp(e),
        )
        for e in expenses
    ]
    feed += [
        RecentActivity(
            id=i.id,
            kind="alert",
            description=f"Low stock alert - {i.item_name}",
            when=i.last_updated,
            status="warning",
        )
        for i in low_stock_items(inventory)
    ]
    feed.sort(key=_activity_sort_key, reverse=True)
    return feed[:max(limit, 0)]
