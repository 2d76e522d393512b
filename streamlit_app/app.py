from __future__ import annotations

from datetime import date, timedelta

import altair as alt
import pandas as pd
import streamlit as st

from shop_reports.config import get_settings
from shop_reports.logging_config import configure_logging
from shop_reports.models import EXPENSE_CATEGORIES, INVENTORY_CATEGORIES, INVENTORY_UNITS
from shop_reports.report.accessors import EXPENSES, INVENTORY, SALES
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
from shop_reports.report.session import ReportSession
from shop_reports.store.demo_data import SERVICE_TYPES
from shop_reports.store.factory import open_stores

# =====================================================
# Page config
# =====================================================
st.set_page_config(page_title="Print Shop Dashboard", layout="wide")
st.title("🖨️ Print Shop Dashboard")


# =====================================================
# Stores (one per server process)
# =====================================================
@st.cache_resource
def load_stores():
    """Open the configured record stores once per Streamlit server."""
    s = get_settings()
    configure_logging(s.log_path, s.log_level)
    return open_stores(s)


try:
    stores = load_stores()
    sales = stores["sales"].list()
    expenses = stores["expenses"].list()
    inventory = stores["inventory"].list()
except Exception as exc:  # pragma: no cover - runtime failure handling
    st.error(f"Unable to load records: {exc}")
    st.stop()


# =====================================================
# Helpers
# =====================================================
def kpi_row(items: list[tuple[str, str]]) -> None:
    """Display a row of KPI metrics."""
    for col, (label, value) in zip(st.columns(len(items)), items):
        with col:
            st.metric(label, value)


def money(value: float) -> str:
    return f"₹{value:,.2f}"


def breakdown_frame(breakdown) -> pd.DataFrame:
    return pd.DataFrame([b.model_dump(exclude_none=True) for b in breakdown])


def donut(df: pd.DataFrame, title: str) -> alt.Chart:
    return (
        alt.Chart(df)
        .mark_arc(innerRadius=60)
        .encode(
            theta=alt.Theta("total:Q"),
            color=alt.Color("key:N", title=title),
            tooltip=["key:N", "total:Q", alt.Tooltip("percentage:Q", format=".1f")],
        )
        .properties(height=300)
    )


def trend_chart(trend, value_title: str) -> alt.Chart:
    df = pd.DataFrame({"day": [p.day for p in trend.points], "value": trend.values, "count": trend.counts})
    return (
        alt.Chart(df)
        .mark_line(point=True)
        .encode(
            x=alt.X("day:T", title=None),
            y=alt.Y("value:Q", title=value_title),
            tooltip=["day:T", "value:Q", "count:Q"],
        )
        .properties(height=300)
    )


# =====================================================
# Sidebar filters
# =====================================================
today = date.today()
st.sidebar.header("Filters")
quick = st.sidebar.radio("Quick range", ["Custom", *QUICK_RANGES], horizontal=True)
if quick == "Custom":
    date_from = st.sidebar.date_input("From", today.replace(day=1))
    date_to = st.sidebar.date_input("To", today)
else:
    date_from, date_to = quick_range(quick, today)
search = st.sidebar.text_input("Search notes / names")

# =====================================================
# SECTION 0 — OVERVIEW
# =====================================================
st.header("📌 Overview")

home = dashboard_kpis(sales, expenses, today=today)
kpi_row([
    ("Today's Income", money(home.today_income)),
    ("Today's Expenses", money(home.today_expenses)),
    ("Today's Profit", money(home.today_profit)),
    ("Month's Income", money(home.month_income)),
])

totals = overview_kpis(sales, expenses)
kpi_row([
    ("Total Revenue", money(totals.total_revenue)),
    ("Total Expenses", money(totals.total_expenses)),
    ("Net Profit", money(totals.net_profit)),
    ("Transactions", str(totals.total_transactions)),
])

daily = pd.DataFrame([p.model_dump(exclude={"day"}) for p in revenue_vs_expense(sales, expenses, today - timedelta(days=6), today)])
daily_long = daily.melt(id_vars=["label"], value_vars=["revenue", "expense"], var_name="series")
st.altair_chart(
    alt.Chart(daily_long)
    .mark_bar()
    .encode(
        x=alt.X("label:N", sort=None, title=None),
        xOffset="series:N",
        y=alt.Y("value:Q", title="Amount (₹)"),
        color=alt.Color("series:N", title=None),
        tooltip=["label:N", "series:N", "value:Q"],
    )
    .properties(height=300),
    width="stretch",
)

c1, c2 = st.columns(2)
with c1:
    monthly = pd.DataFrame([p.model_dump(exclude={"month"}) for p in monthly_revenue(sales, today=today)])
    st.altair_chart(
        alt.Chart(monthly)
        .mark_bar()
        .encode(
            x=alt.X("label:N", sort=None, title=None),
            y=alt.Y("total:Q", title="Monthly Revenue (₹)"),
            tooltip=["label:N", "total:Q", "count:Q"],
        )
        .properties(height=300),
        width="stretch",
    )
with c2:
    st.subheader("Recent Activity")
    activity = recent_activity(sales, expenses, inventory)
    if not activity:
        st.info("No activity yet.")
    for a in activity:
        amount = "" if a.amount is None else f" · {money(a.amount)}"
        when = "" if a.when is None else f"{a.when:%d %b %H:%M} · "
        line = f"{when}**{a.kind}** {a.description}{amount}"
        if a.status == "warning":
            st.warning(line)
        else:
            st.write(line)

st.divider()

# =====================================================
# SECTION 1 — SALES
# =====================================================
st.header("💰 Sales Summary")

service_names = {s.id: s.name for s in SERVICE_TYPES}
service_id = st.selectbox(
    "Service",
    [None, *service_names],
    format_func=lambda v: "All services" if v is None else service_names[v],
)
sales_report = ReportSession(sales, SALES, today=today).update(
    date_from=date_from, date_to=date_to, category=service_id, search=search
)
kpi_row([
    ("Sales", str(sales_report.kpis.count)),
    ("Revenue", money(sales_report.kpis.total)),
    ("Average Sale", money(sales_report.kpis.average)),
    ("Highest Sale", money(sales_report.kpis.maximum)),
])

if not sales_report.breakdown:
    st.info("No sales match the current filters.")
else:
    c1, c2 = st.columns(2)
    with c1:
        st.altair_chart(donut(breakdown_frame(sales_report.breakdown), "Service"), width="stretch")
    with c2:
        st.altair_chart(trend_chart(sales_report.trend, "Revenue (₹)"), width="stretch")
    st.dataframe(breakdown_frame(sales_report.breakdown), width="stretch")

st.divider()

# =====================================================
# SECTION 2 — EXPENSES
# =====================================================
st.header("🧾 Expense Summary")

expense_category = st.selectbox("Category", [None, *EXPENSE_CATEGORIES], format_func=lambda v: v or "All categories")
expense_report = ReportSession(expenses, EXPENSES, today=today).update(
    date_from=date_from, date_to=date_to, category=expense_category, search=search
)
kpi_row([
    ("Expenses", str(expense_report.kpis.count)),
    ("Total Spent", money(expense_report.kpis.total)),
    ("Average", money(expense_report.kpis.average)),
    ("Highest", money(expense_report.kpis.maximum)),
])

if not expense_report.breakdown:
    st.info("No expenses match the current filters.")
else:
    c1, c2 = st.columns(2)
    with c1:
        st.altair_chart(donut(breakdown_frame(expense_report.breakdown), "Category"), width="stretch")
    with c2:
        st.altair_chart(trend_chart(expense_report.trend, "Spent (₹)"), width="stretch")
    st.dataframe(breakdown_frame(expense_report.breakdown), width="stretch")

st.divider()

# =====================================================
# SECTION 3 — INVENTORY
# =====================================================
st.header("📦 Inventory")

c1, c2 = st.columns(2)
with c1:
    inventory_category = st.selectbox(
        "Item category", [None, *INVENTORY_CATEGORIES], format_func=lambda v: v or "All categories"
    )
with c2:
    inventory_unit = st.selectbox("Unit", [None, *INVENTORY_UNITS], format_func=lambda v: v or "All units")

stock_report = ReportSession(inventory, INVENTORY).update(
    category=inventory_category, unit=inventory_unit, search=search
)
low = low_stock_items(stock_report.rows)
kpi_row([
    ("Items", str(stock_report.kpis.count)),
    ("Units in Stock", f"{stock_report.kpis.total:,.0f}"),
    ("Low Stock", str(len(low))),
])

if low:
    st.warning("Low stock: " + ", ".join(i.item_name for i in low))

st.dataframe(
    pd.DataFrame([
        {
            "item": i.item_name,
            "category": i.category,
            "quantity": i.quantity,
            "unit": i.unit,
            "reorder level": i.reorder_level,
            "level": stock_level(i),
        }
        for i in stock_report.rows
    ]),
    width="stretch",
)

# =====================================================
# Footer
# =====================================================
st.caption(f"Store backend: {get_settings().store_backend} • pandas • Streamlit • Altair")
