"""Aggregation engine: KPI rollups and per-group breakdowns.

Functions in this module turn a (usually already filtered) record collection
into a `KPISummary` and an ordered list of `CategorySummary` rows.

Expectations:
- Input: records of the kind described by a `RecordAccessors` bundle.
- Grouping preserves first-seen order, then a stable sort by total
  (descending) is applied, so equal totals keep the order in which their
  groups first appeared.
- Empty input degrades to zeros, never NaN.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

import pandas as pd

from shop_reports.models import CategorySummary, KPISummary
from shop_reports.report.accessors import RecordAccessors

log = logging.getLogger(__name__)


def records_frame(records: Iterable[Any], accessors: RecordAccessors) -> pd.DataFrame:
    """Project records onto a `key` / `amount` (/ `quantity`) DataFrame.

    Args:
        records: Records of the kind described by `accessors`.
        accessors: Extractors for the record type.

    Returns:
        pandas DataFrame with one row per record, in input order.
    """
    columns = ["key", "amount"]
    if accessors.quantity is not None:
        columns.append("quantity")

    rows = []
    for r in records:
        row = {"key": accessors.group_key(r), "amount": float(accessors.amount(r))}
        if accessors.quantity is not None:
            row["quantity"] = float(accessors.quantity(r))
        rows.append(row)

    return pd.DataFrame(rows, columns=columns)


def _kpis(frame: pd.DataFrame) -> KPISummary:
    count = len(frame)
    if count == 0:
        return KPISummary(count=0, total=0.0, average=0.0, maximum=0.0)

    total = float(frame["amount"].sum())
    return KPISummary(
        count=count,
        total=total,
        average=total / count,
        maximum=float(frame["amount"].max()),
    )


def _breakdown(frame: pd.DataFrame) -> list[CategorySummary]:
    if frame.empty:
        return []

    grand_total = float(frame["amount"].sum())
    has_quantity = "quantity" in frame.columns

    aggs: dict[str, tuple[str, str]] = {
        "count": ("amount", "size"),
        "total": ("amount", "sum"),
    }
    if has_quantity:
        aggs["quantity"] = ("quantity", "sum")

    grouped = (
        frame.groupby("key", sort=False, dropna=False)
        .agg(**aggs)
        .reset_index()
        .sort_values("total", ascending=False, kind="stable")
    )

    out: list[CategorySummary] = []
    for row in grouped.to_dict("records"):
        count = int(row["count"])
        total = float(row["total"])
        summary = CategorySummary(
            key=str(row["key"]),
            count=count,
            total=total,
            average=total / count if count else 0.0,
            percentage=(total / grand_total) * 100.0 if grand_total else 0.0,
        )
        if has_quantity:
            quantity = float(row["quantity"])
            summary.quantity = quantity
            summary.average_rate = total / quantity if quantity else 0.0
        out.append(summary)
    return out


def kpi_summary(records: Iterable[Any], accessors: RecordAccessors) -> KPISummary:
    """Return count, total, average and maximum of the amount-like field."""
    return _kpis(records_frame(records, accessors))


def category_breakdown(records: Iterable[Any], accessors: RecordAccessors) -> list[CategorySummary]:
    """Return one `CategorySummary` per group key, largest total first."""
    return _breakdown(records_frame(records, accessors))


def summarize(
    records: Iterable[Any],
    accessors: RecordAccessors,
) -> tuple[KPISummary, list[CategorySummary]]:
    """Compute the KPI rollup and the group breakdown in one pass over the input.

    Args:
        records: Records of the kind described by `accessors`.
        accessors: Extractors for the record type.

    Returns:
        `(KPISummary, list[CategorySummary])`. The breakdown totals add up
        to the KPI total.
    """
    frame = records_frame(records, accessors)
    kpis = _kpis(frame)
    breakdown = _breakdown(frame)
    log.debug(
        "Summarized %d %s record(s) into %d group(s)",
        kpis.count,
        accessors.name,
        len(breakdown),
    )
    return kpis, breakdown
