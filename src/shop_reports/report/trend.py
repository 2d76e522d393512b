"""Trend bucketizer: dense day-by-day series for time-series charts.

Every calendar day in the requested range gets a bucket, even when no record
falls on it, so a chart's x-axis never skips days.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Iterable

import pandas as pd

from shop_reports.models import TrendPoint, TrendSeries
from shop_reports.report.accessors import RecordAccessors
from shop_reports.report.filters import end_of_day, naive_local, start_of_day

log = logging.getLogger(__name__)


def day_label(day: date) -> str:
    """Return a short chart label such as "Dec 1"."""
    return f"{day:%b} {day.day}"


def _as_day(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.Timestamp(value).date()


def bucketize(
    records: Iterable[Any],
    date_from: date | datetime | str,
    date_to: date | datetime | str,
    accessors: RecordAccessors,
) -> TrendSeries:
    """Sum the amount-like field of `records` per calendar day.

    Args:
        records: Dated records of the kind described by `accessors`.
        date_from: First day of the range (inclusive).
        date_to: Last day of the range (inclusive).
        accessors: Extractors for the record type; must define `timestamp`.

    Returns:
        `TrendSeries` with one point per day in `[date_from, date_to]`,
        zero-filled where nothing happened. Empty when `date_to < date_from`.

    Raises:
        ValueError: if the record type has no timestamp.
    """
    if accessors.timestamp is None:
        raise ValueError(f"{accessors.name} records are not dated; no trend available")

    first = _as_day(date_from)
    last = _as_day(date_to)
    if last < first:
        log.debug("Empty trend range %s..%s", first, last)
        return TrendSeries(points=[])

    days = pd.date_range(first, last, freq="D")
    lower, upper = start_of_day(first), end_of_day(last)

    stamp = accessors.timestamp
    rows = []
    for r in records:
        ts = naive_local(stamp(r))
        if lower <= ts <= upper:
            rows.append({"day": pd.Timestamp(ts.date()), "amount": float(accessors.amount(r))})

    if rows:
        frame = pd.DataFrame(rows)
        daily = (
            frame.groupby("day")
            .agg(value=("amount", "sum"), count=("amount", "size"))
            .reindex(days, fill_value=0)
        )
        values = daily["value"].tolist()
        counts = daily["count"].tolist()
    else:
        values = [0.0] * len(days)
        counts = [0] * len(days)

    points = [
        TrendPoint(day=d.date(), label=day_label(d.date()), value=float(v), count=int(c))
        for d, v, c in zip(days, values, counts)
    ]
    return TrendSeries(points=points)
