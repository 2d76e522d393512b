"""Filter engine: narrow a record collection with a `FilterSpec`.

Predicates are conjunctive and applied in a fixed order (date from, date to,
category, unit, search). Each one is skipped when its field is empty, and a
date bound that cannot be parsed is skipped rather than raising.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable

import pandas as pd

from shop_reports.models import FilterSpec
from shop_reports.report.accessors import RecordAccessors

log = logging.getLogger(__name__)

QUICK_RANGES = ("today", "week", "month")

END_OF_DAY = time(23, 59, 59, 999000)


def parse_filter_date(value: Any) -> date | None:
    """Return the calendar day named by a filter bound, or None.

    Accepts `date`, `datetime` and anything `pd.to_datetime` understands.
    Empty and unparseable values yield None.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        log.debug("Ignoring unparseable filter date %r", value)
        return None
    return ts.date()


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, END_OF_DAY)


def naive_local(ts: datetime) -> datetime:
    """Drop tzinfo after converting an aware timestamp to local time."""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone().replace(tzinfo=None)


def _matches_text(record: Any, term: str, accessors: RecordAccessors) -> bool:
    return any(
        field is not None and term in field.lower()
        for field in accessors.text_fields(record)
    )


def apply_filters(
    records: Iterable[Any],
    spec: FilterSpec | None,
    accessors: RecordAccessors,
) -> list[Any]:
    """Return the records that satisfy every non-empty predicate of `spec`.

    Args:
        records: Records of the kind described by `accessors`.
        spec: Filter state; None means no filtering.
        accessors: Extractors for the record type.

    Returns:
        A new list in the input's relative order. The input is not mutated.
    """
    rows = list(records)
    if spec is None:
        return rows

    if accessors.timestamp is not None:
        stamp = accessors.timestamp
        start = parse_filter_date(spec.date_from)
        if start is not None:
            lower = start_of_day(start)
            rows = [r for r in rows if naive_local(stamp(r)) >= lower]

        end = parse_filter_date(spec.date_to)
        if end is not None:
            upper = end_of_day(end)
            rows = [r for r in rows if naive_local(stamp(r)) <= upper]

    if spec.category:
        rows = [r for r in rows if accessors.match_key(r) == spec.category]

    if spec.unit and accessors.unit is not None:
        unit_of = accessors.unit
        rows = [r for r in rows if unit_of(r) == spec.unit]

    if spec.search:
        term = spec.search.lower()
        rows = [r for r in rows if _matches_text(r, term, accessors)]

    log.debug("Filtered %s: %d record(s) kept", accessors.name, len(rows))
    return rows


def quick_range(kind: str, today: date | None = None) -> tuple[date, date]:
    """Return the `(date_from, date_to)` pair for a quick filter button.

    Args:
        kind: "today", "week" (Monday to today) or "month" (1st to today).
        today: Reference day, defaults to the current local date.

    Raises:
        ValueError: for an unknown kind.
    """
    today = today or date.today()
    if kind == "today":
        return today, today
    if kind == "week":
        return today - timedelta(days=today.weekday()), today
    if kind == "month":
        return today.replace(day=1), today
    raise ValueError(f"Unknown quick range {kind!r}; expected one of {', '.join(QUICK_RANGES)}")
