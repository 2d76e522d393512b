"""Recompute a report every time the filter state changes.

`ReportSession` is the binding between editable filter state and the pure
engine functions: each change merges into the current `FilterSpec` and the
whole report is rebuilt synchronously, replacing the previous result.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Iterable

from shop_reports.models import FilterSpec, Report, TrendSeries
from shop_reports.report.accessors import RecordAccessors
from shop_reports.report.aggregate import summarize
from shop_reports.report.filters import apply_filters, parse_filter_date, quick_range
from shop_reports.report.trend import bucketize

log = logging.getLogger(__name__)

DEFAULT_TREND_DAYS = 30

FILTER_ALIASES = {
    "dateFrom": "date_from",
    "dateTo": "date_to",
    "serviceType": "category",
    "service_type": "category",
}


def trend_window(spec: FilterSpec, today: date | None = None) -> tuple[date, date]:
    """Return the day range a trend chart covers for `spec`.

    Missing or unparseable bounds fall back to the last 30 days ending today.
    """
    today = today or date.today()
    start = parse_filter_date(spec.date_from) or today - timedelta(days=DEFAULT_TREND_DAYS)
    end = parse_filter_date(spec.date_to) or today
    return start, end


def build_report(
    records: Iterable[Any],
    spec: FilterSpec | None,
    accessors: RecordAccessors,
    today: date | None = None,
) -> Report:
    """Filter `records` and compute KPIs, breakdown and (for dated records) a trend.

    The trend buckets the filtered records over the spec's date window.
    """
    spec = spec or FilterSpec()
    rows = apply_filters(records, spec, accessors)
    kpis, breakdown = summarize(rows, accessors)

    trend: TrendSeries | None = None
    if accessors.timestamp is not None:
        start, end = trend_window(spec, today)
        trend = bucketize(rows, start, end, accessors)

    return Report(rows=rows, kpis=kpis, breakdown=breakdown, trend=trend)


class ReportSession:
    """Holds records plus filter state and keeps the latest report.

    Args:
        records: The resolved record collection (from a store `list`).
        accessors: Extractors for the record type.
        spec: Initial filter state (defaults to no filtering).
        today: Reference day for trend defaults and quick filters.
    """

    def __init__(
        self,
        records: Iterable[Any],
        accessors: RecordAccessors,
        spec: FilterSpec | None = None,
        today: date | None = None,
    ) -> None:
        self.accessors = accessors
        self.today = today
        self._records = list(records)
        self._spec = spec or FilterSpec()
        self._report = self._recompute()

    @property
    def spec(self) -> FilterSpec:
        return self._spec

    @property
    def report(self) -> Report:
        return self._report

    def _recompute(self) -> Report:
        return build_report(self._records, self._spec, self.accessors, self.today)

    def update(self, **changes: Any) -> Report:
        """Merge `changes` into the filter state and rebuild the report.

        Keys may use either field names or their camelCase aliases
        (`dateFrom`, `serviceType`, ...).

        Raises:
            pydantic.ValidationError: for unknown filter fields.
        """
        merged = self._spec.model_dump()
        merged.update({FILTER_ALIASES.get(k, k): v for k, v in changes.items()})
        self._spec = FilterSpec.model_validate(merged)
        self._report = self._recompute()
        log.debug("Recomputed %s report for %s", self.accessors.name, self._spec)
        return self._report

    def reset(self) -> Report:
        """Clear every filter."""
        self._spec = FilterSpec()
        self._report = self._recompute()
        return self._report

    def apply_quick_filter(self, kind: str) -> Report:
        """Set the date range to today, this week or this month."""
        start, end = quick_range(kind, self.today)
        return self.update(date_from=start, date_to=end)

    def refresh(self, records: Iterable[Any]) -> Report:
        """Swap in a freshly loaded record collection and rebuild."""
        self._records = list(records)
        self._report = self._recompute()
        return self._report
