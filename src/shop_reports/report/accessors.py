"""Per-record-type extractor bundles.

The filter, aggregation and trend functions are written once against a
`RecordAccessors` bundle; this module instantiates the bundle for each of
the shop's record types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from shop_reports.models import Expense


@dataclass(frozen=True)
class RecordAccessors:
    """How the reporting engine reads one kind of record.

    Attributes:
        name: Short name used in logs and the CLI ("sales", "expenses", ...).
        amount: Amount-like value summed into KPIs, groups and trend buckets.
        group_key: Breakdown key (category, or service name for sales).
        match_key: Value compared against `FilterSpec.category`.
        text_fields: Free-text fields searched by `FilterSpec.search`.
        timestamp: When the record happened; None for undated record types.
        unit: Value compared against `FilterSpec.unit`; None when not applicable.
        quantity: Optional quantity summed per group (enables average rate).
    """
    name: str
    amount: Callable[[Any], float]
    group_key: Callable[[Any], str]
    match_key: Callable[[Any], Optional[str]]
    text_fields: Callable[[Any], tuple[Optional[str], ...]]
    timestamp: Optional[Callable[[Any], datetime]] = None
    unit: Optional[Callable[[Any], Optional[str]]] = None
    quantity: Optional[Callable[[Any], float]] = None


def _expense_timestamp(e: Expense) -> datetime:
    return datetime.combine(e.expense_date, datetime.min.time())


SALES = RecordAccessors(
    name="sales",
    amount=lambda s: s.total,
    group_key=lambda s: s.service_type.name,
    match_key=lambda s: s.service_type.id,
    text_fields=lambda s: (s.service_type.name, s.notes),
    timestamp=lambda s: s.date_created,
    quantity=lambda s: s.quantity,
)

EXPENSES = RecordAccessors(
    name="expenses",
    amount=lambda e: e.amount,
    group_key=lambda e: e.category,
    match_key=lambda e: e.category,
    text_fields=lambda e: (e.notes,),
    timestamp=_expense_timestamp,
)

INVENTORY = RecordAccessors(
    name="inventory",
    amount=lambda i: i.quantity,
    group_key=lambda i: i.category,
    match_key=lambda i: i.category,
    text_fields=lambda i: (i.item_name, i.notes),
    unit=lambda i: i.unit,
)

ACCESSORS: dict[str, RecordAccessors] = {a.name: a for a in (SALES, EXPENSES, INVENTORY)}
