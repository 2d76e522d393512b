"""Pydantic models for shop records, filter specs and report outputs.

Records (`Sale`, `Expense`, `InventoryItem`) are validated on construction,
so the reporting engine only ever sees well-formed amounts, quantities and
enum values. Report models describe what the engine hands to the CLI and
the dashboard.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Union, get_args

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)

ExpenseCategory = Literal[
    "Rent",
    "Electricity",
    "Internet",
    "Printing Materials",
    "Maintenance",
    "Staff Salary",
    "Miscellaneous",
]
PaymentMethod = Literal["Cash", "UPI", "Bank Transfer", "Card"]
InventoryCategory = Literal["Paper", "Toner", "Ink", "Photo Paper", "Stationery", "Other"]
InventoryUnit = Literal["Packets", "Boxes", "Liters", "Pcs", "Rolls"]

EXPENSE_CATEGORIES: tuple[str, ...] = get_args(ExpenseCategory)
PAYMENT_METHODS: tuple[str, ...] = get_args(PaymentMethod)
INVENTORY_CATEGORIES: tuple[str, ...] = get_args(InventoryCategory)
INVENTORY_UNITS: tuple[str, ...] = get_args(InventoryUnit)


# =========================================================
# RECORDS
# =========================================================

class ServiceType(BaseModel):
    """A billable shop service with its default per-unit rate."""
    model_config = ConfigDict(extra="forbid")
    id: str
    name: str
    default_rate: float = Field(..., ge=0)


class Sale(BaseModel):
    """Schema for a recorded sale.

    Attributes:
        id: Store-assigned identifier (None until saved).
        service_type: The service sold.
        quantity: Units sold (copies, pages, pouches...).
        rate: Per-unit rate charged.
        notes: Optional free-text note.
        date_created: When the sale was made.
        total: Computed as `quantity * rate`; never stored independently.
    """
    model_config = ConfigDict(extra="forbid", validate_assignment=True)
    id: str | None = None
    service_type: ServiceType
    quantity: int = Field(..., gt=0)
    rate: float = Field(..., ge=0)
    notes: str | None = None
    date_created: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="before")
    @classmethod
    def _ignore_stored_total(cls, data: object) -> object:
        # Serialized sales carry `total`; it is always recomputed.
        if isinstance(data, dict) and "total" in data:
            data = {k: v for k, v in data.items() if k != "total"}
        return data

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> float:
        return self.quantity * self.rate


class Expense(BaseModel):
    """Schema for a shop expense."""
    model_config = ConfigDict(extra="forbid")
    id: str | None = None
    expense_date: date
    category: ExpenseCategory
    amount: float = Field(..., gt=0)
    payment_method: PaymentMethod
    notes: str | None = None
    attachment_url: str | None = None
    created_at: datetime | None = None


class InventoryItem(BaseModel):
    """Schema for a stock entry."""
    model_config = ConfigDict(extra="forbid")
    id: str | None = None
    item_name: str
    category: InventoryCategory
    quantity: int = Field(..., ge=0)
    unit: InventoryUnit
    reorder_level: int | None = Field(default=None, ge=0)
    notes: str | None = None
    last_updated: datetime | None = None


Record = Union[Sale, Expense, InventoryItem]


# =========================================================
# FILTERS
# =========================================================

class FilterSpec(BaseModel):
    """User-editable filter state.

    Every field is optional; an empty value leaves the collection unfiltered
    on that axis. Dates may be given as strings and are parsed by the filter
    engine, which skips a bound it cannot parse.
    """
    model_config = ConfigDict(extra="forbid")
    search: str | None = None
    category: str | None = Field(
        default=None,
        validation_alias=AliasChoices("category", "service_type", "serviceType"),
    )
    unit: str | None = None
    date_from: datetime | date | str | None = Field(
        default=None,
        validation_alias=AliasChoices("date_from", "dateFrom"),
    )
    date_to: datetime | date | str | None = Field(
        default=None,
        validation_alias=AliasChoices("date_to", "dateTo"),
    )


# =========================================================
# REPORT OUTPUTS
# =========================================================

class KPISummary(BaseModel):
    """Scalar rollup over a record collection."""
    model_config = ConfigDict(extra="forbid")
    count: int = Field(..., ge=0)
    total: float
    average: float
    maximum: float


class CategorySummary(BaseModel):
    """Per-group rollup with its share of the grand total.

    `quantity` and `average_rate` are only filled for record types that carry
    a quantity (sales).
    """
    model_config = ConfigDict(extra="forbid")
    key: str
    count: int = Field(..., ge=0)
    total: float
    average: float
    percentage: float
    quantity: float | None = None
    average_rate: float | None = None


class TrendPoint(BaseModel):
    """One calendar day of a trend series."""
    model_config = ConfigDict(extra="forbid")
    day: date
    label: str
    value: float
    count: int = Field(..., ge=0)


class TrendSeries(BaseModel):
    """Zero-filled, chronologically ordered day-by-day series."""
    model_config = ConfigDict(extra="forbid")
    points: list[TrendPoint] = Field(default_factory=list)

    @property
    def labels(self) -> list[str]:
        return [p.label for p in self.points]

    @property
    def values(self) -> list[float]:
        return [p.value for p in self.points]

    @property
    def counts(self) -> list[int]:
        return [p.count for p in self.points]

    def __len__(self) -> int:
        return len(self.points)


class Report(BaseModel):
    """Everything a summary view renders for one filter state."""
    model_config = ConfigDict(extra="forbid")
    rows: list[Record]
    kpis: KPISummary
    breakdown: list[CategorySummary]
    trend: TrendSeries | None = None


class OverviewKPIs(BaseModel):
    """Shop-wide totals shown on the reports page."""
    model_config = ConfigDict(extra="forbid")
    total_revenue: float
    total_expenses: float
    net_profit: float
    total_transactions: int = Field(..., ge=0)


class RevenueExpensePoint(BaseModel):
    """One day of revenue against expense."""
    model_config = ConfigDict(extra="forbid")
    day: date
    label: str
    revenue: float
    expense: float
    net: float


class DashboardKPIs(BaseModel):
    """Today's and this month's figures shown on the dashboard home."""
    model_config = ConfigDict(extra="forbid")
    today_income: float
    today_expenses: float
    today_profit: float
    month_income: float


class MonthlyRevenuePoint(BaseModel):
    """Sales total for one calendar month."""
    model_config = ConfigDict(extra="forbid")
    month: date
    label: str
    total: float
    count: int = Field(..., ge=0)


class RecentActivity(BaseModel):
    """One entry of the dashboard activity feed.

    Sales and expenses are "completed"; low-stock alerts are "warning" and
    carry no amount.
    """
    model_config = ConfigDict(extra="forbid")
    id: str | None = None
    kind: Literal["sale", "expense", "alert"]
    description: str
    amount: float | None = None
    when: datetime | None = None
    status: Literal["completed", "warning"] = "completed"
