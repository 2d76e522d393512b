from __future__ import annotations

from datetime import date, datetime

import pytest

from shop_reports.models import Expense, InventoryItem, Sale
from shop_reports.store.demo_data import demo_expenses, demo_inventory, demo_sales, service_type


def make_expense(category: str, amount: float, day: date = date(2025, 12, 1), notes: str | None = None) -> Expense:
    return Expense(
        expense_date=day,
        category=category,
        amount=amount,
        payment_method="Cash",
        notes=notes,
    )


def make_sale(service_id: str, quantity: int, rate: float, when: datetime, notes: str | None = None) -> Sale:
    return Sale(
        service_type=service_type(service_id),
        quantity=quantity,
        rate=rate,
        notes=notes,
        date_created=when,
    )


@pytest.fixture
def sales() -> list[Sale]:
    return demo_sales()


@pytest.fixture
def expenses() -> list[Expense]:
    return demo_expenses()


@pytest.fixture
def inventory() -> list[InventoryItem]:
    return demo_inventory(now=datetime(2025, 12, 10, 9, 0))
