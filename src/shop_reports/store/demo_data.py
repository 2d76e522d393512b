"""Demo records for a fresh install.

The service catalogue plus a handful of sales, expenses and stock entries,
used to seed the in-memory store and (via `shop-reports seed`) MongoDB.
"""

from __future__ import annotations

from datetime import date, datetime

from shop_reports.models import Expense, InventoryItem, Sale, ServiceType

SERVICE_TYPES: list[ServiceType] = [
    ServiceType(id="1", name="Xerox (B/W)", default_rate=2),
    ServiceType(id="2", name="Xerox (Color)", default_rate=10),
    ServiceType(id="3", name="Printout (B/W)", default_rate=5),
    ServiceType(id="4", name="Printout (Color)", default_rate=15),
    ServiceType(id="5", name="Typing", default_rate=30),
    ServiceType(id="6", name="Lamination", default_rate=40),
    ServiceType(id="7", name="Photo Print", default_rate=25),
    ServiceType(id="8", name="Scanning", default_rate=10),
    ServiceType(id="9", name="Internet Browsing", default_rate=20),
    ServiceType(id="10", name="Other", default_rate=0),
]

_SERVICES = {s.id: s for s in SERVICE_TYPES}


def service_type(service_id: str) -> ServiceType:
    """Return the catalogue entry for `service_id`.

    Raises:
        KeyError: for an id not in the catalogue.
    """
    return _SERVICES[service_id]


def demo_sales() -> list[Sale]:
    return [
        Sale(id="1", service_type=_SERVICES["1"], quantity=10, rate=2,
             notes="Project report", date_created=datetime(2025, 12, 10, 10, 30)),
        Sale(id="2", service_type=_SERVICES["3"], quantity=5, rate=5,
             notes="Resume printing", date_created=datetime(2025, 12, 9, 14, 15)),
        Sale(id="3", service_type=_SERVICES["6"], quantity=2, rate=40,
             notes="ID Cards", date_created=datetime(2025, 12, 8, 9, 45)),
        Sale(id="4", service_type=_SERVICES["9"], quantity=1, rate=20,
             notes="Form filling", date_created=datetime(2025, 12, 10, 11, 0)),
        Sale(id="5", service_type=_SERVICES["2"], quantity=3, rate=10,
             notes="Certificates", date_created=datetime(2025, 12, 7, 16, 20)),
    ]


def demo_expenses() -> list[Expense]:
    return [
        Expense(id="1", expense_date=date(2025, 12, 10), category="Rent", amount=15000,
                payment_method="Bank Transfer", notes="Office Rent for December"),
        Expense(id="2", expense_date=date(2025, 12, 8), category="Electricity", amount=2500,
                payment_method="UPI", notes="Electricity Bill Nov 2025"),
        Expense(id="3", expense_date=date(2025, 12, 5), category="Internet", amount=1200,
                payment_method="Card", notes="Broadband Subscription"),
        Expense(id="4", expense_date=date(2025, 12, 2), category="Printing Materials", amount=5000,
                payment_method="Cash", notes="A4 Paper Bundles (10)"),
        Expense(id="5", expense_date=date(2025, 12, 1), category="Maintenance", amount=800,
                payment_method="Cash", notes="Printer Repair"),
    ]


def demo_inventory(now: datetime | None = None) -> list[InventoryItem]:
    now = now or datetime.now()
    rows = [
        ("1", "A4 Paper (75gsm)", "Paper", 50, "Packets", 10),
        ("2", "Black Toner Cartridge", "Toner", 5, "Pcs", 2),
        ("3", "Color Ink Set", "Ink", 12, "Boxes", 5),
        ("4", "Glossy Photo Paper", "Photo Paper", 25, "Packets", 5),
        ("5", "Stapler Pins", "Stationery", 100, "Boxes", 20),
        ("6", "Lamination Pouches", "Other", 8, "Packets", 3),
    ]
    return [
        InventoryItem(id=i, item_name=name, category=cat, quantity=qty, unit=unit,
                      reorder_level=reorder, last_updated=now)
        for i, name, cat, qty, unit, reorder in rows
    ]
