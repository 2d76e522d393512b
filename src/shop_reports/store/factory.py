"""Build the configured record stores.

`open_stores` returns one store per record type for the backend selected by
`Settings.store_backend`. The in-memory backend starts from the demo data.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from shop_reports.config import Settings, get_settings
from shop_reports.db import get_client, get_db
from shop_reports.models import Expense, InventoryItem, Sale
from shop_reports.store.base import RecordStore
from shop_reports.store.demo_data import demo_expenses, demo_inventory, demo_sales
from shop_reports.store.memory import InMemoryRecordStore
from shop_reports.store.mongo import MongoRecordStore

log = logging.getLogger(__name__)

RECORD_MODELS: dict[str, type] = {
    "sales": Sale,
    "expenses": Expense,
    "inventory": InventoryItem,
}

DEMO_RECORDS: dict[str, Callable[[], list[Any]]] = {
    "sales": demo_sales,
    "expenses": demo_expenses,
    "inventory": demo_inventory,
}


def open_stores(settings: Settings | None = None) -> dict[str, RecordStore[Any]]:
    """Return `{"sales": ..., "expenses": ..., "inventory": ...}` stores.

    Args:
        settings: Configuration; read from the environment when omitted.
    """
    s = settings or get_settings()

    if s.store_backend == "mongo":
        client = get_client(s.mongo_uri, tls=s.mongo_tls)
        db = get_db(client, s.mongo_db)
        log.info("Using MongoDB store %s", s.mongo_db)
        return {
            kind: MongoRecordStore(model, db[kind], latency_ms=s.store_latency_ms)
            for kind, model in RECORD_MODELS.items()
        }

    log.info("Using in-memory store with demo data")
    return {
        kind: InMemoryRecordStore(model, DEMO_RECORDS[kind](), latency_ms=s.store_latency_ms)
        for kind, model in RECORD_MODELS.items()
    }
