from __future__ import annotations

import copy
from datetime import date
from typing import Any
from unittest.mock import MagicMock

from pymongo.errors import PyMongoError

from shop_reports.db import bulk_upsert
from shop_reports.models import Expense, InventoryItem, Sale
from shop_reports.store.mongo import MongoRecordStore


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self.docs = docs

    def sort(self, key: str, direction: int) -> "FakeCursor":
        return FakeCursor(sorted(self.docs, key=lambda d: d[key], reverse=direction < 0))

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    """Just enough of a PyMongo collection for MongoRecordStore."""

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []

    def _match(self, query: dict[str, Any] | None) -> list[dict[str, Any]]:
        query = query or {}
        return [d for d in self.docs if all(d.get(k) == v for k, v in query.items())]

    def find(self, query=None, projection=None) -> FakeCursor:
        return FakeCursor([copy.deepcopy(d) for d in self._match(query)])

    def find_one(self, query=None, projection=None, sort=None):
        docs = self._match(query)
        if sort:
            key, direction = sort[0]
            docs = sorted(docs, key=lambda d: d[key], reverse=direction < 0)
        return copy.deepcopy(docs[0]) if docs else None

    def insert_one(self, doc: dict[str, Any]) -> None:
        self.docs.append(copy.deepcopy(doc))

    def replace_one(self, query: dict[str, Any], doc: dict[str, Any]) -> None:
        for i, d in enumerate(self.docs):
            if all(d.get(k) == v for k, v in query.items()):
                self.docs[i] = copy.deepcopy(doc)
                return


def test_add_then_list_newest_first(sales) -> None:
    store = MongoRecordStore(Sale, FakeCollection())
    first = store.add(sales[0])
    second = store.add(sales[1])

    assert [s.id for s in store.list()] == [second.id, first.id]
    assert store.get(first.id).total == 20


def test_expense_dates_round_trip_through_bson_safe_docs(expenses) -> None:
    coll = FakeCollection()
    store = MongoRecordStore(Expense, coll)
    saved = store.add(expenses[0])

    assert type(coll.docs[0]["expense_date"]).__name__ == "datetime"
    assert store.get(saved.id).expense_date == date(2025, 12, 10)


def test_update_keeps_position_and_unknown_id_appends(inventory) -> None:
    store = MongoRecordStore(InventoryItem, FakeCollection())
    a = store.add(inventory[0])
    b = store.add(inventory[1])

    store.update(a.model_copy(update={"quantity": 3}))
    assert [i.id for i in store.list()] == [b.id, a.id]
    assert store.get(a.id).quantity == 3

    extra = store.update(inventory[2].model_copy(update={"id": None}))
    assert [i.id for i in store.list()] == [b.id, a.id, extra.id]


def test_delete_keeps_document(expenses) -> None:
    coll = FakeCollection()
    store = MongoRecordStore(Expense, coll)
    saved = store.add(expenses[0])
    store.delete(saved.id)
    assert len(coll.docs) == 1


def test_seed_upserts_in_listing_order(expenses) -> None:
    coll = MagicMock()
    store = MongoRecordStore(Expense, coll)
    assert store.seed(expenses) == 5

    (ops,), kwargs = coll.bulk_write.call_args
    assert kwargs == {"ordered": False}
    assert len(ops) == 5


def test_bulk_upsert_batches_and_skips_docs_without_key() -> None:
    coll = MagicMock()
    docs = [{"id": str(i)} for i in range(5)] + [{"name": "no key"}]
    assert bulk_upsert(coll, docs, key_field="id", batch_size=2) == 5
    assert [len(c.args[0]) for c in coll.bulk_write.call_args_list] == [2, 2, 1]


def test_bulk_upsert_logs_failed_batches(caplog) -> None:
    coll = MagicMock()
    coll.bulk_write.side_effect = PyMongoError("boom")
    assert bulk_upsert(coll, [{"id": "1"}], key_field="id") == 1
    assert "bulk_upsert final batch failed" in caplog.text
