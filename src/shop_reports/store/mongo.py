"""MongoDB-backed record store.

Module notes:
- One collection per record type; records are matched on their `id` field.
- A private `_seq` counter keeps "newest first" listing order, matching the
  in-memory store (new records go to the front, updates of unknown ids to
  the back).
- Dates are normalized to datetimes for BSON compatibility.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Iterable

from pymongo.collection import Collection

from shop_reports.db import bulk_upsert
from shop_reports.store.base import R, RecordStore, new_record_id

log = logging.getLogger(__name__)

SEQ_FIELD = "_seq"


def _normalize_doc(doc: dict[str, Any]) -> dict[str, Any]:
    """Convert non-BSON-safe types to Mongo-safe types."""
    for k, v in list(doc.items()):
        if isinstance(v, date) and not isinstance(v, datetime):
            doc[k] = datetime.combine(v, datetime.min.time())
        elif isinstance(v, dict):
            doc[k] = _normalize_doc(v)
    return doc


class MongoRecordStore(RecordStore[R]):
    """Store backed by a single PyMongo collection.

    Args:
        model: Pydantic model class of the stored records.
        collection: Target collection.
        latency_ms: Blocking delay applied before every operation.
    """

    def __init__(
        self,
        model: type[R],
        collection: Collection[dict[str, Any]],
        latency_ms: int = 0,
    ) -> None:
        super().__init__(model, latency_ms)
        self.collection = collection

    def _to_doc(self, record: R, seq: int) -> dict[str, Any]:
        doc = _normalize_doc(record.model_dump(mode="python"))
        doc[SEQ_FIELD] = seq
        return doc

    def _from_doc(self, doc: dict[str, Any]) -> R:
        doc = {k: v for k, v in doc.items() if k not in ("_id", SEQ_FIELD)}
        return self.model.model_validate(doc)

    def _edge_seq(self, newest: bool) -> int:
        direction = -1 if newest else 1
        edge = self.collection.find_one(sort=[(SEQ_FIELD, direction)], projection={SEQ_FIELD: 1})
        if edge is None:
            return 0
        return int(edge[SEQ_FIELD]) + (1 if newest else -1)

    def list(self) -> list[R]:
        self._pause()
        cursor = self.collection.find({}, {"_id": False}).sort(SEQ_FIELD, -1)
        return [self._from_doc(d) for d in cursor]

    def get(self, record_id: str) -> R | None:
        self._pause()
        doc = self.collection.find_one({"id": record_id}, {"_id": False})
        return self._from_doc(doc) if doc is not None else None

    def add(self, record: R | dict[str, Any]) -> R:
        self._pause()
        new = self._as_new(self._validate(record))
        self.collection.insert_one(self._to_doc(new, self._edge_seq(newest=True)))
        log.info("Added %s %s", self.kind, new.id)
        return new

    def update(self, record: R | dict[str, Any]) -> R:
        self._pause()
        record = self._validate(record)
        existing = None
        if record.id is not None:
            existing = self.collection.find_one({"id": record.id}, {SEQ_FIELD: 1})

        if existing is not None:
            updated = self._as_updated(record)
            self.collection.replace_one(
                {"id": updated.id},
                self._to_doc(updated, int(existing[SEQ_FIELD])),
            )
            log.info("Updated %s %s", self.kind, updated.id)
            return updated

        new = self._as_new(record)
        self.collection.insert_one(self._to_doc(new, self._edge_seq(newest=False)))
        log.info("%s %s not found; stored as new record %s", self.kind, record.id, new.id)
        return new

    def seed(self, records: Iterable[R | dict[str, Any]]) -> int:
        """Upsert `records` by id so that `list` returns them in the given order.

        Records without an id get one. Returns the number of documents attempted.
        """
        models = [self._validate(r) for r in records]
        models = [m if m.id is not None else m.model_copy(update={"id": new_record_id()}) for m in models]
        total = len(models)
        docs = [self._to_doc(m, total - i) for i, m in enumerate(models)]
        attempted = bulk_upsert(self.collection, docs, key_field="id")
        log.info("Seeded %d %s record(s)", attempted, self.kind)
        return attempted
