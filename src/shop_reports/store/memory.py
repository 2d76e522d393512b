"""In-memory record store.

The default backend: a plain list per record type, seeded with the shop's
demo data by the store factory. Used by the tests and the dashboard when no
MongoDB is configured.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from shop_reports.store.base import R, RecordStore

log = logging.getLogger(__name__)


class InMemoryRecordStore(RecordStore[R]):
    """List-backed store.

    Args:
        model: Pydantic model class of the stored records.
        records: Initial records, kept in the given order.
        latency_ms: Blocking delay applied before every operation.
    """

    def __init__(
        self,
        model: type[R],
        records: Iterable[R | dict[str, Any]] = (),
        latency_ms: int = 0,
    ) -> None:
        super().__init__(model, latency_ms)
        self._records: list[R] = [self._validate(r) for r in records]

    def list(self) -> list[R]:
        self._pause()
        return list(self._records)

    def get(self, record_id: str) -> R | None:
        self._pause()
        return next((r for r in self._records if r.id == record_id), None)

    def add(self, record: R | dict[str, Any]) -> R:
        self._pause()
        new = self._as_new(self._validate(record))
        self._records.insert(0, new)
        log.info("Added %s %s", self.kind, new.id)
        return new

    def update(self, record: R | dict[str, Any]) -> R:
        self._pause()
        record = self._validate(record)
        for i, existing in enumerate(self._records):
            if record.id is not None and existing.id == record.id:
                updated = self._as_updated(record)
                self._records[i] = updated
                log.info("Updated %s %s", self.kind, updated.id)
                return updated

        new = self._as_new(record)
        self._records.append(new)
        log.info("%s %s not found; stored as new record %s", self.kind, record.id, new.id)
        return new
