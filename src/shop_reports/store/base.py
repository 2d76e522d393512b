"""Record store interface shared by every backend.

A store owns one collection of records of a single model type (sales,
expenses or inventory). New records get a generated id and are placed at
the front of the collection; updates replace a record by id.
"""

from __future__ import annotations

import logging
import time
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

log = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)

ID_LENGTH = 9


def new_record_id() -> str:
    """Return a short random identifier for a new record."""
    return uuid.uuid4().hex[:ID_LENGTH]


class RecordStore(ABC, Generic[R]):
    """Abstract add/list/get/update store with optional simulated latency.

    Args:
        model: Pydantic model class of the stored records.
        latency_ms: Blocking delay applied before every operation.
    """

    def __init__(self, model: type[R], latency_ms: int = 0) -> None:
        self.model = model
        self.latency_ms = latency_ms

    @property
    def kind(self) -> str:
        return self.model.__name__

    def _pause(self) -> None:
        if self.latency_ms > 0:
            time.sleep(self.latency_ms / 1000)

    def _validate(self, record: R | dict[str, Any]) -> R:
        return self.model.model_validate(record)

    def _as_new(self, record: R) -> R:
        """Copy `record` with a fresh id and creation/update stamps."""
        fields = self.model.model_fields
        now = datetime.now()
        changes: dict[str, Any] = {"id": new_record_id()}
        if "created_at" in fields:
            changes["created_at"] = now
        if "last_updated" in fields:
            changes["last_updated"] = now
        return record.model_copy(update=changes)

    def _as_updated(self, record: R) -> R:
        if "last_updated" in self.model.model_fields:
            return record.model_copy(update={"last_updated": datetime.now()})
        return record.model_copy()

    @abstractmethod
    def list(self) -> list[R]:
        """Return every record, newest first."""

    @abstractmethod
    def get(self, record_id: str) -> R | None:
        """Return the record with `record_id`, or None."""

    @abstractmethod
    def add(self, record: R | dict[str, Any]) -> R:
        """Validate, assign an id and prepend a new record; return it."""

    @abstractmethod
    def update(self, record: R | dict[str, Any]) -> R:
        """Replace the record with the same id in place.

        A record whose id is unknown (or missing) is appended as a new record
        with a generated id.
        """

    def delete(self, record_id: str) -> None:
        """Log a delete request. Records are never removed."""
        self._pause()
        log.warning(
            "Delete requested for %s %s; deletion is not supported, record kept",
            self.kind,
            record_id,
        )
