"""In-memory index of live objects.

The registry decides liveness for every caller. Map access happens under a
single lock; payload deletion happens after the lock is released, so there
is never a lock held across filesystem calls.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable

from ..exceptions import StorageIOError
from .payload_store import PayloadStore
from .storage_models import DeletionFailure, StoredObject, SweepReport

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
FailureListener = Callable[[DeletionFailure], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ObjectRegistry:
    """Authoritative ``id -> StoredObject`` mapping."""

    def __init__(
        self,
        payloads: PayloadStore,
        *,
        clock: Clock = utc_now,
        on_deletion_failure: FailureListener | None = None,
    ) -> None:
        self._payloads = payloads
        self._clock = clock
        self._on_deletion_failure = on_deletion_failure
        self._objects: dict[str, StoredObject] = {}
        self._lock = threading.Lock()

    def put(self, record: StoredObject) -> None:
        with self._lock:
            self._objects[record.id] = record

    def get(self, object_id: str, now: datetime | None = None) -> StoredObject | None:
        """Return the live record or ``None``; expired entries are evicted here."""
        current = now or self._clock()
        with self._lock:
            record = self._objects.get(object_id)
            if record is None:
                return None
            if record.is_live(current):
                return record
            del self._objects[object_id]
        logger.info(
            "storage.lazy_evicted",
            extra={"object_id": object_id, "expires_at": record.expires_at.isoformat()},
        )
        self._discard_payload(record)
        return None

    def remove(self, object_id: str) -> bool:
        with self._lock:
            record = self._objects.pop(object_id, None)
        if record is None:
            return False
        self._discard_payload(record)
        return True

    def sweep_expired(self, now: datetime | None = None) -> SweepReport:
        """Drop every entry with ``expires_at <= now`` and delete its payload."""
        current = now or self._clock()
        with self._lock:
            expired = [
                record for record in self._objects.values() if not record.is_live(current)
            ]
            for record in expired:
                del self._objects[record.id]

        report = SweepReport(removed=expired)
        for record in expired:
            failure = self._discard_payload(record)
            if failure is not None:
                report.failures.append(failure)
            else:
                logger.info("storage.sweep.removed", extra={"object_id": record.id})
        return report

    def snapshot(self) -> list[StoredObject]:
        with self._lock:
            return list(self._objects.values())

    def __contains__(self, object_id: object) -> bool:
        with self._lock:
            return object_id in self._objects

    def __len__(self) -> int:
        with self._lock:
            return len(self._objects)

    def _discard_payload(self, record: StoredObject) -> DeletionFailure | None:
        try:
            self._payloads.delete(record.storage_path)
        except StorageIOError as exc:
            failure = DeletionFailure(object_id=record.id, path=record.storage_path, error=exc)
            logger.warning(
                "storage.delete_failed",
                extra={"object_id": record.id, "path": str(record.storage_path), "error": str(exc)},
            )
            if self._on_deletion_failure is not None:
                self._on_deletion_failure(failure)
            return failure
        return None


__all__ = ["Clock", "FailureListener", "ObjectRegistry", "utc_now"]
