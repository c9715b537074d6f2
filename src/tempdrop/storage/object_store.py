"""Ephemeral object store: the operations the request layer calls."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ..config import AppConfig
from ..exceptions import ObjectNotFoundError
from .filename_codec import FilenameCodec, NamingScheme, derive_extension, truncate_to_second
from .object_registry import Clock, FailureListener, ObjectRegistry, utc_now
from .payload_store import PayloadStore
from .recovery import recover_registry
from .storage_models import RecoveryReport, StoredObject, SweepReport

ID_BYTES = 8


def new_object_id() -> str:
    """Independent 64-bit random identifier, 16 lowercase hex characters."""
    return secrets.token_hex(ID_BYTES)


@dataclass(slots=True)
class ObjectStore:
    """Coordinates the registry, payload store and naming scheme."""

    registry: ObjectRegistry
    payloads: PayloadStore
    ttl: timedelta
    naming: NamingScheme = field(default_factory=FilenameCodec)
    clock: Clock = utc_now
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        *,
        clock: Clock = utc_now,
        on_deletion_failure: FailureListener | None = None,
    ) -> "ObjectStore":
        payloads = PayloadStore(root=config.storage_dir)
        registry = ObjectRegistry(payloads, clock=clock, on_deletion_failure=on_deletion_failure)
        return cls(
            registry=registry,
            payloads=payloads,
            ttl=timedelta(seconds=config.ttl_seconds),
            clock=clock,
        )

    def load_existing(self) -> RecoveryReport:
        """Populate the registry from disk; call once before serving requests."""
        return recover_registry(
            registry=self.registry,
            payloads=self.payloads,
            naming=self.naming,
            now=self.clock(),
        )

    def store(self, payload: bytes, display_name: str, media_type: str) -> StoredObject:
        """Write ``payload`` and register it; raises ``StorageIOError`` on write failure."""
        object_id = new_object_id()
        expires_at = truncate_to_second(self.clock() + self.ttl)
        name = self.naming.encode(object_id, expires_at, derive_extension(display_name))
        path = self.payloads.path_for(name)

        self.payloads.write(path, payload)
        record = StoredObject(
            id=object_id,
            display_name=display_name,
            media_type=media_type,
            size_bytes=len(payload),
            expires_at=expires_at,
            storage_path=path,
        )
        self.registry.put(record)
        self.log.info(
            "storage.stored",
            extra={
                "object_id": object_id,
                "display_name": display_name,
                "media_type": media_type,
                "size_bytes": len(payload),
                "expires_at": expires_at.isoformat(),
            },
        )
        return record

    def get(self, object_id: str) -> StoredObject | None:
        return self.registry.get(object_id)

    def read(self, object_id: str) -> tuple[StoredObject, bytes]:
        """Return the live record with its bytes or raise ``ObjectNotFoundError``."""
        record = self.registry.get(object_id)
        if record is None:
            raise ObjectNotFoundError(object_id)
        return record, self.payloads.read(record.storage_path)

    def delete(self, object_id: str) -> bool:
        removed = self.registry.remove(object_id)
        if removed:
            self.log.info("storage.deleted", extra={"object_id": object_id})
        return removed

    def sweep_expired(self, now: datetime | None = None) -> SweepReport:
        return self.registry.sweep_expired(now or self.clock())


__all__ = ["ObjectStore", "new_object_id"]
