"""Rebuild the object registry from the storage directory at startup."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

from ..exceptions import StartupError, StorageIOError
from .filename_codec import NamingScheme
from .object_registry import ObjectRegistry
from .payload_store import PayloadStore
from .storage_models import (
    PLACEHOLDER_MEDIA_TYPE,
    PLACEHOLDER_SIZE_BYTES,
    DeletionFailure,
    RecoveryReport,
    StoredObject,
)

logger = logging.getLogger(__name__)


def _list_files(root: Path) -> list[str]:
    with os.scandir(root) as entries:
        return [entry.name for entry in entries if entry.is_file(follow_symlinks=False)]


def recover_registry(
    *,
    registry: ObjectRegistry,
    payloads: PayloadStore,
    naming: NamingScheme,
    now: datetime,
) -> RecoveryReport:
    """Register every live payload found on disk and delete expired ones.

    Files whose names the naming scheme does not recognise are left alone.
    Display name, media type and size are not persisted, so restored records
    carry placeholders for them.
    """
    root = payloads.root
    try:
        payloads.ensure_structure()
        names = _list_files(root)
    except OSError as exc:
        logger.error("storage.recovery.list_failed", extra={"root": str(root), "error": str(exc)})
        raise StartupError(f"cannot list storage directory '{root}'") from exc

    report = RecoveryReport()
    for name in sorted(names):
        decoded = naming.decode(name)
        if decoded is None:
            report.ignored += 1
            continue
        path = payloads.path_for(name)
        if decoded.expires_at <= now:
            try:
                payloads.delete(path)
            except StorageIOError as exc:
                logger.warning(
                    "storage.delete_failed",
                    extra={"object_id": decoded.id, "path": str(path), "error": str(exc)},
                )
                report.failures.append(DeletionFailure(object_id=decoded.id, path=path, error=exc))
            report.discarded += 1
            continue
        registry.put(
            StoredObject(
                id=decoded.id,
                display_name=name,
                media_type=PLACEHOLDER_MEDIA_TYPE,
                size_bytes=PLACEHOLDER_SIZE_BYTES,
                expires_at=decoded.expires_at,
                storage_path=path,
            )
        )
        report.restored += 1

    logger.info(
        "storage.recovery.completed",
        extra={
            "root": str(root),
            "restored": report.restored,
            "discarded": report.discarded,
            "ignored": report.ignored,
        },
    )
    return report


def count_expired(*, payloads: PayloadStore, naming: NamingScheme, now: datetime) -> int:
    """Number of managed payloads on disk that are already expired."""
    try:
        names = _list_files(payloads.root)
    except FileNotFoundError:
        return 0
    except OSError as exc:
        raise StartupError(f"cannot list storage directory '{payloads.root}'") from exc
    expired = 0
    for name in names:
        decoded = naming.decode(name)
        if decoded is not None and decoded.expires_at <= now:
            expired += 1
    return expired


__all__ = ["count_expired", "recover_registry"]
