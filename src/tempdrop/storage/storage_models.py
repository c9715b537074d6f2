"""Storage data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

PLACEHOLDER_MEDIA_TYPE = "application/octet-stream"
PLACEHOLDER_SIZE_BYTES = 0


@dataclass(frozen=True, slots=True)
class StoredObject:
    """Registry entry describing one stored payload."""

    id: str
    display_name: str
    media_type: str
    size_bytes: int
    expires_at: datetime
    storage_path: Path

    def is_live(self, now: datetime) -> bool:
        return self.expires_at > now


@dataclass(frozen=True, slots=True)
class DecodedName:
    """State recovered from a storage file name."""

    id: str
    expires_at: datetime
    extension: str


@dataclass(frozen=True, slots=True)
class DeletionFailure:
    """Non-fatal payload deletion failure observed during cleanup."""

    object_id: str
    path: Path
    error: Exception


@dataclass(slots=True)
class SweepReport:
    removed: list[StoredObject] = field(default_factory=list)
    failures: list[DeletionFailure] = field(default_factory=list)


@dataclass(slots=True)
class RecoveryReport:
    restored: int = 0
    discarded: int = 0
    ignored: int = 0
    failures: list[DeletionFailure] = field(default_factory=list)
