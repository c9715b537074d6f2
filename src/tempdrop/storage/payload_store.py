"""Payload storage on the local volume."""

from __future__ import annotations

import contextlib
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from ..exceptions import ObjectNotFoundError, StorageIOError

TEMP_SUFFIX = ".part"


@dataclass(slots=True)
class PayloadStore:
    """Write, read and delete payload bytes under a single directory."""

    root: Path
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def path_for(self, name: str) -> Path:
        return self.root / name

    def ensure_structure(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def write(self, path: Path, data: bytes) -> None:
        """Persist ``data`` at ``path``; nothing is left behind on failure."""
        staging = path.with_name(path.name + TEMP_SUFFIX)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with staging.open("wb") as sink:
                sink.write(data)
                sink.flush()
                os.fsync(sink.fileno())
            os.replace(staging, path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                staging.unlink(missing_ok=True)
            self.log.error(
                "storage.write_failed",
                extra={"path": str(path), "error": str(exc)},
            )
            raise StorageIOError("payload could not be written") from exc

    def read(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise ObjectNotFoundError(path.name) from exc
        except OSError as exc:
            self.log.error(
                "storage.read_failed",
                extra={"path": str(path), "error": str(exc)},
            )
            raise StorageIOError("payload could not be read") from exc

    def delete(self, path: Path) -> None:
        """Remove ``path``; a file that is already gone counts as removed."""
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageIOError(f"payload '{path.name}' could not be deleted") from exc


__all__ = ["PayloadStore", "TEMP_SUFFIX"]
