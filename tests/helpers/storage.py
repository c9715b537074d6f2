from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

from tempdrop.exceptions import StorageIOError
from tempdrop.storage.payload_store import PayloadStore

START = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


class FlakyPayloadStore(PayloadStore):
    """Payload store whose deletes fail for selected paths."""

    def __init__(self, root: Path) -> None:
        super().__init__(root=root)
        self.failing: set[Path] = set()
        self.deleted: list[Path] = []

    def delete(self, path: Path) -> None:
        if path in self.failing:
            raise StorageIOError(f"cannot delete {path.name}")
        self.deleted.append(path)
        super().delete(path)
