from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from tempdrop.storage.filename_codec import FilenameCodec
from tempdrop.storage.object_registry import ObjectRegistry
from tempdrop.storage.object_store import ObjectStore
from tests.helpers.storage import FakeClock, FlakyPayloadStore


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def storage_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture()
def payloads(storage_dir: Path) -> FlakyPayloadStore:
    return FlakyPayloadStore(storage_dir)


@pytest.fixture()
def deletion_failures() -> list:
    return []


@pytest.fixture()
def registry(payloads: FlakyPayloadStore, clock: FakeClock, deletion_failures: list) -> ObjectRegistry:
    return ObjectRegistry(payloads, clock=clock, on_deletion_failure=deletion_failures.append)


@pytest.fixture()
def store(registry: ObjectRegistry, payloads: FlakyPayloadStore, clock: FakeClock) -> ObjectStore:
    return ObjectStore(
        registry=registry,
        payloads=payloads,
        ttl=timedelta(hours=1),
        naming=FilenameCodec(),
        clock=clock,
    )
