from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tempdrop.exceptions import ExtractionError, UnsupportedSourceError
from tempdrop.extraction.audio_extractor import MediaInfo
from tempdrop.storage.object_store import ObjectStore

SOURCE = "https://video.example.com/watch?v=abc"


class _StubExtractor:
    def __init__(self, payload: bytes = b"mp3-bytes", error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.produced: list[Path] = []
        self.urls: list[str] = []

    def extract_audio(self, url: str, target_dir: Path) -> Path:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / "0011223344556677.mp3"
        path.write_bytes(self.payload)
        self.produced.append(path)
        return path

    def fetch_info(self, url: str) -> MediaInfo:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return MediaInfo(title="Talk", duration_seconds=3725)


@pytest.mark.unit
def test_download_stores_extracted_audio(app: FastAPI, client: TestClient, store: ObjectStore) -> None:
    extractor = _StubExtractor()
    app.state.audio_extractor = extractor

    response = client.post("/api/download", json={"url": SOURCE})

    assert response.status_code == 200
    body = response.json()
    object_id = body["url"].rsplit("/", 1)[-1]
    assert body["url"] == f"http://testserver/api/files/{object_id}"
    assert body["filename"] == "0011223344556677.mp3"
    assert body["size"] == len(b"mp3-bytes")
    record = store.get(object_id)
    assert record is not None
    assert record.media_type == "audio/mpeg"
    assert extractor.urls == [SOURCE]
    assert not extractor.produced[0].exists()
    assert client.get(body["url"]).content == b"mp3-bytes"


@pytest.mark.unit
def test_download_extraction_failure(app: FastAPI, client: TestClient) -> None:
    app.state.audio_extractor = _StubExtractor(error=ExtractionError("download failed"))

    response = client.post("/api/download", json={"url": SOURCE})

    assert response.status_code == 400


@pytest.mark.unit
def test_download_rejects_oversized_audio(app: FastAPI, client: TestClient, storage_dir: Path) -> None:
    extractor = _StubExtractor(payload=b"x" * 65)
    app.state.audio_extractor = extractor

    response = client.post("/api/download", json={"url": SOURCE})

    assert response.status_code == 400
    assert not extractor.produced[0].exists()
    assert not any(storage_dir.iterdir())


@pytest.mark.unit
def test_download_requires_valid_url(client: TestClient) -> None:
    response = client.post("/api/download", json={"url": "not a url"})

    assert response.status_code == 422


@pytest.mark.unit
def test_info_returns_title_and_duration(app: FastAPI, client: TestClient) -> None:
    app.state.audio_extractor = _StubExtractor()

    response = client.post("/api/info", json={"url": SOURCE})

    assert response.status_code == 200
    assert response.json() == {"title": "Talk", "duration": 3725, "durationFormatted": "1:02:05"}


@pytest.mark.unit
def test_info_rejects_playlists(app: FastAPI, client: TestClient) -> None:
    app.state.audio_extractor = _StubExtractor(error=UnsupportedSourceError("playlist"))

    response = client.post("/api/info", json={"url": SOURCE})

    assert response.status_code == 400
    assert "Playlists" in response.json()["detail"]
