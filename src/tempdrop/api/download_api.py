"""HTTP routes that store audio extracted from remote media URLs."""

from __future__ import annotations

import contextlib
import mimetypes

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool

from ..config import AppConfig
from ..exceptions import ExtractionError, StorageIOError, UnsupportedSourceError
from ..extraction.audio_extractor import AudioExtractor, format_duration
from ..storage.object_store import ObjectStore
from .api_schemas import MediaInfoResponse, SourceUrlRequest, StoredFileResponse
from .files_api import get_object_store

router = APIRouter(prefix="/api", tags=["download"])
logger = structlog.get_logger(__name__)


def get_audio_extractor(request: Request) -> AudioExtractor:
    try:
        return request.app.state.audio_extractor  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - wiring error
        raise RuntimeError("AudioExtractor is not configured") from exc


def get_config(request: Request) -> AppConfig:
    return request.app.state.config  # type: ignore[attr-defined]


@router.post("/download", response_model=StoredFileResponse)
async def download_audio(
    body: SourceUrlRequest,
    request: Request,
    store: ObjectStore = Depends(get_object_store),
    extractor: AudioExtractor = Depends(get_audio_extractor),
    config: AppConfig = Depends(get_config),
) -> StoredFileResponse:
    """Extract the audio track of ``body.url`` and store it as an object."""
    source = str(body.url)
    try:
        extracted = await run_in_threadpool(extractor.extract_audio, source, config.extraction_dir)
    except ExtractionError as exc:
        logger.warning("download.extraction_failed", url=source, error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Download failed. Please check the URL.",
        ) from exc

    try:
        size = extracted.stat().st_size
        if size > config.max_upload_bytes:
            logger.warning("download.payload_too_large", url=source, size_bytes=size)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File too large (max. {config.max_upload_bytes // (1024 * 1024)}MB)",
            )
        data = extracted.read_bytes()
        media_type = mimetypes.guess_type(extracted.name)[0] or "application/octet-stream"
        record = await run_in_threadpool(store.store, data, extracted.name, media_type)
    except (OSError, StorageIOError) as exc:
        logger.error("download.store_failed", url=source, error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Download failed",
        ) from exc
    finally:
        with contextlib.suppress(OSError):
            extracted.unlink(missing_ok=True)

    logger.info("download.stored", object_id=record.id, url=source, size_bytes=record.size_bytes)
    file_url = str(request.url_for("get_file", object_id=record.id))
    return StoredFileResponse.from_record(record, url=file_url)


@router.post("/info", response_model=MediaInfoResponse)
async def media_info(
    body: SourceUrlRequest,
    extractor: AudioExtractor = Depends(get_audio_extractor),
) -> MediaInfoResponse:
    source = str(body.url)
    try:
        info = await run_in_threadpool(extractor.fetch_info, source)
    except UnsupportedSourceError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Playlists are not supported. Please submit a single video.",
        ) from exc
    except ExtractionError as exc:
        logger.warning("info.fetch_failed", url=source, error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not fetch video information.",
        ) from exc

    return MediaInfoResponse(
        title=info.title,
        duration=info.duration_seconds,
        duration_formatted=format_duration(info.duration_seconds),
    )
