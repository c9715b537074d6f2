"""Dependency wiring helpers."""

from __future__ import annotations

from fastapi import FastAPI

from .api import download_router, files_router
from .api.upload_validation import UploadValidator
from .config import AppConfig
from .extraction.audio_extractor import AudioExtractor
from .lifecycle import ReclamationScheduler
from .storage.object_store import ObjectStore


def include_routers(app: FastAPI, config: AppConfig, store: ObjectStore) -> None:
    """Attach services to application state and mount routers."""
    app.state.config = config
    app.state.object_store = store
    app.state.upload_validator = UploadValidator(
        allowed_media_prefix=config.allowed_media_prefix,
        max_bytes=config.max_upload_bytes,
    )
    app.state.audio_extractor = AudioExtractor(
        audio_format=config.ytdlp_audio_format,
        audio_quality=config.ytdlp_audio_quality,
    )
    app.state.reclamation_scheduler = ReclamationScheduler(
        store,
        interval_seconds=config.sweep_interval_seconds,
        clock=store.clock,
    )

    app.include_router(files_router)
    app.include_router(download_router)
