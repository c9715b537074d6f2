"""Application configuration for tempdrop.

Every value can be overridden through environment variables carrying the
``TEMPDROP_`` prefix, e.g. ``TEMPDROP_TTL_SECONDS=600``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, cast

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_data_root() -> Path:
    return Path(".")


class AppConfig(BaseSettings):
    """Pydantic settings container for the store and the HTTP layer."""

    model_config = cast(Any, SettingsConfigDict(env_prefix="TEMPDROP_"))

    data_root: Path = Field(
        default_factory=_default_data_root,
        description="Directory under which the storage subdirectory is created.",
    )
    storage_dirname: str = Field(
        default="uploads",
        min_length=1,
        description="Name of the payload directory below data_root.",
    )
    ttl_seconds: int = Field(
        default=60 * 60,
        ge=1,
        description="Lifetime of every stored object in seconds.",
    )
    sweep_interval_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Cadence of the background reclamation sweep in seconds.",
    )
    max_upload_bytes: int = Field(
        default=100 * 1024 * 1024,
        ge=1,
        description="Upper bound for uploaded and extracted payloads.",
    )
    allowed_media_prefix: str = Field(
        default="audio/",
        description="Content-Type prefix accepted by the upload endpoint.",
    )
    extraction_temp_dirname: str = Field(
        default="temp",
        min_length=1,
        description="Scratch directory below data_root for audio extraction.",
    )
    ytdlp_audio_format: str = Field(
        default="mp3",
        description="Target codec for extracted audio.",
    )
    ytdlp_audio_quality: str = Field(
        default="5",
        description="ffmpeg VBR quality passed to the audio post-processor.",
    )
    log_level: str = Field(default="INFO")

    @property
    def storage_dir(self) -> Path:
        return self.data_root / self.storage_dirname

    @property
    def extraction_dir(self) -> Path:
        return self.data_root / self.extraction_temp_dirname

    @classmethod
    def build_default(cls) -> "AppConfig":
        """Construct configuration from the environment."""

        return cls()


__all__ = ["AppConfig"]
