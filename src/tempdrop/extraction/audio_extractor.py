"""Audio extraction from remote media URLs through yt-dlp."""

from __future__ import annotations

import contextlib
import logging
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yt_dlp
from yt_dlp.utils import DownloadError

from ..exceptions import ExtractionError, UnsupportedSourceError

logger = logging.getLogger(__name__)

YoutubeDLFactory = Callable[[dict[str, Any]], Any]

MAX_URL_REDIRECTS = 3
_URL_RESULT_TYPES = {"url", "url_transparent"}


@dataclass(frozen=True, slots=True)
class MediaInfo:
    title: str
    duration_seconds: int


def format_duration(seconds: float) -> str:
    """Render ``seconds`` as ``H:MM:SS`` or ``M:SS``."""
    total = int(max(0, seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


@dataclass(slots=True)
class AudioExtractor:
    """Fetch metadata for, and extract the audio track of, a media URL."""

    audio_format: str = "mp3"
    audio_quality: str = "5"
    ydl_factory: YoutubeDLFactory = field(default=yt_dlp.YoutubeDL)

    def _base_options(self) -> dict[str, Any]:
        return {
            "quiet": True,
            "no_warnings": True,
            "noplaylist": True,
            "nocheckcertificate": True,
            "prefer_free_formats": True,
            "extractor_args": {"youtube": {"player_client": ["web"]}},
        }

    def fetch_info(self, url: str) -> MediaInfo:
        options = self._base_options()
        options["skip_download"] = True
        try:
            with self.ydl_factory(options) as ydl:
                info = ydl.extract_info(url, download=False, process=False)
                for _ in range(MAX_URL_REDIRECTS):
                    if info is None or info.get("_type") not in _URL_RESULT_TYPES:
                        break
                    info = ydl.extract_info(info["url"], download=False, process=False)
        except DownloadError as exc:
            logger.warning("extraction.info_failed", extra={"url": url, "error": str(exc)})
            raise ExtractionError("media information unavailable") from exc

        if info is None:
            raise ExtractionError("media information unavailable")
        if info.get("_type") in _URL_RESULT_TYPES:
            raise ExtractionError("media reference could not be resolved")
        if info.get("_type") == "playlist" or "entries" in info:
            raise UnsupportedSourceError("playlists are not supported")
        return MediaInfo(
            title=info.get("title") or "Unknown",
            duration_seconds=int(info.get("duration") or 0),
        )

    def extract_audio(self, url: str, target_dir: Path) -> Path:
        """Download ``url`` and convert it to audio inside ``target_dir``."""
        target_dir.mkdir(parents=True, exist_ok=True)
        stem = secrets.token_hex(8)
        options = self._base_options()
        options.update(
            {
                "format": "bestaudio/best",
                "outtmpl": str(target_dir / f"{stem}.%(ext)s"),
                "postprocessors": [
                    {
                        "key": "FFmpegExtractAudio",
                        "preferredcodec": self.audio_format,
                        "preferredquality": self.audio_quality,
                    }
                ],
            }
        )
        try:
            with self.ydl_factory(options) as ydl:
                ydl.download([url])
        except DownloadError as exc:
            logger.warning("extraction.download_failed", extra={"url": url, "error": str(exc)})
            _discard_partials(target_dir, stem)
            raise ExtractionError("download failed") from exc

        output = target_dir / f"{stem}.{self.audio_format}"
        if not output.is_file():
            _discard_partials(target_dir, stem)
            raise ExtractionError("download produced no audio file")
        _discard_partials(target_dir, stem, keep=output)
        logger.info("extraction.completed", extra={"url": url, "path": str(output)})
        return output


def _discard_partials(target_dir: Path, stem: str, keep: Path | None = None) -> None:
    """Remove intermediate files left by a download attempt."""
    for leftover in target_dir.glob(f"{stem}.*"):
        if leftover == keep:
            continue
        with contextlib.suppress(OSError):
            leftover.unlink(missing_ok=True)


__all__ = ["AudioExtractor", "MediaInfo", "format_duration"]
