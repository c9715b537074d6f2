"""Domain level exceptions for the object store and its collaborators."""

from __future__ import annotations

__all__ = [
    "TempDropError",
    "StoreError",
    "ObjectNotFoundError",
    "StorageIOError",
    "StartupError",
    "UploadError",
    "UnsupportedMediaError",
    "PayloadTooLargeError",
    "ExtractionError",
    "UnsupportedSourceError",
]


class TempDropError(Exception):
    """Base class for application specific errors."""


class StoreError(TempDropError):
    """Base class for object store failures."""


class ObjectNotFoundError(StoreError):
    """Raised when an object is absent or already expired.

    Both cases share one error on purpose so callers cannot probe expiry
    timing.
    """


class StorageIOError(StoreError):
    """Raised when the storage volume cannot be written, read or cleaned."""


class StartupError(StoreError):
    """Raised when restart recovery cannot list the storage directory."""


class UploadError(TempDropError):
    """Base class for rejected client uploads."""


class UnsupportedMediaError(UploadError):
    """Raised when Content-Type is not allowed."""


class PayloadTooLargeError(UploadError):
    """Raised when a payload exceeds the configured size cap."""


class ExtractionError(TempDropError):
    """Raised when audio extraction from a remote source fails."""


class UnsupportedSourceError(ExtractionError):
    """Raised for sources the extractor refuses to handle (playlists)."""
