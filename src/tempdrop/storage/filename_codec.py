"""Storage file naming that doubles as the only persisted metadata.

A payload is stored as ``<16 hex id><8 hex expiry seconds>.<ext>``, e.g.
``3f9a0c1d2e4b5a6f66a1b2c3.mp3``. The expiry field is the unsigned 32-bit
count of Unix seconds, so instants after 2106-02-07 cannot be encoded.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import PurePath
from typing import Protocol

from .storage_models import DecodedName

ID_HEX_LENGTH = 16
EXPIRY_HEX_LENGTH = 8
MAX_EXPIRY_SECONDS = 0xFFFFFFFF
MAX_EXTENSION_LENGTH = 16
DEFAULT_EXTENSION = "bin"

_ID_RE = re.compile(rf"[0-9a-f]{{{ID_HEX_LENGTH}}}")
_EXTENSION_RE = re.compile(rf"[A-Za-z0-9]{{1,{MAX_EXTENSION_LENGTH}}}")
_NAME_RE = re.compile(
    rf"(?P<id>[0-9a-f]{{{ID_HEX_LENGTH}}})"
    rf"(?P<expiry>[0-9a-f]{{{EXPIRY_HEX_LENGTH}}})"
    rf"\.(?P<ext>[A-Za-z0-9]{{1,{MAX_EXTENSION_LENGTH}}})"
)


class NamingScheme(Protocol):
    """Maps object identity and expiry to a storage name and back."""

    def encode(self, object_id: str, expires_at: datetime, extension: str) -> str:
        ...

    def decode(self, name: str) -> DecodedName | None:
        ...


class FilenameCodec:
    """Fixed-width hexadecimal naming scheme."""

    def encode(self, object_id: str, expires_at: datetime, extension: str) -> str:
        if not _ID_RE.fullmatch(object_id):
            raise ValueError(f"object id must be {ID_HEX_LENGTH} lowercase hex characters")
        if not _EXTENSION_RE.fullmatch(extension):
            raise ValueError(f"unsupported extension '{extension}'")
        seconds = to_epoch_seconds(expires_at)
        if not 0 <= seconds <= MAX_EXPIRY_SECONDS:
            raise ValueError(f"expiry {expires_at.isoformat()} is outside the 32-bit range")
        return f"{object_id}{seconds:0{EXPIRY_HEX_LENGTH}x}.{extension}"

    def decode(self, name: str) -> DecodedName | None:
        match = _NAME_RE.fullmatch(name)
        if match is None:
            return None
        seconds = int(match.group("expiry"), 16)
        return DecodedName(
            id=match.group("id"),
            expires_at=datetime.fromtimestamp(seconds, tz=timezone.utc),
            extension=match.group("ext"),
        )


def to_epoch_seconds(moment: datetime) -> int:
    """Whole Unix seconds for ``moment``; naive values are read as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() // 1)


def truncate_to_second(moment: datetime) -> datetime:
    return datetime.fromtimestamp(to_epoch_seconds(moment), tz=timezone.utc)


def derive_extension(display_name: str | None) -> str:
    """Extension taken from a client-supplied file name, ``bin`` if unusable."""
    if not display_name:
        return DEFAULT_EXTENSION
    suffix = PurePath(display_name).suffix.lstrip(".")
    cleaned = "".join(ch for ch in suffix if ch.isascii() and ch.isalnum())
    if not cleaned:
        return DEFAULT_EXTENSION
    return cleaned[:MAX_EXTENSION_LENGTH]


__all__ = [
    "DEFAULT_EXTENSION",
    "FilenameCodec",
    "NamingScheme",
    "derive_extension",
    "to_epoch_seconds",
    "truncate_to_second",
]
