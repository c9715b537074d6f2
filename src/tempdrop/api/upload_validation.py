"""Upload validation utilities."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import UploadFile

from ..exceptions import PayloadTooLargeError, UnsupportedMediaError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1 * 1024 * 1024  # 1 MiB


@dataclass(frozen=True, slots=True)
class ValidatedUpload:
    filename: str
    content_type: str
    data: bytes


@dataclass(slots=True)
class UploadValidator:
    """Check content type and size of an upload while buffering it."""

    allowed_media_prefix: str
    max_bytes: int

    async def read(self, upload: UploadFile) -> ValidatedUpload:
        content_type = upload.content_type or ""
        if not content_type.startswith(self.allowed_media_prefix):
            logger.warning(
                "upload.unsupported_media",
                extra={"content_type": content_type},
            )
            raise UnsupportedMediaError(content_type)

        buffer = bytearray()
        try:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                buffer.extend(chunk)
                if len(buffer) > self.max_bytes:
                    logger.warning(
                        "upload.payload_too_large",
                        extra={"size_bytes": len(buffer), "limit_bytes": self.max_bytes},
                    )
                    raise PayloadTooLargeError(len(buffer))
        finally:
            await upload.close()

        return ValidatedUpload(
            filename=upload.filename or "upload",
            content_type=content_type,
            data=bytes(buffer),
        )
