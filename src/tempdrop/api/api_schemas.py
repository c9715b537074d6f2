"""Request and response bodies for the HTTP layer."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, HttpUrl

from ..storage.storage_models import StoredObject


class SourceUrlRequest(BaseModel):
    url: HttpUrl


class StoredFileResponse(BaseModel):
    url: str
    expires_at: datetime = Field(serialization_alias="expiresAt")
    filename: str
    size: int

    @classmethod
    def from_record(cls, record: StoredObject, url: str) -> "StoredFileResponse":
        return cls(
            url=url,
            expires_at=record.expires_at,
            filename=record.display_name,
            size=record.size_bytes,
        )


class MediaInfoResponse(BaseModel):
    title: str
    duration: int
    duration_formatted: str = Field(serialization_alias="durationFormatted")
