"""HTTP routes for uploading, fetching and deleting stored files."""

from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from ..exceptions import (
    ObjectNotFoundError,
    PayloadTooLargeError,
    StorageIOError,
    UnsupportedMediaError,
)
from ..storage.object_store import ObjectStore
from .api_schemas import StoredFileResponse
from .upload_validation import UploadValidator

router = APIRouter(prefix="/api", tags=["files"])
logger = logging.getLogger(__name__)

NOT_FOUND_DETAIL = "File not found or expired"


def get_object_store(request: Request) -> ObjectStore:
    """Fetch the object store from application state."""
    try:
        return request.app.state.object_store  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - wiring error
        raise RuntimeError("ObjectStore is not configured") from exc


def get_upload_validator(request: Request) -> UploadValidator:
    try:
        return request.app.state.upload_validator  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - wiring error
        raise RuntimeError("UploadValidator is not configured") from exc


@router.post("/upload", response_model=StoredFileResponse)
async def upload_file(
    file: UploadFile | None = File(None),
    store: ObjectStore = Depends(get_object_store),
    validator: UploadValidator = Depends(get_upload_validator),
) -> StoredFileResponse:
    """Store an uploaded audio file and return its retrieval path."""
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    try:
        upload = await validator.read(file)
    except UnsupportedMediaError as exc:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Only audio files are allowed",
        ) from exc
    except PayloadTooLargeError as exc:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large (max. {validator.max_bytes // (1024 * 1024)}MB)",
        ) from exc

    try:
        record = await run_in_threadpool(store.store, upload.data, upload.filename, upload.content_type)
    except StorageIOError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Upload failed",
        ) from exc

    logger.info(
        "files.uploaded",
        extra={
            "object_id": record.id,
            "filename": record.display_name,
            "size_bytes": record.size_bytes,
            "media_type": record.media_type,
            "expires_at": record.expires_at.isoformat(),
        },
    )
    return StoredFileResponse.from_record(record, url=f"/api/files/{record.id}")


@router.get("/files/{object_id}", name="get_file")
def get_file(object_id: str, store: ObjectStore = Depends(get_object_store)) -> Response:
    """Serve stored bytes; absent and expired objects share one 404."""
    try:
        record, data = store.read(object_id)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL) from exc
    except StorageIOError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read file",
        ) from exc

    encoded_name = quote(record.display_name, safe="!~*'()")
    return Response(
        content=data,
        media_type=record.media_type,
        headers={
            "Content-Length": str(len(data)),
            "Content-Disposition": f"inline; filename=\"{encoded_name}\"",
            "Cache-Control": "public, max-age=3600",
        },
    )


@router.delete("/files/{object_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(object_id: str, store: ObjectStore = Depends(get_object_store)) -> Response:
    if not store.delete(object_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
