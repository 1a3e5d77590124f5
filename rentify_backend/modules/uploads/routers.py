"""File upload and local file download routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import FileResponse

from ...config import settings
from ...core.exceptions import NotFoundError, PermissionError
from ...core.logging import get_logger
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse
from .schemas import UploadResponse
from .storage import LocalStorageProvider, StorageProvider, get_storage

logger = get_logger(__name__)

router = APIRouter(prefix="/upload", tags=["Uploads"])
files_router = APIRouter(prefix="/files", tags=["Files"])


@router.post("", response_model=BaseResponse[UploadResponse])
async def upload_file(
    current_user: CurrentUser,
    storage: Annotated[StorageProvider, Depends(get_storage)],
    file: UploadFile | None = File(None),
    filePath: str | None = Form(None),  # noqa: N803
    bucket: str | None = Form(None),
):
    """Store a file in a public bucket and return a long-lived URL to it.

    Private buckets (tenant documents) are only written by their own
    endpoints, which never overwrite.
    """
    if file is None or not filePath:
        raise HTTPException(status_code=400, detail="File and filePath are required")

    bucket = bucket or settings.default_image_bucket
    if bucket not in settings.public_buckets:
        logger.warning(f"Upload to private bucket '{bucket}' refused for {current_user.id}")
        raise PermissionError("upload to", f"bucket '{bucket}'")

    data = await file.read()
    path = await storage.upload(
        bucket, filePath, data, content_type=file.content_type, upsert=True
    )
    url = await storage.signed_url(
        bucket, path, settings.storage_signed_url_ttl_seconds
    )
    logger.info(f"Uploaded {bucket}/{path} ({len(data)} bytes) for {current_user.id}")
    return BaseResponse(
        success=True,
        message="File uploaded successfully",
        data=UploadResponse(url=url, path=path, bucket=bucket),
    )


@files_router.get("/{bucket}/{path:path}")
async def download_file(
    bucket: str,
    path: str,
    storage: Annotated[StorageProvider, Depends(get_storage)],
    token: str | None = Query(None),
):
    """Serve a locally stored object; private buckets need a signed link."""
    if not isinstance(storage, LocalStorageProvider):
        raise NotFoundError("File not found")
    return FileResponse(storage.resolve(bucket, path, token))
