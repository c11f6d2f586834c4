"""File upload pass-through to object storage."""

import logging
import os
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import JSONResponse

from api.dependencies import get_blob_store, get_upload_policy
from api.models import UploadErrorResponse, UploadResponse
from domain.model.errors import (
    FileTooLargeError,
    NoFileError,
    UnsupportedFileTypeError,
    UploadError,
)
from port.blob_store import BlobStorePort
from services import upload_service
from services.upload_service import UploadPolicy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["upload"])

# A "file" part that is plain text or lacks a filename fails UploadFile validation
INVALID_REQUEST_BODIES = {
    "/api/upload": {"success": False, "message": "No file uploaded"},
}


def _file_size(file: UploadFile) -> int:
    if file.size is not None:
        return file.size
    stream = file.file
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def _failure(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    content = {"success": False, "message": message}
    if error is not None:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content)


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={code: {"model": UploadErrorResponse} for code in (400, 413, 415, 500)},
)
def upload_file(
    file: Optional[UploadFile] = File(None),
    store: BlobStorePort = Depends(get_blob_store),
    policy: UploadPolicy = Depends(get_upload_policy),
):
    """Store a single multipart file (field ``file``) and return its URL."""
    try:
        if file is None:
            raise NoFileError()
        file.file.seek(0)
        url = upload_service.upload(
            store,
            file.file,
            file.filename,
            content_type=file.content_type,
            size=_file_size(file),
            policy=policy,
        )
    except NoFileError as e:
        return _failure(status.HTTP_400_BAD_REQUEST, str(e))
    except FileTooLargeError as e:
        return _failure(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, str(e))
    except UnsupportedFileTypeError as e:
        return _failure(status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, str(e))
    except UploadError as e:
        logger.error("Upload failed", extra={"error": str(e)})
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Upload failed", error=str(e))

    return UploadResponse(success=True, url=url)
