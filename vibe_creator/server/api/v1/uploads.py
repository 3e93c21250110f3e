"""
Upload Endpoints.

Videos are streamed to the temporary upload area in chunks. The returned
``filepath`` is what export requests and project assets refer to.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, File, UploadFile

from vibe_creator.core.logging_config import get_logger
from vibe_creator.core.models.io.common import ApiResponse
from vibe_creator.core.models.io.uploads import UploadResult
from vibe_creator.server.errors import AppError, ErrorCode
from vibe_creator.server.services.deps import CurrentUser, StorageDep

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/video",
    response_model=ApiResponse[UploadResult],
    summary="Upload Video",
    description="Upload a video as multipart field `file`. The size limit comes from `MAX_UPLOAD_SIZE_MB`.",
    response_description="Stored file name, absolute path, MIME type and size in bytes.",
    responses={
        400: {"description": "No file provided"},
        413: {"description": "File larger than the configured limit"},
    },
)
async def upload_video(
    user: CurrentUser, storage: StorageDep, file: Optional[UploadFile] = File(None)
) -> ApiResponse[UploadResult]:
    if file is None or not file.filename:
        raise AppError(ErrorCode.NO_FILE, "No file uploaded", status_code=400)
    result = await storage.save_upload(file)
    logger.info(f"User {user.id} uploaded {result.filename} ({result.size} bytes)")
    return ApiResponse[UploadResult](data=result)
