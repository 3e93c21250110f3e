"""
Export Endpoints.

Export requests are validated and charged synchronously, then rendered by a
background task so the request returns as soon as the job is queued. Clients
poll the status endpoint and download the result once it is COMPLETED.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, BackgroundTasks, status
from fastapi.responses import FileResponse

from vibe_creator.core.logging_config import get_logger
from vibe_creator.core.models.io.common import ApiResponse
from vibe_creator.core.models.io.exports import (
    ExportCreated,
    ExportHistoryItem,
    ExportRequest,
    ExportStatusRead,
)
from vibe_creator.server.services.deps import (
    CurrentUser,
    ExportServiceDep,
    ProcessorDep,
    SessionFactoryDep,
    StorageDep,
)
from vibe_creator.server.services.export import process_export_job

logger = get_logger(__name__)

router = APIRouter()

_NOT_FOUND = {404: {"description": "Export job not found"}}


@router.post(
    "/request",
    response_model=ApiResponse[ExportCreated],
    status_code=status.HTTP_201_CREATED,
    summary="Request Export",
    description=(
        "Queue an export of the given timeline, or of the project's saved timeline when none is sent. "
        "Non-admin users spend one export; FREE exports are always watermarked and rendered at SD."
    ),
    response_description="The queued job id with the remaining quota and the effective watermark flag.",
    responses={
        400: {"description": "Invalid timeline or too many pending jobs"},
        403: {"description": "Export quota exceeded"},
        404: {"description": "Project not found"},
    },
)
async def request_export(
    body: ExportRequest,
    background_tasks: BackgroundTasks,
    user: CurrentUser,
    exports: ExportServiceDep,
    session_factory: SessionFactoryDep,
    processor: ProcessorDep,
    storage: StorageDep,
) -> ApiResponse[ExportCreated]:
    job, created = await exports.request_export(user, body)
    background_tasks.add_task(
        process_export_job, job.id, session_factory=session_factory, processor=processor, storage=storage
    )
    return ApiResponse[ExportCreated](data=created)


@router.get(
    "/history",
    response_model=ApiResponse[List[ExportHistoryItem]],
    summary="Export History",
    description="The user's 10 most recent export jobs.",
)
async def export_history(user: CurrentUser, exports: ExportServiceDep) -> ApiResponse[List[ExportHistoryItem]]:
    jobs = await exports.history(user)
    return ApiResponse[List[ExportHistoryItem]](data=[ExportHistoryItem.model_validate(job) for job in jobs])


@router.get(
    "/{job_id}/status",
    response_model=ApiResponse[ExportStatusRead],
    summary="Export Status",
    description="Current status and progress (0-100) of an export job.",
    responses=_NOT_FOUND,
)
async def export_status(job_id: str, user: CurrentUser, exports: ExportServiceDep) -> ApiResponse[ExportStatusRead]:
    job = await exports.get_job(user, job_id)
    return ApiResponse[ExportStatusRead](data=ExportStatusRead.model_validate(job))


@router.get(
    "/{job_id}/download",
    response_class=FileResponse,
    summary="Download Export",
    description="Download the rendered MP4 of a completed export job.",
    responses={
        200: {"content": {"video/mp4": {}}, "description": "The rendered video"},
        400: {"description": "Export not completed yet"},
        404: {"description": "Job not found or the file has been removed"},
    },
)
async def download_export(job_id: str, user: CurrentUser, exports: ExportServiceDep) -> FileResponse:
    path = await exports.get_download_path(user, job_id)
    logger.debug(f"Serving export {job_id} from {path}")
    return FileResponse(path, media_type="video/mp4", filename=f"export-{job_id}.mp4")
