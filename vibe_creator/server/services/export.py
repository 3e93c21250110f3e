"""
Export job service.

An export turns a flattened timeline into a single MP4. Requesting one
checks the user's quota and tier limits and stores a QUEUED job; the render
itself runs after the response is sent, on its own database session, and
reports progress on the job row for the client to poll.
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta
from pathlib import Path
from typing import Callable, List, Tuple

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from vibe_creator.core.database.base import utc_now
from vibe_creator.core.database.entities import ExportHistory, User
from vibe_creator.core.database.repositories import (
    ExportRepository,
    ProjectAssetRepository,
    ProjectRepository,
)
from vibe_creator.core.models.domain import (
    EditorTimeline,
    ExportSettings,
    ExportStatus,
    ExportTimeline,
)
from vibe_creator.core.models.domain.tiers import clamp_resolution, requires_watermark
from vibe_creator.core.models.io.exports import ExportCreated, ExportRequest
from vibe_creator.core.monitoring import log_export_job
from vibe_creator.server.core import constant
from vibe_creator.server.errors import (
    AppError,
    ErrorCode,
    ExportJobError,
    NotFoundError,
    ValidationFailedError,
)

from .ffmpeg_processor import RESOLUTION_SIZES, FFmpegProcessor
from .payment import PaymentService
from .storage import LocalStorage

logger = logging.getLogger(__name__)

TRIM_PROGRESS = 50
CONCAT_PROGRESS = 75
FINALIZE_PROGRESS = 90


def _percent(done: int, total: int, scale: int) -> int:
    return math.floor(done / total * scale + 0.5)


class ExportService:
    """Creation and lookup of a user's export jobs."""

    def __init__(self, session: AsyncSession, *, payments: PaymentService, storage: LocalStorage) -> None:
        self.exports = ExportRepository(session)
        self.projects = ProjectRepository(session)
        self.assets = ProjectAssetRepository(session)
        self.payments = payments
        self.storage = storage

    async def request_export(self, user: User, request: ExportRequest) -> Tuple[ExportHistory, ExportCreated]:
        """Validate and enqueue an export.

        Admins keep their requested options and use no quota. Everyone else
        spends one export; FREE renders are always watermarked and the
        resolution is lowered to the tier's maximum.
        """
        timeline = request.timeline_data or await self._timeline_from_project(user, request.project_id)
        for clip in timeline.clips:
            self.storage.resolve(clip.local_path)

        if await self.exports.count_pending(user.id) >= constant.MAX_PENDING_EXPORTS:
            raise ExportJobError("Too many pending export jobs. Please wait for current exports to complete.")

        watermark = request.add_watermark
        resolution = request.resolution
        remaining = -1
        if not user.is_admin:
            subscription = await self.payments.get_subscription(user.id)
            usage = await self.payments.use_export(user.id)
            remaining = usage.remaining
            watermark = True if requires_watermark(subscription.tier) else request.add_watermark
            resolution = clamp_resolution(subscription.tier, request.resolution)

        job = await self.exports.create(
            ExportHistory(
                user_id=user.id,
                project_id=request.project_id,
                format=request.format,
                resolution=resolution,
                watermark=watermark,
                status=ExportStatus.QUEUED,
                timeline_data=timeline.model_dump(by_alias=True, mode="json"),
                expires_at=utc_now() + timedelta(hours=constant.EXPORT_RETENTION_HOURS),
            )
        )
        log_export_job(job.id, job.status.value, job.progress)
        logger.info(f"Export job {job.id} queued for user {user.id} ({len(timeline.clips)} clips, {resolution.value})")

        created = ExportCreated(
            job_id=job.id,
            status=job.status,
            remaining=remaining,
            watermark_applied=watermark,
            is_admin=user.is_admin,
        )
        return job, created

    async def _timeline_from_project(self, user: User, project_id: str) -> ExportTimeline:
        project = await self.projects.get_for_user(project_id, user.id)
        if project is None:
            raise NotFoundError("Project not found")
        if not project.timeline_data:
            raise ValidationFailedError("Project has no saved timeline")

        assets = {asset.id: asset for asset in await self.assets.list_for_project(project.id)}

        def resolve_asset(asset_id: str) -> str:
            asset = assets.get(asset_id)
            if asset is None:
                raise ValidationFailedError(f"Timeline references an unknown asset: {asset_id}")
            return str(self.storage.resolve(asset.storage_key))

        settings = ExportSettings.model_validate(
            {key: project.settings[key] for key in ("width", "height", "fps") if key in project.settings}
        )
        try:
            return EditorTimeline.model_validate(project.timeline_data).to_export_timeline(resolve_asset, settings)
        except ValidationError as e:
            raise ValidationFailedError("Project timeline has no video clips to export") from e

    async def get_job(self, user: User, job_id: str) -> ExportHistory:
        job = await self.exports.get_for_user(job_id, user.id)
        if job is None:
            raise NotFoundError("Export job not found")
        return job

    async def get_download_path(self, user: User, job_id: str) -> Path:
        job = await self.get_job(user, job_id)
        if job.status != ExportStatus.COMPLETED or not job.local_path:
            raise AppError(ErrorCode.NOT_READY, "Export is not ready yet", status_code=400)
        path = Path(job.local_path)
        if not path.is_file():
            raise NotFoundError("Export file not found", code=ErrorCode.FILE_NOT_FOUND)
        return path

    async def history(self, user: User) -> List[ExportHistory]:
        return await self.exports.recent_for_user(user.id, constant.EXPORT_HISTORY_LIMIT)


async def process_export_job(
    job_id: str,
    *,
    session_factory: Callable[[], AsyncSession] | async_sessionmaker,
    processor: FFmpegProcessor,
    storage: LocalStorage,
) -> None:
    """
    Render an export job.

    Steps, with the progress reported after each:
    - trim every clip into the job's work directory (up to 50)
    - concatenate when there is more than one clip (75)
    - watermark or copy into the exports directory (90)
    - mark the job COMPLETED (100)

    Any failure marks the job FAILED with the error message. Scratch files
    are always removed.
    """
    async with session_factory() as session:
        exports = ExportRepository(session)
        job = await exports.get_by_id(job_id)
        if job is None:
            logger.warning(f"Export job {job_id} disappeared before processing")
            return

        job = await exports.apply(
            job, status=ExportStatus.PROCESSING, started_at=utc_now(), attempts=job.attempts + 1
        )
        log_export_job(job.id, job.status.value, job.progress)
        work_dir = storage.job_work_dir(job.id)

        try:
            if not job.timeline_data:
                raise ExportJobError("Job is missing timeline data")
            timeline = ExportTimeline.model_validate(job.timeline_data)
            size = RESOLUTION_SIZES[job.resolution]

            storage.ensure_directories()
            work_dir.mkdir(parents=True, exist_ok=True)

            logger.info(f"Export job {job.id}: trimming {len(timeline.clips)} clips")
            trimmed: List[Path] = []
            for index, clip in enumerate(timeline.clips):
                output = work_dir / f"trimmed_{index}.mp4"
                await processor.trim(storage.resolve(clip.local_path), output, clip.start_time, clip.end_time, size)
                trimmed.append(output)
                job = await exports.apply(job, progress=_percent(index + 1, len(timeline.clips), TRIM_PROGRESS))

            if len(trimmed) > 1:
                merged = work_dir / "merged.mp4"
                await processor.concat(trimmed, merged)
                job = await exports.apply(job, progress=CONCAT_PROGRESS)
            else:
                merged = trimmed[0]

            final = storage.export_path(job.id)
            if job.watermark:
                await processor.add_watermark(merged, final)
            else:
                await processor.copy(merged, final)
            job = await exports.apply(job, progress=FINALIZE_PROGRESS)

            job = await exports.apply(
                job,
                status=ExportStatus.COMPLETED,
                progress=100,
                local_path=str(final),
                completed_at=utc_now(),
            )
            log_export_job(job.id, job.status.value, job.progress)
            logger.info(f"Export job {job.id} completed: {final}")
        except Exception as e:
            logger.error(f"Export job {job_id} failed: {e}", exc_info=True)
            await session.rollback()
            job = await exports.get_by_id(job_id)
            if job is not None:
                job = await exports.apply(job, status=ExportStatus.FAILED, error_message=str(e) or type(e).__name__)
                log_export_job(job.id, job.status.value, job.progress, error_message=job.error_message)
        finally:
            storage.remove(work_dir)
