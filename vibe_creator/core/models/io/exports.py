"""
Export job I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from vibe_creator.core.models.domain.enums import ExportFormat, ExportResolution, ExportStatus
from vibe_creator.core.models.domain.timeline import ExportTimeline

from ..base import CamelSchema


class ExportRequest(CamelSchema):
    project_id: str
    timeline_data: Optional[ExportTimeline] = Field(
        default=None, description="Clips to render; built from the project's saved timeline when omitted"
    )
    format: ExportFormat = ExportFormat.MP4
    resolution: ExportResolution = ExportResolution.HD
    add_watermark: bool = True


class ExportCreated(CamelSchema):
    job_id: str
    status: ExportStatus
    remaining: int
    watermark_applied: bool
    is_admin: bool


class ExportStatusRead(CamelSchema):
    id: str
    status: ExportStatus
    progress: int
    error_message: Optional[str] = None
    local_path: Optional[str] = None
    completed_at: Optional[datetime] = None


class ExportHistoryItem(ExportStatusRead):
    project_id: Optional[str] = None
    format: ExportFormat
    resolution: ExportResolution
    created_at: datetime
