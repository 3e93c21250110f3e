"""
Export job entity model.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Column
from sqlmodel import Field

from vibe_creator.core.models.domain.enums import ExportFormat, ExportResolution, ExportStatus

from ..base import Base, new_id, utc_now
from ._types import JSONType, UTCDateTime


class ExportHistory(Base, table=True):
    """A queued or finished render of a timeline.

    Table: export_history
    """

    __tablename__ = "export_history"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=36)
    project_id: Optional[str] = Field(default=None, max_length=36, index=True)
    format: ExportFormat = Field(default=ExportFormat.MP4)
    resolution: ExportResolution = Field(default=ExportResolution.HD)
    watermark: bool = Field(default=True)
    status: ExportStatus = Field(default=ExportStatus.QUEUED, index=True)
    progress: int = Field(default=0, ge=0, le=100)
    timeline_data: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSONType, nullable=True))
    local_path: Optional[str] = Field(default=None, max_length=1024)
    error_message: Optional[str] = None
    attempts: int = Field(default=0, ge=0)
    started_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    completed_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    expires_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"ExportHistory(id={self.id}, status={self.status}, progress={self.progress})"
