"""
Project I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from vibe_creator.core.models.domain.enums import AssetType, ProjectStatus
from vibe_creator.core.models.domain.timeline import EditorTimeline

from ..base import CamelSchema


class ProjectSettingsSchema(CamelSchema):
    width: int = Field(default=1920, gt=0)
    height: int = Field(default=1080, gt=0)
    fps: int = Field(default=30, gt=0)
    max_duration_ms: int = Field(default=1_800_000, gt=0)


class ProjectSettingsPatch(CamelSchema):
    width: Optional[int] = Field(default=None, gt=0)
    height: Optional[int] = Field(default=None, gt=0)
    fps: Optional[int] = Field(default=None, gt=0)
    max_duration_ms: Optional[int] = Field(default=None, gt=0)


class ProjectCreate(CamelSchema):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    settings: Optional[ProjectSettingsPatch] = None


class ProjectUpdate(CamelSchema):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    settings: Optional[ProjectSettingsPatch] = None


class AssetCreate(CamelSchema):
    type: AssetType
    name: str = Field(min_length=1, max_length=255)
    storage_key: str = Field(min_length=1, description="Path returned by the upload endpoint")
    source_url: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class AssetRead(CamelSchema):
    id: str
    project_id: str
    type: AssetType
    name: str
    source_url: Optional[str] = None
    storage_key: str
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="asset_metadata")
    created_at: datetime


class ProjectRead(CamelSchema):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    status: ProjectStatus
    settings: Dict[str, Any]
    timeline_data: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class ProjectListItem(ProjectRead):
    asset_count: int = 0


class ProjectDetail(ProjectRead):
    assets: List[AssetRead] = Field(default_factory=list)


class TimelineUpdate(CamelSchema):
    timeline: EditorTimeline
