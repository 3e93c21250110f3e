"""
Project and asset entity models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Column
from sqlmodel import Field

from vibe_creator.core.models.domain.enums import AssetType, ProjectStatus

from ..base import Base, new_id, utc_now
from ._types import JSONType, UTCDateTime


def default_project_settings() -> Dict[str, Any]:
    return {"width": 1920, "height": 1080, "fps": 30, "maxDurationMs": 1_800_000}


class Project(Base, table=True):
    """Editing project owned by a user.

    ``settings`` holds canvas dimensions and limits; ``timeline_data`` holds
    the serialised editor timeline once the user has saved one.

    Table: projects
    """

    __tablename__ = "projects"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=36)
    title: str = Field(max_length=255)
    description: Optional[str] = None
    status: ProjectStatus = Field(default=ProjectStatus.DRAFT)
    settings: Dict[str, Any] = Field(default_factory=default_project_settings, sa_column=Column(JSONType, nullable=False))
    timeline_data: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSONType, nullable=True))

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Project(id={self.id}, title={self.title}, status={self.status})"


class ProjectAsset(Base, table=True):
    """Media file attached to a project.

    Table: project_assets
    """

    __tablename__ = "project_assets"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    project_id: str = Field(foreign_key="projects.id", index=True, max_length=36)
    type: AssetType
    name: str = Field(max_length=255)
    source_url: Optional[str] = Field(default=None, max_length=2048)
    storage_key: str = Field(max_length=1024, description="Path of the file relative to the upload directory")
    asset_metadata: Dict[str, Any] = Field(
        default_factory=dict, sa_column=Column("metadata", JSONType, nullable=False)
    )
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"ProjectAsset(id={self.id}, type={self.type}, name={self.name})"
