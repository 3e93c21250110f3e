"""
Announcement entity model.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, Text
from sqlmodel import Field

from ..base import Base, new_id, utc_now
from ._types import UTCDateTime


class Announcement(Base, table=True):
    """Site-wide notice shown on the dashboard while active.

    Table: announcements
    """

    __tablename__ = "announcements"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    title: str = Field(max_length=255)
    content: str = Field(sa_column=Column(Text, nullable=False))
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Announcement(id={self.id}, title={self.title}, active={self.is_active})"
