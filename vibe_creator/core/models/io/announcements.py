"""Announcement I/O models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..base import CamelSchema


class AnnouncementCreate(CamelSchema):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    is_active: bool = True


class AnnouncementUpdate(CamelSchema):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)
    is_active: Optional[bool] = None


class AnnouncementRead(CamelSchema):
    id: str
    title: str
    content: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
