"""
Public announcement feed shown on the landing page and dashboard.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter

from vibe_creator.core.database.repositories import AnnouncementRepository
from vibe_creator.core.models.io.announcements import AnnouncementRead
from vibe_creator.core.models.io.common import ApiResponse
from vibe_creator.server.services.deps import SessionDep

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[List[AnnouncementRead]],
    summary="Active Announcements",
    description="Active announcements, newest first. No authentication required.",
)
async def list_active_announcements(session: SessionDep) -> ApiResponse[List[AnnouncementRead]]:
    announcements = await AnnouncementRepository(session).list_active()
    return ApiResponse[List[AnnouncementRead]](data=[AnnouncementRead.model_validate(a) for a in announcements])
