"""
Announcement repository.
"""

from __future__ import annotations

from typing import List

from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.announcements import Announcement
from .base import AsyncBaseRepository


class AnnouncementRepository(AsyncBaseRepository[Announcement]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Announcement)

    async def list_all(self) -> List[Announcement]:
        stmt = select(Announcement).order_by(col(Announcement.created_at).desc())
        return list((await self.session.exec(stmt)).all())

    async def list_active(self) -> List[Announcement]:
        stmt = (
            select(Announcement)
            .where(col(Announcement.is_active).is_(True))
            .order_by(col(Announcement.created_at).desc())
        )
        return list((await self.session.exec(stmt)).all())
