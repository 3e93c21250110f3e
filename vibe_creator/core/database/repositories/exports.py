"""
Export job repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from vibe_creator.core.models.domain.enums import ExportStatus

from ..entities.exports import ExportHistory
from .base import AsyncBaseRepository

PENDING_STATUSES = (ExportStatus.QUEUED, ExportStatus.PROCESSING)


class ExportRepository(AsyncBaseRepository[ExportHistory]):
    """Repository for export jobs."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ExportHistory)

    async def get_for_user(self, job_id: str, user_id: str) -> Optional[ExportHistory]:
        stmt = select(ExportHistory).where(ExportHistory.id == job_id, ExportHistory.user_id == user_id)
        return (await self.session.exec(stmt)).first()

    async def count_pending(self, user_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(ExportHistory)
            .where(ExportHistory.user_id == user_id, col(ExportHistory.status).in_(PENDING_STATUSES))
        )
        return int((await self.session.exec(stmt)).one())

    async def recent_for_user(self, user_id: str, limit: int) -> List[ExportHistory]:
        stmt = (
            select(ExportHistory)
            .where(ExportHistory.user_id == user_id)
            .order_by(col(ExportHistory.created_at).desc())
            .limit(limit)
        )
        return list((await self.session.exec(stmt)).all())

    async def recent(self, limit: int) -> List[ExportHistory]:
        stmt = select(ExportHistory).order_by(col(ExportHistory.created_at).desc()).limit(limit)
        return list((await self.session.exec(stmt)).all())

    async def count_since(self, since: datetime) -> int:
        stmt = select(func.count()).select_from(ExportHistory).where(ExportHistory.created_at >= since)
        return int((await self.session.exec(stmt)).one())

    async def count_by_users(self, user_ids: List[str]) -> Dict[str, int]:
        if not user_ids:
            return {}
        stmt = (
            select(ExportHistory.user_id, func.count())
            .where(col(ExportHistory.user_id).in_(user_ids))
            .group_by(ExportHistory.user_id)
        )
        return {user_id: int(total) for user_id, total in (await self.session.exec(stmt)).all()}

    async def apply(self, job: ExportHistory, **changes: Any) -> ExportHistory:
        """Set the given fields on ``job`` and commit."""
        for key, value in changes.items():
            setattr(job, key, value)
        return await self.update(job)
