"""
User and session repositories.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, or_
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.exports import ExportHistory
from ..entities.projects import Project, ProjectAsset
from ..entities.prompts import Prompt, PromptVersion
from ..entities.subscriptions import PaymentHistory, Subscription
from ..entities.users import User, UserSession
from .base import AsyncBaseRepository, AsyncQueryBuilder


class UserRepository(AsyncBaseRepository[User]):
    """Repository for user accounts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.exec(select(User).where(User.email == email))
        return result.first()

    async def search(self, search: Optional[str], limit: int, offset: int) -> Tuple[List[User], int]:
        """Page through users, newest first, optionally matching email or name.

        Matching is case-insensitive and partial.

        Returns:
            The page of users and the total number of matches
        """
        stmt = select(User)
        count_stmt = select(func.count()).select_from(User)
        if search:
            pattern = f"%{search.lower()}%"
            condition = or_(func.lower(User.email).like(pattern), func.lower(User.name).like(pattern))
            stmt = stmt.where(condition)
            count_stmt = count_stmt.where(condition)
        stmt = AsyncQueryBuilder.apply_pagination(stmt.order_by(col(User.created_at).desc()), limit, offset)

        users = list((await self.session.exec(stmt)).all())
        total = int((await self.session.exec(count_stmt)).one())
        return users, total

    async def get_many(self, user_ids: List[str]) -> Dict[str, User]:
        if not user_ids:
            return {}
        result = await self.session.exec(select(User).where(col(User.id).in_(user_ids)))
        return {user.id: user for user in result.all()}

    async def count_since(self, since: datetime) -> int:
        stmt = select(func.count()).select_from(User).where(User.created_at >= since)
        return int((await self.session.exec(stmt)).one())

    async def recent(self, limit: int) -> List[User]:
        stmt = select(User).order_by(col(User.created_at).desc()).limit(limit)
        return list((await self.session.exec(stmt)).all())

    async def delete_cascade(self, user_id: str) -> bool:
        """Delete a user together with everything they own.

        Returns:
            True if the user existed
        """
        user = await self.get_by_id(user_id)
        if user is None:
            return False

        project_ids = select(Project.id).where(Project.user_id == user_id)
        prompt_ids = select(Prompt.id).where(Prompt.user_id == user_id)

        await self.session.execute(sa_delete(ProjectAsset).where(col(ProjectAsset.project_id).in_(project_ids)))
        await self.session.execute(sa_delete(PromptVersion).where(col(PromptVersion.prompt_id).in_(prompt_ids)))
        for model in (Project, Prompt, ExportHistory, PaymentHistory, Subscription, UserSession):
            await self.session.execute(sa_delete(model).where(model.user_id == user_id))
        await self.session.delete(user)
        await self.session.commit()
        return True


class UserSessionRepository(AsyncBaseRepository[UserSession]):
    """Repository for login sessions."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserSession)

    async def get_by_token(self, token: str) -> Optional[UserSession]:
        result = await self.session.exec(select(UserSession).where(UserSession.token == token))
        return result.first()

    async def get_by_refresh_token(self, refresh_token: str) -> Optional[UserSession]:
        result = await self.session.exec(select(UserSession).where(UserSession.refresh_token == refresh_token))
        return result.first()

    async def delete_for_user(self, user_id: str) -> None:
        await self.session.execute(sa_delete(UserSession).where(UserSession.user_id == user_id))
        await self.session.commit()
