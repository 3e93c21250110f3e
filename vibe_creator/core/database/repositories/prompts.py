"""
Prompt and prompt version repositories.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from sqlalchemy import delete as sa_delete
from sqlalchemy import func
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from vibe_creator.core.models.domain.enums import PromptType

from ..entities.prompts import Prompt, PromptVersion
from .base import AsyncBaseRepository


class PromptRepository(AsyncBaseRepository[Prompt]):
    """Repository for prompts. Lookups are scoped to the owner."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Prompt)

    async def get_for_user(self, prompt_id: str, user_id: str) -> Optional[Prompt]:
        stmt = select(Prompt).where(Prompt.id == prompt_id, Prompt.user_id == user_id)
        return (await self.session.exec(stmt)).first()

    async def list_for_user(
        self, user_id: str, prompt_type: Optional[PromptType], limit: int, offset: int
    ) -> Tuple[List[Prompt], int]:
        """Page through a user's prompts, most recently updated first."""
        filters = {"user_id": user_id, "type": prompt_type}
        stmt = (
            select(Prompt)
            .where(Prompt.user_id == user_id)
            .order_by(col(Prompt.updated_at).desc())
            .limit(limit)
            .offset(offset)
        )
        if prompt_type is not None:
            stmt = stmt.where(Prompt.type == prompt_type)
        prompts = list((await self.session.exec(stmt)).all())
        return prompts, await self.count(filters)

    async def delete_with_versions(self, prompt: Prompt) -> None:
        await self.session.execute(sa_delete(PromptVersion).where(PromptVersion.prompt_id == prompt.id))
        await self.session.delete(prompt)
        await self.session.commit()


class PromptVersionRepository(AsyncBaseRepository[PromptVersion]):
    """Repository for immutable prompt versions."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PromptVersion)

    async def list_for_prompt(self, prompt_id: str) -> List[PromptVersion]:
        stmt = (
            select(PromptVersion)
            .where(PromptVersion.prompt_id == prompt_id)
            .order_by(col(PromptVersion.version).desc())
        )
        return list((await self.session.exec(stmt)).all())

    async def latest(self, prompt_id: str) -> Optional[PromptVersion]:
        stmt = (
            select(PromptVersion)
            .where(PromptVersion.prompt_id == prompt_id)
            .order_by(col(PromptVersion.version).desc())
            .limit(1)
        )
        return (await self.session.exec(stmt)).first()

    async def latest_for_prompts(self, prompt_ids: List[str]) -> Dict[str, PromptVersion]:
        """Latest version of each prompt, keyed by prompt id."""
        if not prompt_ids:
            return {}
        stmt = (
            select(PromptVersion)
            .where(col(PromptVersion.prompt_id).in_(prompt_ids))
            .order_by(col(PromptVersion.prompt_id), col(PromptVersion.version).desc())
        )
        latest: Dict[str, PromptVersion] = {}
        for version in (await self.session.exec(stmt)).all():
            latest.setdefault(version.prompt_id, version)
        return latest

    async def get_by_number(self, prompt_id: str, version: int) -> Optional[PromptVersion]:
        stmt = select(PromptVersion).where(PromptVersion.prompt_id == prompt_id, PromptVersion.version == version)
        return (await self.session.exec(stmt)).first()

    async def next_version_number(self, prompt_id: str) -> int:
        stmt = select(func.max(PromptVersion.version)).where(PromptVersion.prompt_id == prompt_id)
        current = (await self.session.exec(stmt)).one()
        return (current or 0) + 1
