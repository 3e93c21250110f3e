"""
Project and asset repositories.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..entities.projects import Project, ProjectAsset
from .base import AsyncBaseRepository


class ProjectRepository(AsyncBaseRepository[Project]):
    """Repository for editing projects. Lookups are scoped to the owner."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Project)

    async def get_for_user(self, project_id: str, user_id: str) -> Optional[Project]:
        stmt = select(Project).where(Project.id == project_id, Project.user_id == user_id)
        return (await self.session.exec(stmt)).first()

    async def list_for_user(self, user_id: str, limit: int, offset: int) -> Tuple[List[Project], int]:
        """Page through a user's projects, most recently updated first."""
        stmt = (
            select(Project)
            .where(Project.user_id == user_id)
            .order_by(col(Project.updated_at).desc())
            .limit(limit)
            .offset(offset)
        )
        projects = list((await self.session.exec(stmt)).all())
        total = await self.count({"user_id": user_id})
        return projects, total

    async def recent_for_user(self, user_id: str, limit: int) -> List[Project]:
        stmt = select(Project).where(Project.user_id == user_id).order_by(col(Project.created_at).desc()).limit(limit)
        return list((await self.session.exec(stmt)).all())

    async def count_by_users(self, user_ids: List[str]) -> Dict[str, int]:
        if not user_ids:
            return {}
        stmt = (
            select(Project.user_id, func.count())
            .where(col(Project.user_id).in_(user_ids))
            .group_by(Project.user_id)
        )
        return {user_id: int(total) for user_id, total in (await self.session.exec(stmt)).all()}

    async def delete_with_assets(self, project: Project) -> None:
        assets = await self.session.exec(select(ProjectAsset).where(ProjectAsset.project_id == project.id))
        for asset in assets.all():
            await self.session.delete(asset)
        await self.session.delete(project)
        await self.session.commit()


class ProjectAssetRepository(AsyncBaseRepository[ProjectAsset]):
    """Repository for project media assets."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProjectAsset)

    async def list_for_project(self, project_id: str) -> List[ProjectAsset]:
        stmt = (
            select(ProjectAsset)
            .where(ProjectAsset.project_id == project_id)
            .order_by(col(ProjectAsset.created_at).desc())
        )
        return list((await self.session.exec(stmt)).all())

    async def get_for_project(self, asset_id: str, project_id: str) -> Optional[ProjectAsset]:
        stmt = select(ProjectAsset).where(ProjectAsset.id == asset_id, ProjectAsset.project_id == project_id)
        return (await self.session.exec(stmt)).first()

    async def count_by_projects(self, project_ids: List[str]) -> Dict[str, int]:
        if not project_ids:
            return {}
        stmt = (
            select(ProjectAsset.project_id, func.count())
            .where(col(ProjectAsset.project_id).in_(project_ids))
            .group_by(ProjectAsset.project_id)
        )
        return {project_id: int(total) for project_id, total in (await self.session.exec(stmt)).all()}
