"""
Project service: editing projects, their saved timeline and media assets.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from sqlmodel.ext.asyncio.session import AsyncSession

from vibe_creator.core.database.base import utc_now
from vibe_creator.core.database.entities import Project, ProjectAsset, User
from vibe_creator.core.database.entities.projects import default_project_settings
from vibe_creator.core.database.repositories import ProjectAssetRepository, ProjectRepository
from vibe_creator.core.models.domain import EditorTimeline
from vibe_creator.core.models.io.common import PaginationMeta
from vibe_creator.core.models.io.projects import (
    AssetCreate,
    AssetRead,
    ProjectCreate,
    ProjectDetail,
    ProjectListItem,
    ProjectRead,
    ProjectUpdate,
)
from vibe_creator.server.errors import NotFoundError, ValidationFailedError

from .storage import LocalStorage

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, session: AsyncSession, *, storage: LocalStorage) -> None:
        self.projects = ProjectRepository(session)
        self.assets = ProjectAssetRepository(session)
        self.storage = storage

    async def _require(self, user: User, project_id: str) -> Project:
        project = await self.projects.get_for_user(project_id, user.id)
        if project is None:
            raise NotFoundError("Project not found")
        return project

    async def list_projects(self, user: User, page: int, limit: int) -> Tuple[List[ProjectListItem], PaginationMeta]:
        projects, total = await self.projects.list_for_user(user.id, limit, (page - 1) * limit)
        counts = await self.assets.count_by_projects([p.id for p in projects])
        items = [
            ProjectListItem(**ProjectRead.model_validate(p).model_dump(), asset_count=counts.get(p.id, 0))
            for p in projects
        ]
        return items, PaginationMeta.build(page, limit, total)

    async def get_detail(self, user: User, project_id: str) -> ProjectDetail:
        project = await self._require(user, project_id)
        assets = await self.assets.list_for_project(project.id)
        return ProjectDetail(
            **ProjectRead.model_validate(project).model_dump(),
            assets=[AssetRead.model_validate(a) for a in assets],
        )

    async def create_project(self, user: User, data: ProjectCreate) -> Project:
        settings = default_project_settings()
        if data.settings is not None:
            settings.update(data.settings.model_dump(by_alias=True, exclude_none=True))
        project = await self.projects.create(
            Project(user_id=user.id, title=data.title, description=data.description, settings=settings)
        )
        logger.info(f"Project {project.id} created by user {user.id}")
        return project

    async def update_project(self, user: User, project_id: str, data: ProjectUpdate) -> Project:
        project = await self._require(user, project_id)
        changes = data.model_dump(exclude_unset=True, exclude={"settings"})
        for key, value in changes.items():
            if key in ("title", "status") and value is None:
                continue
            setattr(project, key, value)
        if data.settings is not None:
            project.settings = {**project.settings, **data.settings.model_dump(by_alias=True, exclude_none=True)}
        project.updated_at = utc_now()
        return await self.projects.update(project)

    async def delete_project(self, user: User, project_id: str) -> None:
        project = await self._require(user, project_id)
        await self.projects.delete_with_assets(project)
        logger.info(f"Project {project_id} deleted by user {user.id}")

    async def save_timeline(self, user: User, project_id: str, timeline: EditorTimeline) -> Project:
        """Store the editor timeline after recomputing its duration.

        Raises:
            ValidationFailedError: When the timeline is longer than the
                project's ``maxDurationMs``.
        """
        project = await self._require(user, project_id)
        duration = timeline.recalculate_duration()
        max_duration = int(project.settings.get("maxDurationMs", default_project_settings()["maxDurationMs"]))
        if duration > max_duration:
            raise ValidationFailedError(
                "Timeline exceeds the maximum project duration",
                details={"durationMs": duration, "maxDurationMs": max_duration},
            )
        project.timeline_data = timeline.model_dump(by_alias=True, mode="json")
        project.updated_at = utc_now()
        return await self.projects.update(project)

    async def add_asset(self, user: User, project_id: str, data: AssetCreate) -> ProjectAsset:
        project = await self._require(user, project_id)
        path = self.storage.resolve(data.storage_key)
        asset = await self.assets.create(
            ProjectAsset(
                project_id=project.id,
                type=data.type,
                name=data.name,
                source_url=data.source_url,
                storage_key=path.relative_to(self.storage.root).as_posix(),
                asset_metadata=data.metadata,
            )
        )
        project.updated_at = utc_now()
        await self.projects.update(project)
        return asset

    async def remove_asset(self, user: User, project_id: str, asset_id: str) -> None:
        project = await self._require(user, project_id)
        asset = await self.assets.get_for_project(asset_id, project.id)
        if asset is None:
            raise NotFoundError("Asset not found")
        await self.assets.delete(asset.id)
