"""
Prompt service: versioned creative briefs rendered through the prompt builder.

Every change of a prompt's inputs is stored as a new immutable version; the
prompt itself only tracks its title and the id of its current version.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlmodel.ext.asyncio.session import AsyncSession

from vibe_creator.core.database.base import utc_now
from vibe_creator.core.database.entities import Prompt, PromptVersion, User
from vibe_creator.core.database.repositories import PromptRepository, PromptVersionRepository
from vibe_creator.core.models.domain.enums import PromptType
from vibe_creator.core.models.io.common import PaginationMeta
from vibe_creator.core.models.io.prompts import (
    PromptCreate,
    PromptCreated,
    PromptDetail,
    PromptListItem,
    PromptRead,
    PromptVersionCreate,
    PromptVersionRead,
)
from vibe_creator.prompt_builder import PromptBuilder
from vibe_creator.server.errors import NotFoundError

logger = logging.getLogger(__name__)


class PromptService:
    def __init__(self, session: AsyncSession, *, builder: Optional[PromptBuilder] = None) -> None:
        self.prompts = PromptRepository(session)
        self.versions = PromptVersionRepository(session)
        self.builder = builder or PromptBuilder()

    async def _require(self, user: User, prompt_id: str) -> Prompt:
        prompt = await self.prompts.get_for_user(prompt_id, user.id)
        if prompt is None:
            raise NotFoundError("Prompt not found")
        return prompt

    async def list_prompts(
        self, user: User, prompt_type: Optional[PromptType], page: int, limit: int
    ) -> Tuple[List[PromptListItem], PaginationMeta]:
        prompts, total = await self.prompts.list_for_user(user.id, prompt_type, limit, (page - 1) * limit)
        latest = await self.versions.latest_for_prompts([p.id for p in prompts])
        items = []
        for prompt in prompts:
            version = latest.get(prompt.id)
            items.append(
                PromptListItem(
                    **PromptRead.model_validate(prompt).model_dump(),
                    current_version=version.version if version else 0,
                    last_generated_prompt=version.generated_prompt if version else None,
                )
            )
        return items, PaginationMeta.build(page, limit, total)

    async def get_detail(self, user: User, prompt_id: str) -> PromptDetail:
        prompt = await self._require(user, prompt_id)
        versions = await self.versions.list_for_prompt(prompt.id)
        return PromptDetail(
            **PromptRead.model_validate(prompt).model_dump(),
            versions=[PromptVersionRead.model_validate(v) for v in versions],
        )

    async def _store_version(
        self, prompt: Prompt, number: int, input_data: Dict[str, Any], user_notes: Optional[str] = None
    ) -> PromptVersion:
        version = await self.versions.create(
            PromptVersion(
                prompt_id=prompt.id,
                version=number,
                input_data=input_data,
                generated_prompt=self.builder.generate(prompt.type, input_data),
                user_notes=user_notes,
            )
        )
        prompt.current_version_id = version.id
        prompt.updated_at = utc_now()
        await self.prompts.update(prompt)
        return version

    async def create_prompt(self, user: User, data: PromptCreate) -> PromptCreated:
        prompt = await self.prompts.create(Prompt(user_id=user.id, type=data.type, title=data.title))
        version = await self._store_version(prompt, 1, data.input_data)
        logger.info(f"Prompt {prompt.id} ({prompt.type.value}) created by user {user.id}")
        return PromptCreated(
            **PromptRead.model_validate(prompt).model_dump(),
            version=PromptVersionRead.model_validate(version),
            generated_prompt=version.generated_prompt,
        )

    async def add_version(self, user: User, prompt_id: str, data: PromptVersionCreate) -> PromptVersion:
        prompt = await self._require(user, prompt_id)
        number = await self.versions.next_version_number(prompt.id)
        return await self._store_version(prompt, number, data.input_data, data.user_notes)

    async def get_version(self, user: User, prompt_id: str, number: int) -> PromptVersion:
        prompt = await self._require(user, prompt_id)
        version = await self.versions.get_by_number(prompt.id, number)
        if version is None:
            raise NotFoundError("Prompt version not found")
        return version

    async def rename(self, user: User, prompt_id: str, title: str) -> Prompt:
        prompt = await self._require(user, prompt_id)
        prompt.title = title
        prompt.updated_at = utc_now()
        return await self.prompts.update(prompt)

    async def delete_prompt(self, user: User, prompt_id: str) -> None:
        prompt = await self._require(user, prompt_id)
        await self.prompts.delete_with_versions(prompt)

    async def regenerate(self, user: User, prompt_id: str) -> str:
        """Render the latest version's input again without storing a new version."""
        prompt = await self._require(user, prompt_id)
        latest = await self.versions.latest(prompt.id)
        if latest is None:
            raise NotFoundError("No versions found")
        return self.builder.generate(prompt.type, latest.input_data)
