"""
Prompt I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from vibe_creator.core.models.domain.enums import PromptType

from ..base import CamelSchema


class PromptCreate(CamelSchema):
    type: PromptType
    title: str = Field(min_length=1, max_length=200)
    input_data: Dict[str, Any]


class PromptVersionCreate(CamelSchema):
    input_data: Dict[str, Any]
    user_notes: Optional[str] = None


class PromptUpdate(CamelSchema):
    title: str = Field(min_length=1, max_length=200)


class PromptVersionRead(CamelSchema):
    id: str
    prompt_id: str
    version: int
    input_data: Dict[str, Any]
    generated_prompt: str
    user_notes: Optional[str] = None
    created_at: datetime


class PromptRead(CamelSchema):
    id: str
    user_id: str
    type: PromptType
    title: str
    current_version_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PromptListItem(PromptRead):
    current_version: int = 0
    last_generated_prompt: Optional[str] = None


class PromptDetail(PromptRead):
    versions: List[PromptVersionRead] = Field(default_factory=list)


class PromptCreated(PromptRead):
    version: PromptVersionRead
    generated_prompt: str


class RegeneratedPrompt(CamelSchema):
    generated_prompt: str
