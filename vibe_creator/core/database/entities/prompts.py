"""
Prompt and prompt version entity models.

A prompt is a named brief of a given type. Every edit of its inputs creates a
new immutable version holding the generated text.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Column, Text, UniqueConstraint
from sqlmodel import Field

from vibe_creator.core.models.domain.enums import PromptType

from ..base import Base, new_id, utc_now
from ._types import JSONType, UTCDateTime


class Prompt(Base, table=True):
    """Table: prompts"""

    __tablename__ = "prompts"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=36)
    type: PromptType
    title: str = Field(max_length=200)
    current_version_id: Optional[str] = Field(default=None, max_length=36)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Prompt(id={self.id}, type={self.type}, title={self.title})"


class PromptVersion(Base, table=True):
    """Table: prompt_versions"""

    __tablename__ = "prompt_versions"
    __table_args__ = (UniqueConstraint("prompt_id", "version", name="uq_prompt_versions_prompt_version"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    prompt_id: str = Field(foreign_key="prompts.id", index=True, max_length=36)
    version: int = Field(ge=1)
    input_data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSONType, nullable=False))
    generated_prompt: str = Field(sa_column=Column(Text, nullable=False))
    user_notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"PromptVersion(prompt_id={self.prompt_id}, version={self.version})"
