"""Shared pydantic base for API-facing schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelSchema(BaseModel):
    """Schema serialised with camelCase keys.

    Input is accepted in either camelCase or snake_case.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
