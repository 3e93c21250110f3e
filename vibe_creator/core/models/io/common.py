"""
Response envelope shared by every API endpoint.

Successful responses carry ``{"success": true, "data": ..., "meta": ...}``;
failures carry ``{"success": false, "error": {"code", "message", "details"}}``.
"""

from __future__ import annotations

import math
from typing import Any, Generic, Optional, TypeVar

from pydantic import Field

from ..base import CamelSchema

T = TypeVar("T")


class PaginationMeta(CamelSchema):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit) if limit else 0)


class ApiResponse(CamelSchema, Generic[T]):
    """Success envelope."""

    success: bool = True
    data: T
    meta: Optional[PaginationMeta] = None


class ErrorBody(CamelSchema):
    code: str
    message: str
    details: Optional[Any] = None


class ErrorResponse(CamelSchema):
    """Failure envelope."""

    success: bool = False
    error: ErrorBody


class MessageData(CamelSchema):
    message: str


class PageParams(CamelSchema):
    """Validated page/limit pair."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
