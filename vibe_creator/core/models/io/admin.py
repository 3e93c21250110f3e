"""
Admin dashboard I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import Field

from vibe_creator.core.models.domain.enums import SubscriptionTier, UserRole

from ..base import CamelSchema
from .auth import SubscriptionSummary
from .exports import ExportHistoryItem
from .payments import PaymentRead
from .projects import ProjectRead


class UserStats(CamelSchema):
    total: int
    recent: int
    by_tier: Dict[str, int]


class ExportStats(CamelSchema):
    total: int
    recent: int


class RevenueStats(CamelSchema):
    total: int
    payments: int


class AdminStats(CamelSchema):
    users: UserStats
    projects: int
    exports: ExportStats
    revenue: RevenueStats


class AdminUserItem(CamelSchema):
    id: str
    email: str
    name: str
    avatar_url: Optional[str] = None
    role: UserRole
    created_at: datetime
    subscription: Optional[SubscriptionSummary] = None
    project_count: int = 0
    export_count: int = 0


class AdminPagination(CamelSchema):
    page: int
    limit: int
    total: int
    pages: int


class AdminUserList(CamelSchema):
    users: List[AdminUserItem]
    pagination: AdminPagination


class AdminUserDetail(AdminUserItem):
    projects: List[ProjectRead] = Field(default_factory=list)
    exports: List[ExportHistoryItem] = Field(default_factory=list)
    payments: List[PaymentRead] = Field(default_factory=list)


class SubscriptionUpdateRequest(CamelSchema):
    tier: SubscriptionTier
    valid_days: int = Field(default=30, gt=0)


class ActivityItem(CamelSchema):
    type: Literal["export", "payment", "signup"]
    id: str
    user_id: str
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    description: str
    created_at: datetime
