"""
Admin dashboard service: statistics, user management, activity feed and
announcements.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from vibe_creator.core.database.base import utc_now
from vibe_creator.core.database.entities import Announcement, Subscription, User
from vibe_creator.core.database.repositories import (
    AnnouncementRepository,
    ExportRepository,
    PaymentRepository,
    ProjectRepository,
    SubscriptionRepository,
    UserRepository,
)
from vibe_creator.core.models.domain import SubscriptionTier
from vibe_creator.core.models.io.admin import (
    ActivityItem,
    AdminPagination,
    AdminStats,
    AdminUserDetail,
    AdminUserItem,
    AdminUserList,
    ExportStats,
    RevenueStats,
    UserStats,
)
from vibe_creator.core.models.io.announcements import AnnouncementCreate, AnnouncementUpdate
from vibe_creator.core.models.io.auth import SubscriptionSummary
from vibe_creator.core.models.io.exports import ExportHistoryItem
from vibe_creator.core.models.io.payments import PaymentRead
from vibe_creator.core.models.io.projects import ProjectRead
from vibe_creator.server.errors import ForbiddenError, NotFoundError

from .payment import PaymentService

logger = logging.getLogger(__name__)

RECENT_SIGNUP_DAYS = 7
RECENT_EXPORT_HOURS = 24
DETAIL_LIMIT = 10


class AdminService:
    def __init__(self, session: AsyncSession, *, payments: PaymentService) -> None:
        self.users = UserRepository(session)
        self.subscriptions = SubscriptionRepository(session)
        self.payments_repo = PaymentRepository(session)
        self.projects = ProjectRepository(session)
        self.exports = ExportRepository(session)
        self.announcements = AnnouncementRepository(session)
        self.payments = payments

    async def get_stats(self) -> AdminStats:
        now = utc_now()
        by_tier = await self.subscriptions.count_by_tier()
        revenue, paid_count = await self.payments_repo.paid_totals()
        return AdminStats(
            users=UserStats(
                total=await self.users.count(),
                recent=await self.users.count_since(now - timedelta(days=RECENT_SIGNUP_DAYS)),
                by_tier={tier.value.lower(): total for tier, total in by_tier.items()},
            ),
            projects=await self.projects.count(),
            exports=ExportStats(
                total=await self.exports.count(),
                recent=await self.exports.count_since(now - timedelta(hours=RECENT_EXPORT_HOURS)),
            ),
            revenue=RevenueStats(total=revenue, payments=paid_count),
        )

    async def list_users(self, page: int, limit: int, search: Optional[str] = None) -> AdminUserList:
        users, total = await self.users.search(search, limit, (page - 1) * limit)
        user_ids = [user.id for user in users]
        subscriptions = await self.subscriptions.get_for_users(user_ids)
        project_counts = await self.projects.count_by_users(user_ids)
        export_counts = await self.exports.count_by_users(user_ids)

        items = [
            _user_item(
                user,
                subscriptions.get(user.id),
                project_count=project_counts.get(user.id, 0),
                export_count=export_counts.get(user.id, 0),
            )
            for user in users
        ]
        pages = -(-total // limit) if limit else 0
        return AdminUserList(users=items, pagination=AdminPagination(page=page, limit=limit, total=total, pages=pages))

    async def get_user_detail(self, user_id: str) -> AdminUserDetail:
        user = await self._require_user(user_id)
        subscription = await self.subscriptions.get_by_user(user.id)
        projects = await self.projects.recent_for_user(user.id, DETAIL_LIMIT)
        exports = await self.exports.recent_for_user(user.id, DETAIL_LIMIT)
        payments = await self.payments_repo.list_for_user(user.id, DETAIL_LIMIT)

        item = _user_item(
            user,
            subscription,
            project_count=await self.projects.count({"user_id": user.id}),
            export_count=await self.exports.count({"user_id": user.id}),
        )
        return AdminUserDetail(
            **item.model_dump(),
            projects=[ProjectRead.model_validate(p) for p in projects],
            exports=[ExportHistoryItem.model_validate(e) for e in exports],
            payments=[PaymentRead.model_validate(p) for p in payments],
        )

    async def update_subscription(self, user_id: str, tier: SubscriptionTier, valid_days: int) -> Subscription:
        await self._require_user(user_id)
        subscription = await self.payments.upgrade_subscription(user_id, tier, valid_days=valid_days)
        logger.info(f"Subscription of user {user_id} set to {tier.value} by admin (valid_until={subscription.valid_until})")
        return subscription

    async def delete_user(self, admin: User, user_id: str) -> None:
        if admin.id == user_id:
            raise ForbiddenError("Admins cannot delete their own account")
        if not await self.users.delete_cascade(user_id):
            raise NotFoundError("User not found")
        logger.info(f"User {user_id} deleted by admin {admin.id}")

    async def recent_activity(self, limit: int) -> List[ActivityItem]:
        """Newest exports, payments and signups merged into one feed."""
        exports = await self.exports.recent(limit)
        payments = await self.payments_repo.recent(limit)
        signups = await self.users.recent(limit)
        owners = await self.users.get_many(list({e.user_id for e in exports} | {p.user_id for p in payments}))

        def owner_fields(user_id: str) -> dict:
            owner = owners.get(user_id)
            return {"user_name": owner.name if owner else None, "user_email": owner.email if owner else None}

        activity = [
            ActivityItem(
                type="export",
                id=e.id,
                user_id=e.user_id,
                description=f"Export {e.status.value.lower()}",
                created_at=e.created_at,
                **owner_fields(e.user_id),
            )
            for e in exports
        ]
        activity += [
            ActivityItem(
                type="payment",
                id=p.id,
                user_id=p.user_id,
                description=f"Payment Rp {p.amount:,} for {p.tier.value}",
                created_at=p.created_at,
                **owner_fields(p.user_id),
            )
            for p in payments
        ]
        activity += [
            ActivityItem(
                type="signup",
                id=u.id,
                user_id=u.id,
                user_name=u.name,
                user_email=u.email,
                description="New user registered",
                created_at=u.created_at,
            )
            for u in signups
        ]
        activity.sort(key=lambda item: item.created_at, reverse=True)
        return activity[:limit]

    # Announcements

    async def list_announcements(self) -> List[Announcement]:
        return await self.announcements.list_all()

    async def create_announcement(self, data: AnnouncementCreate) -> Announcement:
        announcement = await self.announcements.create(Announcement(**data.model_dump()))
        logger.info(f"Announcement {announcement.id} created: {announcement.title}")
        return announcement

    async def update_announcement(self, announcement_id: str, data: AnnouncementUpdate) -> Announcement:
        announcement = await self.announcements.get_by_id(announcement_id)
        if announcement is None:
            raise NotFoundError("Announcement not found")
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(announcement, key, value)
        announcement.updated_at = utc_now()
        return await self.announcements.update(announcement)

    async def delete_announcement(self, announcement_id: str) -> None:
        if not await self.announcements.delete(announcement_id):
            raise NotFoundError("Announcement not found")
        logger.info(f"Announcement {announcement_id} deleted")

    async def _require_user(self, user_id: str) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user


def _user_item(
    user: User, subscription: Optional[Subscription], *, project_count: int, export_count: int
) -> AdminUserItem:
    return AdminUserItem(
        id=user.id,
        email=user.email,
        name=user.name,
        avatar_url=user.avatar_url,
        role=user.role,
        created_at=user.created_at,
        subscription=SubscriptionSummary.model_validate(subscription) if subscription else None,
        project_count=project_count,
        export_count=export_count,
    )
