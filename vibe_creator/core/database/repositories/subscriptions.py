"""
Subscription and payment repositories.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy import update as sa_update
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from vibe_creator.core.models.domain.enums import PaymentStatus, SubscriptionTier

from ..entities.subscriptions import PaymentHistory, Subscription
from .base import AsyncBaseRepository


class SubscriptionRepository(AsyncBaseRepository[Subscription]):
    """Repository for per-user subscriptions."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Subscription)

    async def get_by_user(self, user_id: str) -> Optional[Subscription]:
        result = await self.session.exec(select(Subscription).where(Subscription.user_id == user_id))
        return result.first()

    async def get_for_users(self, user_ids: List[str]) -> Dict[str, Subscription]:
        if not user_ids:
            return {}
        result = await self.session.exec(select(Subscription).where(col(Subscription.user_id).in_(user_ids)))
        return {sub.user_id: sub for sub in result.all()}

    async def count_by_tier(self) -> Dict[SubscriptionTier, int]:
        stmt = select(Subscription.tier, func.count()).group_by(Subscription.tier)
        rows = (await self.session.exec(stmt)).all()
        counts = {tier: 0 for tier in SubscriptionTier}
        for tier, total in rows:
            counts[SubscriptionTier(tier)] = int(total)
        return counts

    async def consume_export(self, subscription: Subscription) -> bool:
        """Atomically add one to ``exports_used`` while usage is below the limit.

        The check and the increment run as one conditional UPDATE so concurrent
        callers can never push usage past the limit. ``subscription`` is
        refreshed afterwards.

        Returns:
            True if a row was updated, False if the quota was already used up
        """
        stmt = (
            sa_update(Subscription)
            .where(col(Subscription.id) == subscription.id)
            .where(col(Subscription.exports_used) < col(Subscription.exports_limit))
            .values(exports_used=col(Subscription.exports_used) + 1)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        await self.session.refresh(subscription)
        return result.rowcount > 0


class PaymentRepository(AsyncBaseRepository[PaymentHistory]):
    """Repository for payment history records."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PaymentHistory)

    async def get_by_invoice_id(self, invoice_id: str) -> Optional[PaymentHistory]:
        result = await self.session.exec(select(PaymentHistory).where(PaymentHistory.xendit_invoice_id == invoice_id))
        return result.first()

    async def list_for_user(self, user_id: str, limit: int) -> List[PaymentHistory]:
        stmt = (
            select(PaymentHistory)
            .where(PaymentHistory.user_id == user_id)
            .order_by(col(PaymentHistory.created_at).desc())
            .limit(limit)
        )
        return list((await self.session.exec(stmt)).all())

    async def recent(self, limit: int) -> List[PaymentHistory]:
        stmt = select(PaymentHistory).order_by(col(PaymentHistory.created_at).desc()).limit(limit)
        return list((await self.session.exec(stmt)).all())

    async def paid_totals(self) -> Tuple[int, int]:
        """Return the summed amount and the number of paid payments."""
        stmt = select(func.coalesce(func.sum(PaymentHistory.amount), 0), func.count()).where(
            PaymentHistory.status == PaymentStatus.PAID
        )
        total, count = (await self.session.exec(stmt)).one()
        return int(total), int(count)

    async def mark_status(
        self,
        payment: PaymentHistory,
        status: PaymentStatus,
        *,
        payment_method: Optional[str] = None,
        paid_at: Optional[datetime] = None,
    ) -> PaymentHistory:
        payment.status = status
        if payment_method is not None:
            payment.payment_method = payment_method
        if paid_at is not None:
            payment.paid_at = paid_at
        return await self.update(payment)
