"""
Subscription and payment entity models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from vibe_creator.core.models.domain.enums import (
    PaymentStatus,
    SubscriptionStatus,
    SubscriptionTier,
)
from vibe_creator.core.models.domain.tiers import export_limit_for, is_unlimited

from ..base import Base, new_id, utc_now
from ._types import UTCDateTime


class Subscription(Base, table=True):
    """A user's current plan and export quota for the billing period.

    Table: subscriptions
    """

    __tablename__ = "subscriptions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", unique=True, index=True, max_length=36)
    tier: SubscriptionTier = Field(default=SubscriptionTier.FREE)
    status: SubscriptionStatus = Field(default=SubscriptionStatus.ACTIVE)
    exports_used: int = Field(default=0, ge=0)
    exports_limit: int = Field(default_factory=lambda: export_limit_for(SubscriptionTier.FREE), ge=0)
    valid_until: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    @property
    def unlimited(self) -> bool:
        return is_unlimited(self.exports_limit)

    def __repr__(self) -> str:
        return f"Subscription(user_id={self.user_id}, tier={self.tier}, used={self.exports_used}/{self.exports_limit})"


class PaymentHistory(Base, table=True):
    """A tier purchase, tracked from invoice creation to settlement.

    Table: payment_history
    """

    __tablename__ = "payment_history"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=36)
    amount: int = Field(ge=0, description="Amount in IDR")
    tier: SubscriptionTier
    status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    xendit_invoice_id: Optional[str] = Field(default=None, max_length=128, index=True)
    payment_method: Optional[str] = Field(default=None, max_length=64)
    paid_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"PaymentHistory(id={self.id}, tier={self.tier}, status={self.status})"
