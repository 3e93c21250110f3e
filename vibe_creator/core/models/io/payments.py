"""
Payment and subscription I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field

from vibe_creator.core.models.domain.enums import PaymentStatus, SubscriptionStatus, SubscriptionTier

from ..base import CamelSchema


class CreateInvoiceRequest(CamelSchema):
    tier: SubscriptionTier


class InvoiceData(CamelSchema):
    invoice_url: str
    payment_id: str


class XenditWebhookPayload(CamelSchema):
    """Invoice callback body. Xendit sends snake_case keys."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    external_id: Optional[str] = None
    status: str
    payment_method: Optional[str] = None
    paid_at: Optional[datetime] = None


class MockConfirmRequest(CamelSchema):
    payment_id: str


class SubscriptionRead(CamelSchema):
    id: str
    user_id: str
    tier: SubscriptionTier
    status: SubscriptionStatus
    exports_used: int
    exports_limit: int
    valid_until: Optional[datetime] = None
    price: int = 0
    is_unlimited: bool = False


class PaymentRead(CamelSchema):
    id: str
    amount: int
    tier: SubscriptionTier
    status: PaymentStatus
    xendit_invoice_id: Optional[str] = None
    payment_method: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: datetime


class PaymentHistoryData(CamelSchema):
    payments: List[PaymentRead] = Field(default_factory=list)


class UseExportData(CamelSchema):
    allowed: bool
    remaining: int
