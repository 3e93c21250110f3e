"""
Subscription and payment service.

Invoices are created on Xendit; Xendit later reports settlement through the
webhook, which upgrades the buyer's subscription. Without a Xendit secret key
invoices are mocked so the whole flow can be exercised locally through the
mock confirmation endpoint.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import httpx
from sqlmodel.ext.asyncio.session import AsyncSession

from vibe_creator.core.database.base import utc_now
from vibe_creator.core.database.entities import PaymentHistory, Subscription, User
from vibe_creator.core.database.repositories import PaymentRepository, SubscriptionRepository
from vibe_creator.core.models.domain import PaymentStatus, SubscriptionStatus, SubscriptionTier
from vibe_creator.core.models.domain.tiers import export_limit_for, price_for
from vibe_creator.core.models.io.payments import (
    InvoiceData,
    SubscriptionRead,
    UseExportData,
    XenditWebhookPayload,
)
from vibe_creator.core.monitoring import log_payment_event
from vibe_creator.server.core import constant
from vibe_creator.server.core.config import XenditConfig, settings
from vibe_creator.server.errors import (
    ErrorCode,
    ForbiddenError,
    NotFoundError,
    PaymentGatewayError,
    QuotaExceededError,
    UnauthorizedError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

SUBSCRIPTION_DAYS = 30
INVOICE_DURATION_SECONDS = 24 * 60 * 60


class XenditGateway:
    """
    Thin HTTP client for the Xendit invoice API.

    Only invoice creation is needed; settlement arrives through the webhook.
    """

    def __init__(
        self,
        config: XenditConfig,
        *,
        frontend_url: str,
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config
        self.frontend_url = frontend_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.config.secret_key)

    async def create_invoice(
        self, *, external_id: str, amount: int, payer_email: str, description: str
    ) -> Dict[str, Any]:
        """Create an IDR invoice and return Xendit's invoice object.

        Raises:
            PaymentGatewayError: When Xendit is unreachable or rejects the request.
        """
        body = {
            "external_id": external_id,
            "amount": amount,
            "currency": "IDR",
            "payer_email": payer_email,
            "description": description,
            "invoice_duration": INVOICE_DURATION_SECONDS,
            "success_redirect_url": f"{self.frontend_url}/dashboard/settings?payment=success",
            "failure_redirect_url": f"{self.frontend_url}/dashboard/settings?payment=failed",
        }
        url = f"{self.config.api_url.rstrip('/')}/v2/invoices"
        auth = (self.config.secret_key or "", "")
        try:
            logger.debug(f"XenditGateway.create_invoice: POST {url} external_id={external_id}")
            if self._client is not None:
                response = await self._client.post(url, json=body, auth=auth)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=body, auth=auth)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Xendit invoice creation failed: {e.response.status_code} {e.response.text}")
            raise PaymentGatewayError(
                "Failed to create invoice",
                details={"statusCode": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Xendit invoice request failed: {e}")
            raise PaymentGatewayError("Failed to create invoice") from e
        return response.json()


def get_xendit_gateway() -> XenditGateway:
    return XenditGateway(settings.xendit, frontend_url=settings.frontend_url)


def apply_tier(subscription: Subscription, tier: SubscriptionTier, valid_until: Optional[datetime]) -> Subscription:
    """Put ``subscription`` on ``tier`` with a fresh export allowance."""
    subscription.tier = tier
    subscription.status = SubscriptionStatus.ACTIVE
    subscription.exports_used = 0
    subscription.exports_limit = export_limit_for(tier)
    subscription.valid_until = valid_until
    return subscription


def to_subscription_read(subscription: Subscription) -> SubscriptionRead:
    data = SubscriptionRead.model_validate(subscription)
    data.price = price_for(subscription.tier)
    data.is_unlimited = subscription.unlimited
    return data


class PaymentService:
    """Subscription quota and Xendit payment handling."""

    def __init__(self, session: AsyncSession, *, gateway: Optional[XenditGateway] = None) -> None:
        self.subscriptions = SubscriptionRepository(session)
        self.payments = PaymentRepository(session)
        self.gateway = gateway or get_xendit_gateway()

    async def get_subscription(self, user_id: str) -> Subscription:
        """Return the user's subscription, creating or downgrading it as needed.

        Users without a subscription get a FREE one. A subscription whose
        ``valid_until`` has passed drops back to FREE with status EXPIRED.
        """
        subscription = await self.subscriptions.get_by_user(user_id)
        if subscription is None:
            subscription = await self.subscriptions.create(Subscription(user_id=user_id))
            logger.info(f"Created FREE subscription for user {user_id}")

        if subscription.valid_until is not None and subscription.valid_until < utc_now():
            logger.info(f"Subscription of user {user_id} expired, downgrading to FREE")
            subscription.tier = SubscriptionTier.FREE
            subscription.status = SubscriptionStatus.EXPIRED
            subscription.exports_limit = export_limit_for(SubscriptionTier.FREE)
            subscription.valid_until = None
            subscription = await self.subscriptions.update(subscription)
        return subscription

    async def use_export(self, user_id: str) -> UseExportData:
        """Consume one export from the user's quota.

        Raises:
            QuotaExceededError: When the quota for the period is exhausted.
        """
        subscription = await self.get_subscription(user_id)
        if subscription.unlimited:
            return UseExportData(allowed=True, remaining=-1)
        if not await self.subscriptions.consume_export(subscription):
            raise QuotaExceededError()
        return UseExportData(allowed=True, remaining=subscription.exports_limit - subscription.exports_used)

    async def upgrade_subscription(
        self, user_id: str, tier: SubscriptionTier, *, valid_days: Optional[int] = SUBSCRIPTION_DAYS
    ) -> Subscription:
        """Move the user onto ``tier``, resetting usage for the new period.

        FREE never expires; paid tiers stay valid for ``valid_days``.
        """
        valid_until = None
        if tier != SubscriptionTier.FREE and valid_days:
            valid_until = utc_now() + timedelta(days=valid_days)

        subscription = await self.subscriptions.get_by_user(user_id)
        if subscription is None:
            subscription = Subscription(user_id=user_id)
        return await self.subscriptions.update(apply_tier(subscription, tier, valid_until))

    async def create_invoice(self, user: User, tier: SubscriptionTier) -> InvoiceData:
        if tier == SubscriptionTier.FREE:
            raise ValidationFailedError("Invalid tier or free tier selected")

        amount = price_for(tier)
        payment = await self.payments.create(PaymentHistory(user_id=user.id, amount=amount, tier=tier))

        if not self.gateway.configured:
            logger.warning("XENDIT_SECRET_KEY not configured, using mock invoice")
            payment.xendit_invoice_id = f"mock-{payment.id}"
            await self.payments.update(payment)
            return InvoiceData(invoice_url=f"/payment/mock?paymentId={payment.id}", payment_id=payment.id)

        invoice = await self.gateway.create_invoice(
            external_id=f"payment-{user.id}-{int(time.time() * 1000)}",
            amount=amount,
            payer_email=user.email,
            description=f"{constant.PROJECT_NAME} - {tier.value} Subscription",
        )
        payment.xendit_invoice_id = invoice["id"]
        await self.payments.update(payment)
        logger.info(f"Invoice {invoice['id']} created for payment {payment.id}")
        return InvoiceData(invoice_url=invoice["invoice_url"], payment_id=payment.id)

    def verify_callback_token(self, token: Optional[str]) -> None:
        expected = self.gateway.config.webhook_token
        if expected and token != expected:
            raise UnauthorizedError("Invalid webhook token", code=ErrorCode.INVALID_TOKEN)

    async def handle_webhook(self, payload: XenditWebhookPayload) -> None:
        logger.info(f"Webhook received: invoice={payload.id} status={payload.status}")
        payment = await self.payments.get_by_invoice_id(payload.id)
        if payment is None:
            logger.warning(f"Payment not found for invoice {payload.id}")
            return

        if payload.status == PaymentStatus.PAID.value:
            await self.payments.mark_status(
                payment,
                PaymentStatus.PAID,
                payment_method=payload.payment_method,
                paid_at=payload.paid_at or utc_now(),
            )
            await self.upgrade_subscription(payment.user_id, payment.tier)
            logger.info(f"Payment {payment.id} settled, user {payment.user_id} upgraded to {payment.tier.value}")
        elif payload.status in (PaymentStatus.EXPIRED.value, PaymentStatus.FAILED.value):
            await self.payments.mark_status(payment, PaymentStatus(payload.status))
        else:
            logger.debug(f"Ignoring webhook status {payload.status} for payment {payment.id}")
            return
        log_payment_event(payment.id, payment.status.value, payment.tier.value, payment.amount)

    async def confirm_mock_payment(self, user: User, payment_id: str) -> None:
        if settings.is_production:
            raise ForbiddenError("Not available in production")

        payment = await self.payments.get_by_id(payment_id)
        if payment is None or (payment.user_id != user.id and not user.is_admin):
            raise NotFoundError("Payment not found")

        await self.payments.mark_status(payment, PaymentStatus.PAID, payment_method="MOCK", paid_at=utc_now())
        await self.upgrade_subscription(payment.user_id, payment.tier)
        log_payment_event(payment.id, PaymentStatus.PAID.value, payment.tier.value, payment.amount)
        logger.info(f"Mock payment {payment.id} confirmed")

    async def history(self, user_id: str) -> List[PaymentHistory]:
        return await self.payments.list_for_user(user_id, constant.PAYMENT_HISTORY_LIMIT)
