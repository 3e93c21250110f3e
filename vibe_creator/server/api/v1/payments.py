"""
Payment Endpoints.

Subscription upgrades are paid through Xendit invoices. The webhook is the
only unauthenticated route here; it is guarded by the ``x-callback-token``
header when ``XENDIT_WEBHOOK_TOKEN`` is configured.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Header

from vibe_creator.core.models.io.common import ApiResponse, MessageData
from vibe_creator.core.models.io.payments import (
    CreateInvoiceRequest,
    InvoiceData,
    MockConfirmRequest,
    PaymentHistoryData,
    PaymentRead,
    SubscriptionRead,
    UseExportData,
    XenditWebhookPayload,
)
from vibe_creator.server.services.deps import CurrentUser, PaymentServiceDep
from vibe_creator.server.services.payment import to_subscription_read

router = APIRouter()


@router.post(
    "/create-invoice",
    response_model=ApiResponse[InvoiceData],
    summary="Create Invoice",
    description=(
        "Create a pending payment for a CREATOR or PRO upgrade and an invoice for it. "
        "Without a Xendit key a mock invoice URL is returned."
    ),
    response_description="Invoice URL to redirect the user to, and the payment id.",
    responses={
        400: {"description": "FREE tier selected"},
        500: {"description": "Payment gateway failure"},
    },
)
async def create_invoice(
    body: CreateInvoiceRequest, user: CurrentUser, payments: PaymentServiceDep
) -> ApiResponse[InvoiceData]:
    return ApiResponse[InvoiceData](data=await payments.create_invoice(user, body.tier))


@router.post(
    "/webhook",
    response_model=ApiResponse[MessageData],
    summary="Xendit Webhook",
    description="Invoice status callback. PAID upgrades the subscription; EXPIRED and FAILED are recorded.",
    responses={401: {"description": "Callback token mismatch"}},
)
async def xendit_webhook(
    payload: XenditWebhookPayload,
    payments: PaymentServiceDep,
    x_callback_token: Optional[str] = Header(None),
) -> ApiResponse[MessageData]:
    payments.verify_callback_token(x_callback_token)
    await payments.handle_webhook(payload)
    return ApiResponse[MessageData](data=MessageData(message="Webhook processed"))


@router.post(
    "/mock-confirm",
    response_model=ApiResponse[MessageData],
    summary="Confirm Mock Payment",
    description="Mark a mock payment as paid and upgrade the subscription. Disabled in production.",
    responses={
        403: {"description": "Running in production"},
        404: {"description": "Payment not found"},
    },
)
async def mock_confirm(
    body: MockConfirmRequest, user: CurrentUser, payments: PaymentServiceDep
) -> ApiResponse[MessageData]:
    await payments.confirm_mock_payment(user, body.payment_id)
    return ApiResponse[MessageData](data=MessageData(message="Payment confirmed"))


@router.get(
    "/subscription",
    response_model=ApiResponse[SubscriptionRead],
    summary="Get Subscription",
    description="The user's subscription, created on the FREE tier when missing and downgraded when expired.",
)
async def get_subscription(user: CurrentUser, payments: PaymentServiceDep) -> ApiResponse[SubscriptionRead]:
    subscription = await payments.get_subscription(user.id)
    return ApiResponse[SubscriptionRead](data=to_subscription_read(subscription))


@router.get(
    "/history",
    response_model=ApiResponse[PaymentHistoryData],
    summary="Payment History",
    description="The user's 20 most recent payments.",
)
async def payment_history(user: CurrentUser, payments: PaymentServiceDep) -> ApiResponse[PaymentHistoryData]:
    records = await payments.history(user.id)
    return ApiResponse[PaymentHistoryData](
        data=PaymentHistoryData(payments=[PaymentRead.model_validate(p) for p in records])
    )


@router.post(
    "/use-export",
    response_model=ApiResponse[UseExportData],
    summary="Use Export",
    description="Consume one export from the current period. `remaining` is -1 on unlimited tiers.",
    responses={403: {"description": "Export quota exceeded"}},
)
async def use_export(user: CurrentUser, payments: PaymentServiceDep) -> ApiResponse[UseExportData]:
    return ApiResponse[UseExportData](data=await payments.use_export(user.id))
