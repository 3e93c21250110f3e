from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlmodel import select

from vibe_creator.core.database.base import utc_now
from vibe_creator.core.database.entities import PaymentHistory, Subscription
from vibe_creator.core.models.domain.enums import (
    PaymentStatus,
    SubscriptionStatus,
    SubscriptionTier,
    UserRole,
)
from vibe_creator.core.models.domain.tiers import UNLIMITED_EXPORTS

pytestmark = pytest.mark.asyncio

API = "/api/v1"


async def _subscription(session_factory, user_id: str) -> Subscription:
    async with session_factory() as fresh:
        return (await fresh.exec(select(Subscription).where(Subscription.user_id == user_id))).one()


async def _payment(session_factory, payment_id: str) -> PaymentHistory:
    async with session_factory() as fresh:
        return await fresh.get(PaymentHistory, payment_id)


@pytest_asyncio.fixture
async def buyer(make_user):
    return await make_user("buyer@vibecreator.id", exports_used=4)


@pytest_asyncio.fixture
async def invoice(client: AsyncClient, buyer, auth_headers):
    response = await client.post(
        f"{API}/payment/create-invoice", json={"tier": "CREATOR"}, headers=await auth_headers(buyer)
    )
    assert response.status_code == 200
    return response.json()["data"]


async def test_create_mock_invoice(invoice, session_factory):
    assert invoice["invoiceUrl"] == f"/payment/mock?paymentId={invoice['paymentId']}"

    payment = await _payment(session_factory, invoice["paymentId"])
    assert payment.status == PaymentStatus.PENDING
    assert payment.amount == 99000
    assert payment.xendit_invoice_id == f"mock-{payment.id}"


async def test_free_tier_cannot_be_bought(client: AsyncClient, buyer, auth_headers):
    response = await client.post(
        f"{API}/payment/create-invoice", json={"tier": "FREE"}, headers=await auth_headers(buyer)
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid tier or free tier selected"


async def test_paid_webhook_upgrades_subscription(client: AsyncClient, invoice, buyer, session_factory):
    payment = await _payment(session_factory, invoice["paymentId"])

    response = await client.post(
        f"{API}/payment/webhook",
        json={
            "id": payment.xendit_invoice_id,
            "external_id": "payment-x",
            "status": "PAID",
            "payment_method": "BANK_TRANSFER",
            "paid_at": "2026-03-01T10:00:00.000Z",
        },
    )

    assert response.status_code == 200
    assert response.json()["data"] == {"message": "Webhook processed"}
    paid = await _payment(session_factory, payment.id)
    assert paid.status == PaymentStatus.PAID
    assert paid.payment_method == "BANK_TRANSFER"
    assert paid.paid_at == datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc)
    subscription = await _subscription(session_factory, buyer.id)
    assert subscription.tier == SubscriptionTier.CREATOR
    assert subscription.exports_used == 0
    assert subscription.exports_limit == 50
    assert timedelta(days=29) < subscription.valid_until - utc_now() <= timedelta(days=30)


async def test_expired_webhook_keeps_tier(client: AsyncClient, invoice, buyer, session_factory):
    payment = await _payment(session_factory, invoice["paymentId"])

    await client.post(f"{API}/payment/webhook", json={"id": payment.xendit_invoice_id, "status": "EXPIRED"})

    assert (await _payment(session_factory, payment.id)).status == PaymentStatus.EXPIRED
    assert (await _subscription(session_factory, buyer.id)).tier == SubscriptionTier.FREE


async def test_webhook_for_unknown_invoice_is_acknowledged(client: AsyncClient):
    response = await client.post(f"{API}/payment/webhook", json={"id": "inv-unknown", "status": "PAID"})

    assert response.status_code == 200


async def test_webhook_token_mismatch(client: AsyncClient, gateway, invoice, session_factory):
    gateway.config.webhook_token = "expected-token"
    payment = await _payment(session_factory, invoice["paymentId"])
    body = {"id": payment.xendit_invoice_id, "status": "PAID"}

    rejected = await client.post(f"{API}/payment/webhook", json=body, headers={"x-callback-token": "wrong"})
    accepted = await client.post(f"{API}/payment/webhook", json=body, headers={"x-callback-token": "expected-token"})

    assert rejected.status_code == 401
    assert rejected.json()["error"]["code"] == "INVALID_TOKEN"
    assert accepted.status_code == 200


async def test_mock_confirm_upgrades(client: AsyncClient, invoice, buyer, auth_headers, session_factory):
    response = await client.post(
        f"{API}/payment/mock-confirm", json={"paymentId": invoice["paymentId"]}, headers=await auth_headers(buyer)
    )

    assert response.status_code == 200
    assert response.json()["data"]["message"] == "Payment confirmed"
    payment = await _payment(session_factory, invoice["paymentId"])
    assert payment.status == PaymentStatus.PAID
    assert payment.payment_method == "MOCK"
    assert (await _subscription(session_factory, buyer.id)).tier == SubscriptionTier.CREATOR


async def test_mock_confirm_of_someone_elses_payment(client: AsyncClient, invoice, make_user, auth_headers):
    stranger = await make_user("stranger@vibecreator.id")

    response = await client.post(
        f"{API}/payment/mock-confirm",
        json={"paymentId": invoice["paymentId"]},
        headers=await auth_headers(stranger),
    )

    assert response.status_code == 404


async def test_subscription_is_created_when_missing(client: AsyncClient, make_user, auth_headers):
    user = await make_user("nosub@vibecreator.id", tier=None)

    response = await client.get(f"{API}/payment/subscription", headers=await auth_headers(user))

    data = response.json()["data"]
    assert data["tier"] == "FREE"
    assert data["exportsLimit"] == 5
    assert data["price"] == 0
    assert data["isUnlimited"] is False


async def test_expired_subscription_is_downgraded(client: AsyncClient, make_user, auth_headers):
    user = await make_user("lapsed@vibecreator.id", tier=SubscriptionTier.PRO, valid_days=-1)

    response = await client.get(f"{API}/payment/subscription", headers=await auth_headers(user))

    data = response.json()["data"]
    assert data["tier"] == "FREE"
    assert data["status"] == SubscriptionStatus.EXPIRED.value
    assert data["exportsLimit"] == 5
    assert data["validUntil"] is None


async def test_payment_history(client: AsyncClient, invoice, buyer, auth_headers):
    response = await client.get(f"{API}/payment/history", headers=await auth_headers(buyer))

    payments = response.json()["data"]["payments"]
    assert [p["id"] for p in payments] == [invoice["paymentId"]]
    assert payments[0]["tier"] == "CREATOR"


async def test_use_export_counts_down(client: AsyncClient, buyer, auth_headers):
    headers = await auth_headers(buyer)

    first = await client.post(f"{API}/payment/use-export", headers=headers)
    second = await client.post(f"{API}/payment/use-export", headers=headers)

    assert first.json()["data"] == {"allowed": True, "remaining": 0}
    assert second.status_code == 403
    error = second.json()["error"]
    assert error["code"] == "QUOTA_EXCEEDED"
    assert error["details"] == {"remaining": 0}


async def test_use_export_unlimited(client: AsyncClient, make_user, auth_headers, session_factory):
    user = await make_user("pro@vibecreator.id", role=UserRole.USER, tier=SubscriptionTier.PRO, valid_days=30)

    response = await client.post(f"{API}/payment/use-export", headers=await auth_headers(user))

    assert response.json()["data"] == {"allowed": True, "remaining": -1}
    subscription = await _subscription(session_factory, user.id)
    assert subscription.exports_limit == UNLIMITED_EXPORTS
    assert subscription.exports_used == 0
