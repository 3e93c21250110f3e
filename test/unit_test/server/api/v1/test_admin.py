import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlmodel import select

from vibe_creator.core.database.entities import (
    ExportHistory,
    PaymentHistory,
    Project,
    Subscription,
    User,
)
from vibe_creator.core.models.domain.enums import (
    ExportStatus,
    PaymentStatus,
    SubscriptionTier,
    UserRole,
)

pytestmark = pytest.mark.asyncio

API = "/api/v1"


@pytest_asyncio.fixture
async def admin(make_user):
    return await make_user("admin@vibecreator.id", name="Admin", role=UserRole.ADMIN, tier=SubscriptionTier.PRO)


@pytest_asyncio.fixture
async def headers(admin, auth_headers):
    return await auth_headers(admin)


@pytest_asyncio.fixture
async def creator(make_user, session):
    user = await make_user("creator@vibecreator.id", name="Rina Creator", tier=SubscriptionTier.CREATOR, valid_days=30)
    session.add(Project(user_id=user.id, title="Vlog"))
    session.add(ExportHistory(user_id=user.id, status=ExportStatus.COMPLETED, progress=100))
    session.add(PaymentHistory(user_id=user.id, amount=99000, tier=SubscriptionTier.CREATOR, status=PaymentStatus.PAID))
    session.add(PaymentHistory(user_id=user.id, amount=199000, tier=SubscriptionTier.PRO))
    await session.commit()
    return user


async def test_non_admin_is_rejected(client: AsyncClient, make_user, auth_headers):
    user = await make_user("user@vibecreator.id")

    response = await client.get(f"{API}/admin/stats", headers=await auth_headers(user))

    assert response.status_code == 403
    assert response.json()["error"] == {"code": "FORBIDDEN", "message": "Admin access required"}


async def test_anonymous_is_rejected(client: AsyncClient):
    response = await client.get(f"{API}/admin/stats")

    assert response.status_code == 401


async def test_stats(client: AsyncClient, headers, creator):
    response = await client.get(f"{API}/admin/stats", headers=headers)

    assert response.status_code == 200
    assert response.json()["data"] == {
        "users": {"total": 2, "recent": 2, "byTier": {"free": 0, "creator": 1, "pro": 1}},
        "projects": 1,
        "exports": {"total": 1, "recent": 1},
        "revenue": {"total": 99000, "payments": 1},
    }


async def test_list_users_with_search(client: AsyncClient, headers, creator):
    response = await client.get(f"{API}/admin/users", params={"search": "RINA"}, headers=headers)

    data = response.json()["data"]
    assert data["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}
    [item] = data["users"]
    assert item["email"] == "creator@vibecreator.id"
    assert item["subscription"]["tier"] == "CREATOR"
    assert item["projectCount"] == 1
    assert item["exportCount"] == 1


async def test_list_users_pagination(client: AsyncClient, headers, make_user):
    for index in range(4):
        await make_user(f"user{index}@vibecreator.id")

    response = await client.get(f"{API}/admin/users", params={"page": 2, "limit": 2}, headers=headers)

    data = response.json()["data"]
    assert len(data["users"]) == 2
    assert data["pagination"] == {"page": 2, "limit": 2, "total": 5, "pages": 3}


async def test_list_users_limit_is_capped(client: AsyncClient, headers):
    response = await client.get(f"{API}/admin/users", params={"limit": 500}, headers=headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_user_detail(client: AsyncClient, headers, creator):
    response = await client.get(f"{API}/admin/users/{creator.id}", headers=headers)

    data = response.json()["data"]
    assert data["name"] == "Rina Creator"
    assert [p["title"] for p in data["projects"]] == ["Vlog"]
    assert len(data["exports"]) == 1
    assert {p["status"] for p in data["payments"]} == {"PAID", "PENDING"}


async def test_user_detail_not_found(client: AsyncClient, headers):
    response = await client.get(f"{API}/admin/users/missing", headers=headers)

    assert response.status_code == 404
    assert response.json()["error"]["message"] == "User not found"


async def test_set_subscription(client: AsyncClient, headers, creator):
    response = await client.patch(
        f"{API}/admin/users/{creator.id}/subscription", json={"tier": "PRO", "validDays": 90}, headers=headers
    )

    data = response.json()["data"]
    assert data["tier"] == "PRO"
    assert data["exportsUsed"] == 0
    assert data["isUnlimited"] is True
    assert data["validUntil"] is not None


async def test_set_subscription_to_free_clears_expiry(client: AsyncClient, headers, creator):
    response = await client.patch(
        f"{API}/admin/users/{creator.id}/subscription", json={"tier": "FREE"}, headers=headers
    )

    data = response.json()["data"]
    assert data["tier"] == "FREE"
    assert data["exportsLimit"] == 5
    assert data["validUntil"] is None


async def test_delete_user_cascades(client: AsyncClient, headers, creator, session_factory):
    response = await client.delete(f"{API}/admin/users/{creator.id}", headers=headers)

    assert response.status_code == 200
    assert response.json()["data"] == {"message": "User deleted"}
    async with session_factory() as fresh:
        assert await fresh.get(User, creator.id) is None
        for model in (Project, ExportHistory, PaymentHistory, Subscription):
            rows = (await fresh.exec(select(model).where(model.user_id == creator.id))).all()
            assert rows == []


async def test_admin_cannot_delete_self(client: AsyncClient, headers, admin):
    response = await client.delete(f"{API}/admin/users/{admin.id}", headers=headers)

    assert response.status_code == 403


async def test_delete_missing_user(client: AsyncClient, headers):
    response = await client.delete(f"{API}/admin/users/missing", headers=headers)

    assert response.status_code == 404


async def test_activity_feed(client: AsyncClient, headers, creator):
    response = await client.get(f"{API}/admin/activity", params={"limit": 3}, headers=headers)

    items = response.json()["data"]
    assert len(items) == 3
    assert {item["type"] for item in items} <= {"export", "payment", "signup"}
    payments = [item for item in items if item["type"] == "payment"]
    for item in payments:
        assert item["userEmail"] == "creator@vibecreator.id"
        assert item["userName"] == "Rina Creator"
    created = [item["createdAt"] for item in items]
    assert created == sorted(created, reverse=True)


async def test_announcement_management(client: AsyncClient, headers):
    created = await client.post(
        f"{API}/admin/announcements", json={"title": "Maintenance", "content": "Sunday 02:00 WIB"}, headers=headers
    )
    assert created.status_code == 201
    announcement = created.json()["data"]
    assert announcement["isActive"] is True

    updated = await client.patch(
        f"{API}/admin/announcements/{announcement['id']}", json={"isActive": False}, headers=headers
    )
    assert updated.json()["data"]["isActive"] is False
    assert updated.json()["data"]["title"] == "Maintenance"

    listed = await client.get(f"{API}/admin/announcements", headers=headers)
    assert [a["id"] for a in listed.json()["data"]] == [announcement["id"]]

    deleted = await client.delete(f"{API}/admin/announcements/{announcement['id']}", headers=headers)
    assert deleted.json()["data"] == {"message": "Announcement deleted"}

    missing = await client.delete(f"{API}/admin/announcements/{announcement['id']}", headers=headers)
    assert missing.status_code == 404


async def test_announcement_validation(client: AsyncClient, headers):
    response = await client.post(f"{API}/admin/announcements", json={"title": "", "content": "x"}, headers=headers)

    assert response.status_code == 400
