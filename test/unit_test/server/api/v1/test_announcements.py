from datetime import timedelta

import pytest
from httpx import AsyncClient

from vibe_creator.core.database.base import utc_now
from vibe_creator.core.database.entities import Announcement

pytestmark = pytest.mark.asyncio

API = "/api/v1"


async def test_lists_only_active_announcements_newest_first(client: AsyncClient, session):
    now = utc_now()
    session.add(Announcement(title="Old news", content="a", created_at=now - timedelta(days=2)))
    session.add(Announcement(title="Hidden", content="b", is_active=False))
    session.add(Announcement(title="New feature", content="c", created_at=now))
    await session.commit()

    response = await client.get(f"{API}/announcements")

    assert response.status_code == 200
    assert [a["title"] for a in response.json()["data"]] == ["New feature", "Old news"]


async def test_empty_list(client: AsyncClient):
    response = await client.get(f"{API}/announcements")

    assert response.json() == {"success": True, "data": [], "meta": None}
