"""
Shared database fixtures for unit tests.

Every test gets its own in-memory SQLite database. ``StaticPool`` keeps a
single connection so all sessions created from ``session_factory`` see the
same data.
"""

from __future__ import annotations

from datetime import timedelta
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel.pool import StaticPool

from vibe_creator.core.database import create_all, create_sessionmaker
from vibe_creator.core.database.base import utc_now
from vibe_creator.core.database.entities import Subscription, User, UserSession
from vibe_creator.core.models.domain.enums import SubscriptionStatus, SubscriptionTier, UserRole
from vibe_creator.core.models.domain.tiers import export_limit_for
from vibe_creator.core.security import generate_token, hash_password

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "correct-horse-battery"


@pytest_asyncio.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return create_sessionmaker(test_engine)


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(session: AsyncSession):
    """Factory creating a user with a subscription.

    Usage: ``user = await make_user("a@vibecreator.id", tier=SubscriptionTier.PRO)``
    """

    async def _make(
        email: str = "creator@vibecreator.id",
        *,
        name: str = "Test Creator",
        role: UserRole = UserRole.USER,
        tier: Optional[SubscriptionTier] = SubscriptionTier.FREE,
        exports_used: int = 0,
        exports_limit: Optional[int] = None,
        valid_days: Optional[int] = None,
        password: str = TEST_PASSWORD,
    ) -> User:
        user = User(email=email, password=hash_password(password), name=name, role=role)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        if tier is not None:
            session.add(
                Subscription(
                    user_id=user.id,
                    tier=tier,
                    status=SubscriptionStatus.ACTIVE,
                    exports_used=exports_used,
                    exports_limit=exports_limit if exports_limit is not None else export_limit_for(tier),
                    valid_until=utc_now() + timedelta(days=valid_days) if valid_days is not None else None,
                )
            )
            await session.commit()
        return user

    return _make


@pytest.fixture
def make_session(session: AsyncSession):
    """Factory creating a login session for a user, optionally already expired."""

    async def _make(
        user: User,
        *,
        token: Optional[str] = None,
        refresh_token: Optional[str] = None,
        access_expires_in: timedelta = timedelta(minutes=15),
        refresh_expires_in: timedelta = timedelta(days=30),
    ) -> UserSession:
        now = utc_now()
        login = UserSession(
            user_id=user.id,
            token=token or generate_token(),
            refresh_token=refresh_token or generate_token(),
            expires_at=now + access_expires_in,
            refresh_expires_at=now + refresh_expires_in,
        )
        session.add(login)
        await session.commit()
        await session.refresh(login)
        return login

    return _make
