"""Unit tests for the authentication service."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlmodel import select

from vibe_creator.core.database.base import utc_now
from vibe_creator.core.database.entities import User, UserSession
from vibe_creator.core.models.io.auth import LoginRequest
from vibe_creator.server.core.config import AuthConfig
from vibe_creator.server.errors import ErrorCode, UnauthorizedError, ValidationFailedError
from vibe_creator.server.services.auth import AuthService

pytestmark = pytest.mark.asyncio


@pytest.fixture
def service(session) -> AuthService:
    return AuthService(session, config=AuthConfig(access_token_minutes=5, refresh_token_days=2))


async def test_session_lifetimes_follow_config(service, make_user):
    user = await make_user()
    before = utc_now()

    login = await service.create_session(user, user_agent="pytest", ip_address="10.1.1.1")

    assert timedelta(minutes=4) < login.expires_at - before <= timedelta(minutes=5, seconds=1)
    assert timedelta(days=1) < login.refresh_expires_at - before <= timedelta(days=2, seconds=1)
    assert login.user_agent == "pytest"
    assert login.token != login.refresh_token


async def test_new_session_replaces_old(service, session, make_user):
    user = await make_user()
    first = await service.create_session(user)

    second = await service.create_session(user)

    rows = (await session.exec(select(UserSession).where(UserSession.user_id == user.id))).all()
    assert [row.id for row in rows] == [second.id]
    assert await service.authenticate(first.token) is None


async def test_authenticate_valid_token(service, make_user):
    user = await make_user()
    login = await service.create_session(user)

    resolved_user, resolved_session = await service.authenticate(login.token)

    assert resolved_user.id == user.id
    assert resolved_session.id == login.id


async def test_factory_sessions_have_distinct_tokens(service, make_user, make_session):
    user = await make_user()
    first = await make_session(user)
    second = await make_session(user)

    assert first.token != second.token
    assert first.refresh_token != second.refresh_token
    _, resolved = await service.authenticate(second.token)
    assert resolved.id == second.id


async def test_expired_access_keeps_session_for_refresh(service, make_user, make_session):
    user = await make_user()
    login = await make_session(user, access_expires_in=timedelta(minutes=-1))

    old_token = login.token
    assert await service.authenticate(old_token) is None
    assert await service.sessions.get_by_id(login.id) is not None

    rotated = await service.refresh(login.refresh_token)
    assert rotated.session.token != old_token


async def test_fully_expired_session_is_removed(service, make_user, make_session):
    user = await make_user()
    login = await make_session(
        user, access_expires_in=timedelta(minutes=-10), refresh_expires_in=timedelta(minutes=-1)
    )
    login_id = login.id

    assert await service.authenticate(login.token) is None
    assert await service.sessions.get_by_id(login_id) is None


async def test_refresh_for_deleted_user(service, session, make_session):
    ghost = User(email="ghost@vibecreator.id", password="x", name="Ghost")
    session.add(ghost)
    await session.commit()
    login = await make_session(ghost)
    await session.delete(ghost)
    await session.commit()

    with pytest.raises(UnauthorizedError) as exc_info:
        await service.refresh(login.refresh_token)

    assert exc_info.value.code == ErrorCode.TOKEN_EXPIRED


async def test_unknown_refresh_token(service):
    with pytest.raises(UnauthorizedError):
        await service.refresh("does-not-exist")


async def test_login_checks_captcha_before_credentials(session, make_user):
    await make_user("captcha@vibecreator.id")
    captcha = MagicMock()
    captcha.verify = AsyncMock(return_value=False)
    service = AuthService(session, captcha=captcha)

    with pytest.raises(ValidationFailedError, match="Captcha verification failed"):
        await service.login(
            LoginRequest(email="captcha@vibecreator.id", password="whatever", turnstile_token="t"),
            ip_address="10.0.0.1",
        )

    captcha.verify.assert_awaited_once_with("t", "10.0.0.1")


async def test_logout(service, make_user):
    user = await make_user()
    login = await service.create_session(user)

    await service.logout(login)

    assert await service.authenticate(login.token) is None
