"""
Authentication service.

Handles registration, login, token refresh and logout. A session pairs a
short-lived bearer access token with a long-lived refresh token that the
browser keeps in an HttpOnly cookie. Each user holds at most one session:
logging in anywhere signs out every other device.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Tuple

from fastapi import Response
from sqlmodel.ext.asyncio.session import AsyncSession

from vibe_creator.core.database.base import utc_now
from vibe_creator.core.database.entities import Subscription, User, UserSession
from vibe_creator.core.database.repositories import (
    SubscriptionRepository,
    UserRepository,
    UserSessionRepository,
)
from vibe_creator.core.models.domain import SubscriptionStatus, SubscriptionTier
from vibe_creator.core.models.domain.tiers import export_limit_for
from vibe_creator.core.models.io.auth import LoginRequest, RegisterRequest
from vibe_creator.core.security import generate_token, hash_password, verify_password
from vibe_creator.server.core.config import AuthConfig, settings
from vibe_creator.server.errors import (
    AppError,
    ConflictError,
    ErrorCode,
    UnauthorizedError,
    ValidationFailedError,
)

from .turnstile import TurnstileVerifier

logger = logging.getLogger(__name__)

REFRESH_TOKEN_BYTES = 64


@dataclass
class IssuedSession:
    """A user together with the session just issued to them."""

    user: User
    session: UserSession


class AuthService:
    """Account and session management bound to one database session."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        captcha: Optional[TurnstileVerifier] = None,
        config: Optional[AuthConfig] = None,
    ) -> None:
        self.users = UserRepository(session)
        self.sessions = UserSessionRepository(session)
        self.subscriptions = SubscriptionRepository(session)
        self.captcha = captcha
        self.config = config or settings.auth

    async def _check_captcha(self, token: str, remote_ip: Optional[str]) -> None:
        if self.captcha is None:
            return
        if not await self.captcha.verify(token, remote_ip):
            raise ValidationFailedError("Captcha verification failed. Please try again.")

    async def register(
        self,
        data: RegisterRequest,
        *,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> IssuedSession:
        """Create an account on the FREE tier and sign it in."""
        await self._check_captcha(data.turnstile_token, ip_address)

        email = str(data.email).lower()
        if await self.users.get_by_email(email) is not None:
            raise ConflictError("Email is already registered")

        user = await self.users.create(User(email=email, password=hash_password(data.password), name=data.name))
        await self.subscriptions.create(
            Subscription(
                user_id=user.id,
                tier=SubscriptionTier.FREE,
                status=SubscriptionStatus.ACTIVE,
                exports_used=0,
                exports_limit=export_limit_for(SubscriptionTier.FREE),
            )
        )
        logger.info(f"Registered user {user.id}")
        return IssuedSession(user=user, session=await self.create_session(user, user_agent, ip_address))

    async def login(
        self,
        data: LoginRequest,
        *,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> IssuedSession:
        await self._check_captcha(data.turnstile_token, ip_address)

        user = await self.users.get_by_email(str(data.email).lower())
        if user is None or not verify_password(data.password, user.password):
            raise UnauthorizedError("Invalid email or password", code=ErrorCode.INVALID_CREDENTIALS)

        logger.info(f"User {user.id} logged in")
        return IssuedSession(user=user, session=await self.create_session(user, user_agent, ip_address))

    async def create_session(
        self, user: User, user_agent: Optional[str] = None, ip_address: Optional[str] = None
    ) -> UserSession:
        """Issue a fresh token pair, replacing any session the user already has."""
        await self.sessions.delete_for_user(user.id)
        now = utc_now()
        return await self.sessions.create(
            UserSession(
                user_id=user.id,
                token=generate_token(),
                refresh_token=generate_token(REFRESH_TOKEN_BYTES),
                user_agent=user_agent,
                ip_address=ip_address,
                expires_at=now + timedelta(minutes=self.config.access_token_minutes),
                refresh_expires_at=now + timedelta(days=self.config.refresh_token_days),
            )
        )

    async def refresh(self, refresh_token: Optional[str]) -> IssuedSession:
        """Rotate both tokens of the session owning ``refresh_token``.

        Raises:
            AppError: 400 ``TOKEN_EXPIRED`` when no token was sent.
            UnauthorizedError: ``TOKEN_EXPIRED`` when the token is unknown or expired.
        """
        if not refresh_token:
            raise AppError(ErrorCode.TOKEN_EXPIRED, "Refresh token not found", status_code=400)

        now = utc_now()
        session = await self.sessions.get_by_refresh_token(refresh_token)
        if session is None or session.is_refresh_expired(now):
            raise UnauthorizedError("Refresh token is invalid or expired", code=ErrorCode.TOKEN_EXPIRED)

        user = await self.users.get_by_id(session.user_id)
        if user is None:
            await self.sessions.delete(session.id)
            raise UnauthorizedError("Refresh token is invalid or expired", code=ErrorCode.TOKEN_EXPIRED)

        session.token = generate_token()
        session.refresh_token = generate_token(REFRESH_TOKEN_BYTES)
        session.expires_at = now + timedelta(minutes=self.config.access_token_minutes)
        session.refresh_expires_at = now + timedelta(days=self.config.refresh_token_days)
        session = await self.sessions.update(session)
        return IssuedSession(user=user, session=session)

    async def authenticate(self, access_token: str) -> Optional[Tuple[User, UserSession]]:
        """Resolve a bearer token to its user and session.

        An expired access token authenticates nobody. The session row itself
        is only removed once its refresh token has expired too, so the client
        can still rotate it.
        """
        session = await self.sessions.get_by_token(access_token)
        if session is None:
            return None

        now = utc_now()
        if session.is_access_expired(now):
            if session.is_refresh_expired(now):
                await self.sessions.delete(session.id)
            return None

        user = await self.users.get_by_id(session.user_id)
        if user is None:
            return None
        return user, session

    async def logout(self, session: UserSession) -> None:
        await self.sessions.delete(session.id)
        logger.info(f"User {session.user_id} logged out")


def set_refresh_cookie(response: Response, session: UserSession, config: Optional[AuthConfig] = None) -> None:
    config = config or settings.auth
    response.set_cookie(
        key=config.refresh_cookie_name,
        value=session.refresh_token,
        max_age=config.refresh_token_days * 24 * 60 * 60,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="lax",
    )


def clear_refresh_cookie(response: Response, config: Optional[AuthConfig] = None) -> None:
    config = config or settings.auth
    response.delete_cookie(key=config.refresh_cookie_name, path="/")
