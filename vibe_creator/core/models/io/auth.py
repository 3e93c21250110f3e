"""
Authentication I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from vibe_creator.core.models.domain.enums import SubscriptionStatus, SubscriptionTier, UserRole

from ..base import CamelSchema


class RegisterRequest(CamelSchema):
    email: EmailStr
    password: str = Field(min_length=8, max_length=72, description="Plain password, 8 to 72 characters")
    name: str = Field(min_length=2, max_length=255)
    turnstile_token: str = Field(min_length=1, description="Cloudflare Turnstile response token")


class LoginRequest(CamelSchema):
    email: EmailStr
    password: str = Field(min_length=1)
    turnstile_token: str = Field(min_length=1, description="Cloudflare Turnstile response token")


class UserRead(CamelSchema):
    """Public view of a user; never includes the password hash."""

    id: str
    email: str
    name: str
    avatar_url: Optional[str] = None
    role: UserRole


class SubscriptionSummary(CamelSchema):
    tier: SubscriptionTier
    status: SubscriptionStatus
    exports_used: int
    exports_limit: int
    valid_until: Optional[datetime] = None


class AuthTokenData(CamelSchema):
    user: UserRead
    access_token: str
    expires_at: datetime


class MeData(CamelSchema):
    user: UserRead
    subscription: Optional[SubscriptionSummary] = None
