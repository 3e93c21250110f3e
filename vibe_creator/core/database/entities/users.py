"""
User and session entity models.

Users own every other record in the system. Sessions pair a short-lived
access token with a long-lived refresh token; a user holds at most one
session at a time.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from vibe_creator.core.models.domain.enums import UserRole

from ..base import Base, new_id, utc_now
from ._types import UTCDateTime


class User(Base, table=True):
    """Registered account.

    Table: users
    """

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    email: str = Field(max_length=255, unique=True, index=True)
    password: str = Field(max_length=255, description="bcrypt hash")
    name: str = Field(max_length=255)
    avatar_url: Optional[str] = Field(default=None, max_length=1024)
    role: UserRole = Field(default=UserRole.USER)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role})"


class UserSession(Base, table=True):
    """Login session looked up by its bearer access token.

    Table: user_sessions
    """

    __tablename__ = "user_sessions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=36)
    token: str = Field(max_length=128, unique=True, index=True)
    refresh_token: str = Field(max_length=128, unique=True, index=True)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    ip_address: Optional[str] = Field(default=None, max_length=64)
    expires_at: datetime = Field(sa_type=UTCDateTime)
    refresh_expires_at: datetime = Field(sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def is_access_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def is_refresh_expired(self, now: datetime) -> bool:
        return self.refresh_expires_at <= now

    def __repr__(self) -> str:
        return f"UserSession(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})"
