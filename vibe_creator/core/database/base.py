"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the database layer using SQLModel.
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import ConfigDict
from sqlmodel import SQLModel


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())
