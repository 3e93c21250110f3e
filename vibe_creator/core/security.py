"""
Password hashing and token generation helpers.
"""

from __future__ import annotations

import secrets

import bcrypt

TOKEN_BYTES = 32


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored bcrypt hash.

    Malformed hashes are treated as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def generate_token(nbytes: int = TOKEN_BYTES) -> str:
    """Generate a URL-safe opaque session token."""
    return secrets.token_urlsafe(nbytes)
