"""
Request rate limiting.

Limits are counted per client address in process memory with ``slowapi``.
Every route shares the default limit; login and registration get the
stricter ``AUTH_LIMIT`` on top.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings

_config = settings.rate_limit

AUTH_LIMIT = _config.auth

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[_config.default],
    storage_uri="memory://",
    enabled=_config.enabled,
)
