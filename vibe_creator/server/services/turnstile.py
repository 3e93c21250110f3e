"""
Cloudflare Turnstile captcha verification.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from vibe_creator.server.core.config import TurnstileConfig, settings

logger = logging.getLogger(__name__)


class TurnstileVerifier:
    """Verifies captcha response tokens against Turnstile ``siteverify``.

    Without a configured secret key every token passes outside production.
    When Cloudflare cannot be reached the token passes only in development,
    so local work is not blocked by network trouble.
    """

    def __init__(
        self,
        config: TurnstileConfig,
        *,
        environment: str = "development",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config
        self.environment = environment
        self.timeout = timeout
        self._client = client

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> bool:
        if not self.config.secret_key:
            if self.environment == "production":
                logger.error("TURNSTILE_SECRET_KEY is not set in production; rejecting captcha")
                return False
            logger.debug("Turnstile secret key not configured, skipping verification")
            return True

        form = {"secret": self.config.secret_key, "response": token}
        if remote_ip:
            form["remoteip"] = remote_ip

        try:
            if self._client is not None:
                response = await self._client.post(self.config.verify_url, data=form)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.config.verify_url, data=form)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Turnstile verification request failed: {e}")
            return self.environment == "development"

        result = response.json()
        if not result.get("success"):
            logger.info(f"Turnstile rejected token: {result.get('error-codes')}")
            return False
        return True


def get_turnstile_verifier() -> TurnstileVerifier:
    return TurnstileVerifier(settings.turnstile, environment=settings.environment)
