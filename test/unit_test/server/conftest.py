"""
API test fixtures.

The application runs in-process over ``ASGITransport`` with the database,
storage, ffmpeg, captcha and payment gateway dependencies overridden.
"""

from __future__ import annotations

from pathlib import Path
from typing import AsyncGenerator, Dict
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from vibe_creator.core.database.entities import User
from vibe_creator.server.core.config import StorageConfig, XenditConfig
from vibe_creator.server.services.ffmpeg_processor import FFmpegProcessor
from vibe_creator.server.services.payment import XenditGateway
from vibe_creator.server.services.storage import LocalStorage

API = "/api/v1"


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    local = LocalStorage(StorageConfig(upload_dir=str(tmp_path / "uploads"), max_upload_size_mb=1))
    local.ensure_directories()
    return local


@pytest.fixture
def processor() -> MagicMock:
    """ffmpeg stand-in that writes a placeholder file for every output."""

    async def _write_output(*args, **kwargs):
        output: Path = args[1]
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(b"rendered")

    mock = MagicMock(spec=FFmpegProcessor)
    mock.trim = AsyncMock(side_effect=_write_output)
    mock.concat = AsyncMock(side_effect=_write_output)
    mock.add_watermark = AsyncMock(side_effect=_write_output)
    mock.copy = AsyncMock(side_effect=_write_output)
    return mock


@pytest.fixture
def captcha() -> MagicMock:
    verifier = MagicMock()
    verifier.verify = AsyncMock(return_value=True)
    return verifier


@pytest.fixture
def gateway() -> XenditGateway:
    """Gateway without a secret key, so invoices are mocked locally."""
    return XenditGateway(XenditConfig(api_url="http://mock-xendit"), frontend_url="http://localhost:5173")


@pytest_asyncio.fixture(name="client")
async def client_fixture(
    session_factory, storage, processor, captcha, gateway
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies.

    Each request gets its own session, as in production, so data written by
    background export jobs is visible to later requests.
    Rate limit counters start empty for every test.
    """
    from vibe_creator.core.database import get_session, get_session_factory
    from vibe_creator.server.core.rate_limit import limiter
    from vibe_creator.server.main import app
    from vibe_creator.server.services.ffmpeg_processor import get_ffmpeg_processor
    from vibe_creator.server.services.payment import get_xendit_gateway
    from vibe_creator.server.services.storage import get_storage
    from vibe_creator.server.services.turnstile import get_turnstile_verifier

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as request_session:
            yield request_session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_ffmpeg_processor] = lambda: processor
    app.dependency_overrides[get_turnstile_verifier] = lambda: captcha
    app.dependency_overrides[get_xendit_gateway] = lambda: gateway
    limiter.reset()

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("vibe_creator.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(make_session):
    """Factory returning ``Authorization`` headers for a signed-in user."""

    async def _headers(user: User) -> Dict[str, str]:
        login = await make_session(user)
        return {"Authorization": f"Bearer {login.token}"}

    return _headers
