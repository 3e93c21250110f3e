import pytest
import pytest_asyncio
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

API = "/api/v1"


@pytest_asyncio.fixture
async def headers(make_user, auth_headers):
    return await auth_headers(await make_user("uploader@vibecreator.id"))


async def test_upload_video_streams_to_temp(client: AsyncClient, headers, storage):
    response = await client.post(
        f"{API}/upload/video",
        files={"file": ("holiday.MOV", b"0123456789", "video/quicktime")},
        headers=headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["filename"].endswith(".mov")
    assert data["mimetype"] == "video/quicktime"
    assert data["size"] == 10
    stored = storage.temp_dir / data["filename"]
    assert data["filepath"] == str(stored)
    assert stored.read_bytes() == b"0123456789"
    assert not list(storage.temp_dir.glob("*.partial"))


async def test_upload_without_file(client: AsyncClient, headers):
    response = await client.post(f"{API}/upload/video", data={"other": "x"}, headers=headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "NO_FILE"


async def test_upload_too_large_removes_partial_file(client: AsyncClient, headers, storage):
    oversized = b"x" * (storage.max_upload_bytes + 1)

    response = await client.post(
        f"{API}/upload/video", files={"file": ("big.mp4", oversized, "video/mp4")}, headers=headers
    )

    assert response.status_code == 413
    assert response.json()["error"]["code"] == "FILE_TOO_LARGE"
    assert list(storage.temp_dir.iterdir()) == []


async def test_upload_requires_authentication(client: AsyncClient):
    response = await client.post(f"{API}/upload/video", files={"file": ("a.mp4", b"x", "video/mp4")})

    assert response.status_code == 401
