"""Unit tests for local media storage."""

import io
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from vibe_creator.server.core.config import StorageConfig
from vibe_creator.server.errors import AppError, ErrorCode, ValidationFailedError
from vibe_creator.server.services.storage import LocalStorage


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    return LocalStorage(StorageConfig(upload_dir=str(tmp_path / "media"), max_upload_size_mb=1))


def _upload(data: bytes, filename, content_type="video/mp4") -> UploadFile:
    return UploadFile(io.BytesIO(data), filename=filename, headers=Headers({"content-type": content_type}))


class TestLayout:
    def test_ensure_directories(self, storage):
        storage.ensure_directories()

        for name in ("temp", "exports", "work"):
            assert (storage.root / name).is_dir()

    def test_job_paths(self, storage):
        assert storage.export_path("job-1") == storage.root / "exports" / "job-1.mp4"
        assert storage.job_work_dir("job-1") == storage.root / "work" / "job-1"


class TestResolve:
    def test_relative_path(self, storage):
        assert storage.resolve("temp/clip.mp4") == storage.root / "temp" / "clip.mp4"

    def test_absolute_path_inside(self, storage):
        path = storage.root / "temp" / "clip.mp4"

        assert storage.resolve(str(path)) == path

    @pytest.mark.parametrize("path", ["../secret.mp4", "temp/../../secret.mp4", "/etc/passwd"])
    def test_escape_is_rejected(self, storage, path):
        with pytest.raises(ValidationFailedError) as exc_info:
            storage.resolve(path)

        assert exc_info.value.details == {"path": path}


@pytest.mark.asyncio
class TestSaveUpload:
    async def test_saves_under_random_name(self, storage):
        result = await storage.save_upload(_upload(b"frames", "My Clip.MP4"))

        assert result.filename.endswith(".mp4")
        assert result.filename != "My Clip.MP4"
        assert Path(result.filepath).read_bytes() == b"frames"
        assert result.size == 6
        assert result.mimetype == "video/mp4"

    @pytest.mark.parametrize("filename", [None, "noextension", "weird.ext$$"])
    async def test_default_extension(self, storage, filename):
        result = await storage.save_upload(_upload(b"x", filename))

        assert result.filename.endswith(".mp4")

    async def test_too_large(self, storage):
        data = b"x" * (storage.max_upload_bytes + 10)

        with pytest.raises(AppError) as exc_info:
            await storage.save_upload(_upload(data, "big.mp4"))

        assert exc_info.value.code == ErrorCode.FILE_TOO_LARGE
        assert exc_info.value.status_code == 413
        assert list(storage.temp_dir.iterdir()) == []


class TestRemove:
    def test_file_and_directory(self, storage):
        storage.ensure_directories()
        work = storage.job_work_dir("job-1")
        work.mkdir()
        (work / "trimmed_0.mp4").write_bytes(b"x")
        final = storage.export_path("job-1")
        final.write_bytes(b"x")

        storage.remove(work)
        storage.remove(final)
        storage.remove(final)

        assert not work.exists()
        assert not final.exists()
