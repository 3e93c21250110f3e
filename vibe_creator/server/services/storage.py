"""
Local media storage.

Layout under the configured upload directory::

    <upload_dir>/temp/      uploaded source videos
    <upload_dir>/exports/   finished renders, one per export job
    <upload_dir>/work/      per-job scratch space for intermediate clips

Every path handed in by a client is resolved against the upload directory
and rejected when it points outside of it.
"""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile

from vibe_creator.core.models.io.uploads import UploadResult
from vibe_creator.server.core.config import StorageConfig, settings
from vibe_creator.server.errors import AppError, ErrorCode, ValidationFailedError

logger = logging.getLogger(__name__)

UPLOAD_CHUNK_SIZE = 1024 * 1024
DEFAULT_EXTENSION = "mp4"
_EXTENSION_PATTERN = re.compile(r"^[a-z0-9]{1,8}$")


class LocalStorage:
    """Filesystem storage rooted at ``config.upload_dir``."""

    def __init__(self, config: StorageConfig) -> None:
        self.root = Path(config.upload_dir).resolve()
        self.max_upload_bytes = config.max_upload_size_mb * 1024 * 1024

    @property
    def temp_dir(self) -> Path:
        return self.root / "temp"

    @property
    def exports_dir(self) -> Path:
        return self.root / "exports"

    @property
    def work_dir(self) -> Path:
        return self.root / "work"

    def ensure_directories(self) -> None:
        for directory in (self.temp_dir, self.exports_dir, self.work_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def resolve(self, path: str) -> Path:
        """Resolve ``path`` (absolute, or relative to the root) inside storage.

        Raises:
            ValidationFailedError: If the path escapes the upload directory.
        """
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        resolved = candidate.resolve()
        if not resolved.is_relative_to(self.root):
            raise ValidationFailedError("File path is outside the upload directory", details={"path": path})
        return resolved

    def export_path(self, job_id: str) -> Path:
        return self.exports_dir / f"{job_id}.mp4"

    def job_work_dir(self, job_id: str) -> Path:
        return self.work_dir / job_id

    async def save_upload(self, upload: UploadFile) -> UploadResult:
        """Stream an uploaded file into ``temp/`` under a random name.

        The file is written to a ``.partial`` name first and renamed once
        complete, so a half-written upload is never visible.

        Raises:
            AppError: ``FILE_TOO_LARGE`` (413) once the size limit is passed.
        """
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{uuid4()}.{_extension_of(upload.filename)}"
        dest = self.temp_dir / filename
        partial = dest.with_name(dest.name + ".partial")

        total = 0
        try:
            with partial.open("wb") as buffer:
                while True:
                    chunk = await upload.read(UPLOAD_CHUNK_SIZE)
                    if not chunk:
                        break
                    total += len(chunk)
                    if total > self.max_upload_bytes:
                        logger.warning(f"Upload {upload.filename} exceeded {self.max_upload_bytes} bytes")
                        raise AppError(
                            ErrorCode.FILE_TOO_LARGE,
                            f"File exceeds the {self.max_upload_bytes // (1024 * 1024)} MB limit",
                            status_code=413,
                        )
                    buffer.write(chunk)
            partial.replace(dest)
        finally:
            partial.unlink(missing_ok=True)
            await upload.close()

        logger.info(f"Stored upload {filename} ({total} bytes)")
        return UploadResult(
            filename=filename,
            filepath=str(dest),
            mimetype=upload.content_type or "application/octet-stream",
            size=total,
        )

    def remove(self, path: Path) -> None:
        """Delete a file or directory, ignoring ones that are already gone."""
        if path.is_dir():
            shutil.rmtree(path, ignore_errors=True)
        else:
            path.unlink(missing_ok=True)


def _extension_of(filename: str | None) -> str:
    if not filename or "." not in filename:
        return DEFAULT_EXTENSION
    ext = filename.rsplit(".", 1)[1].lower()
    return ext if _EXTENSION_PATTERN.match(ext) else DEFAULT_EXTENSION


def get_storage() -> LocalStorage:
    return LocalStorage(settings.storage)
