"""Async client for uploading clips and running server-side exports.

Purpose:
- Drive the upload, export request and status polling endpoints from a
  Python caller the same way the editor does.

Usage:
- ``async with ExportApiClient(base_url, access_token=token) as client``,
  then ``await client.wait_for_completion(job_id)``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Any, Callable, Optional

import httpx

from vibe_creator.core.models.domain.enums import ExportStatus
from vibe_creator.core.models.io.exports import ExportCreated, ExportRequest, ExportStatusRead
from vibe_creator.core.models.io.uploads import UploadResult

from .errors import ExportClientError, ExportFailedError, ExportTimeoutError

API_PREFIX = "/api/v1"


class ExportApiClient:
    """
    Async HTTP client for the server-side export flow used by the editor.

    Responsibilities:
    - upload_video
    - request_export
    - get_status
    - download_url
    - wait_for_completion

    Every call is authenticated with the given access token and unwraps the
    ``{"success", "data"}`` envelope.
    """

    def __init__(
        self,
        base_url: str,
        *,
        access_token: Optional[str] = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._logger = logging.getLogger(__name__)

    async def __aenter__(self) -> "ExportApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{API_PREFIX}{path}"

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _unwrap(self, response: httpx.Response, fallback: str) -> Any:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("success"):
            return body.get("data")
        error = body.get("error") if isinstance(body, dict) else None
        error = error if isinstance(error, dict) else {}
        raise ExportClientError(
            error.get("message") or fallback,
            status_code=response.status_code,
            code=error.get("code"),
            details=error.get("details"),
        )

    async def upload_video(self, path: Path | str, *, mimetype: str = "video/mp4") -> UploadResult:
        source = Path(path)
        self._logger.debug("ExportApiClient.upload_video: POST %s (%s)", self._url("/upload/video"), source.name)
        with source.open("rb") as fh:
            r = await self._client.post(
                self._url("/upload/video"),
                headers=self._headers(),
                files={"file": (source.name, fh, mimetype)},
            )
        return UploadResult.model_validate(self._unwrap(r, "Upload failed"))

    async def request_export(self, request: ExportRequest) -> ExportCreated:
        self._logger.debug("ExportApiClient.request_export: project=%s", request.project_id)
        r = await self._client.post(
            self._url("/export/request"),
            headers=self._headers(),
            json=request.model_dump(by_alias=True, mode="json", exclude_none=True),
        )
        created = ExportCreated.model_validate(self._unwrap(r, "Create export failed"))
        self._logger.debug("ExportApiClient.request_export: job=%s remaining=%s", created.job_id, created.remaining)
        return created

    async def get_status(self, job_id: str) -> ExportStatusRead:
        r = await self._client.get(self._url(f"/export/{job_id}/status"), headers=self._headers())
        return ExportStatusRead.model_validate(self._unwrap(r, "Status check failed"))

    def download_url(self, job_id: str) -> str:
        return self._url(f"/export/{job_id}/download")

    async def wait_for_completion(
        self,
        job_id: str,
        on_progress: Optional[Callable[[float], None]] = None,
        poll_interval: float = 2.0,
        timeout: float = 300.0,
    ) -> ExportStatusRead:
        """Poll the job status until it completes.

        Args:
            job_id: Export job to watch.
            on_progress: Called after every poll with the progress as a 0..1 fraction.
            poll_interval: Seconds to wait between polls.
            timeout: Seconds after which polling gives up.

        Raises:
            ExportFailedError: The server reported the job as FAILED.
            ExportTimeoutError: The job did not finish within ``timeout``.
        """
        started = time.monotonic()
        while True:
            status = await self.get_status(job_id)
            if on_progress is not None:
                on_progress(status.progress / 100)

            if status.status == ExportStatus.COMPLETED:
                return status
            if status.status == ExportStatus.FAILED:
                raise ExportFailedError(job_id, status.error_message)
            if time.monotonic() - started >= timeout:
                raise ExportTimeoutError(job_id, timeout)

            await asyncio.sleep(poll_interval)
