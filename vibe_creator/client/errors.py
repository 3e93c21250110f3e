"""Error types raised by :class:`ExportApiClient`.

Purpose:
- Surface the server's error envelope (``code``, ``message``, ``details``)
  together with the HTTP status code.
- Distinguish a failed render and a polling timeout from transport or API
  errors.
"""

from __future__ import annotations

from typing import Any, Optional


class ExportClientError(Exception):
    """Base error for export API failures.

    Args:
        message: Human-readable error description, taken from the server when available.
        status_code: HTTP status code of the failed response.
        code: Machine-readable error code from the error envelope.
        details: Optional structured details from the error envelope.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.details = details


class ExportFailedError(ExportClientError):
    """Raised when the server reports the export job as FAILED."""

    def __init__(self, job_id: str, message: Optional[str]) -> None:
        super().__init__(message or "Export failed")
        self.job_id = job_id


class ExportTimeoutError(ExportClientError):
    """Raised when an export does not finish within the polling timeout."""

    def __init__(self, job_id: str, timeout: float) -> None:
        super().__init__("Export timeout")
        self.job_id = job_id
        self.timeout = timeout
