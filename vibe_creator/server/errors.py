"""Error types raised by services and routers.

Purpose:
- Carry a stable machine-readable error code and the HTTP status that the
  exception handlers translate into the ``{"success": false, "error": ...}``
  envelope.

Usage:
- Raise a specific subclass (``NotFoundError``, ``ForbiddenError``...) or
  ``AppError`` directly with an explicit code and status.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    EXPORT_ERROR = "EXPORT_ERROR"
    NOT_READY = "NOT_READY"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    NO_FILE = "NO_FILE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    PAYMENT_ERROR = "PAYMENT_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppError(Exception):
    """Base error for failures reported to API clients.

    Args:
        code: Machine-readable error code.
        message: Human-readable error description.
        status_code: HTTP status to respond with.
        details: Optional structured context returned to the client.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        status_code: int = 400,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found", *, code: ErrorCode = ErrorCode.NOT_FOUND) -> None:
        super().__init__(code, message, status_code=404)


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Authentication required", *, code: ErrorCode = ErrorCode.UNAUTHORIZED) -> None:
        super().__init__(code, message, status_code=401)


class ForbiddenError(AppError):
    def __init__(self, message: str = "Admin access required", *, code: ErrorCode = ErrorCode.FORBIDDEN) -> None:
        super().__init__(code, message, status_code=403)


class ConflictError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.ALREADY_EXISTS, message, status_code=409)


class ValidationFailedError(AppError):
    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(ErrorCode.VALIDATION_ERROR, message, status_code=400, details=details)


class QuotaExceededError(AppError):
    """Raised when a user has no exports left in the current period."""

    def __init__(self) -> None:
        super().__init__(
            ErrorCode.QUOTA_EXCEEDED,
            "Export quota exceeded. Please upgrade your plan.",
            status_code=403,
            details={"remaining": 0},
        )


class ExportJobError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.EXPORT_ERROR, message, status_code=400)


class PaymentGatewayError(AppError):
    """Raised when the payment gateway rejects or fails a request."""

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(ErrorCode.PAYMENT_ERROR, message, status_code=500, details=details)
