"""
Handlers translating expected errors into the error envelope.

- ``AppError`` keeps its own code and status.
- ``HTTPException`` (including routing 404/405) maps the status onto a code.
- Request validation failures answer 400 ``VALIDATION_ERROR`` with the
  offending fields in ``details``.
- Rate limit hits answer 429 ``RATE_LIMITED``.
"""

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from vibe_creator.core.logging_config import get_logger
from vibe_creator.server.errors import AppError, ErrorCode

logger = get_logger(__name__)

_STATUS_CODES = {
    400: ErrorCode.INVALID_INPUT,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.ALREADY_EXISTS,
    413: ErrorCode.FILE_TOO_LARGE,
    429: ErrorCode.RATE_LIMITED,
}


def error_response(status_code: int, code: str, message: str, details=None, headers=None) -> JSONResponse:
    body = {"code": code, "message": message}
    if details is not None:
        body["details"] = details
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": jsonable_encoder(body)},
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code.value}: {exc.message}")
    return error_response(exc.status_code, exc.code.value, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(exc.status_code, code.value, message, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    message = first.get("msg", "Invalid request")
    logger.debug(f"Validation failed on {request.method} {request.url.path}: {errors}")
    details = [
        {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg")} for err in errors
    ]
    return error_response(400, ErrorCode.VALIDATION_ERROR.value, message, details)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    client = request.client.host if request.client else "-"
    logger.warning(f"Rate limit {exc.detail} exceeded by {client} on {request.method} {request.url.path}")
    return error_response(429, ErrorCode.RATE_LIMITED.value, "Too many requests, please try again later")
