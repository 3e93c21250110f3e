"""
Exception handlers for the Vibe Creator server.

This package contains custom exception handlers for different error types
and a setup function to register them with the FastAPI application.
"""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from vibe_creator.core.logging_config import get_logger
from vibe_creator.server.errors import AppError

from .app_handlers import (
    app_error_handler,
    http_exception_handler,
    rate_limit_exceeded_handler,
    validation_exception_handler,
)
from .global_handler import global_exception_handler

logger = get_logger(__name__)


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")


__all__ = ["setup_exception_handlers"]
