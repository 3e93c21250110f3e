"""
Monitoring and Tracing Configuration Module.

This module provides integration with Pydantic Logfire for monitoring and
tracing of the Vibe Creator backend, including:
- API endpoint tracing
- Database operation monitoring
- Outbound HTTP calls (Xendit, Turnstile)
- Export job and payment lifecycle events

Logfire is only configured when ``LOGFIRE_ENABLED`` is set and a token is
available. Until then every ``log_*`` helper is a no-op apart from debug
logging, so the rest of the code can call them unconditionally.
"""

import logging
from typing import Any, Optional

import logfire
from fastapi import FastAPI

from vibe_creator.server.core.config import settings

logger = logging.getLogger(__name__)

_logfire_configured = False


def is_logfire_configured() -> bool:
    return _logfire_configured


def initialize_logfire(app: FastAPI | None = None) -> None:
    """
    Initialize Logfire for monitoring and tracing.

    This function sets up Logfire with automatic instrumentation for:
    - SQLAlchemy database operations
    - HTTPX HTTP requests
    - FastAPI endpoints

    Args:
        app: FastAPI application instance for FastAPI instrumentation (optional).
    """
    global _logfire_configured

    config = settings.logfire
    if not config.enabled:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return

    if not config.token:
        logger.warning(
            "Logfire is enabled but LOGFIRE_TOKEN is not set. "
            "Monitoring will not work. Set LOGFIRE_TOKEN to enable Logfire."
        )
        return

    logfire.configure(
        token=config.token,
        service_name=config.service_name,
        environment=config.environment,
    )
    logfire.instrument_sqlalchemy()
    logfire.instrument_httpx()
    if app is not None:
        logfire.instrument_fastapi(app=app)
    else:
        logger.debug("FastAPI app instance not provided, skipping FastAPI instrumentation")

    _logfire_configured = True
    logger.info(f"Logfire monitoring initialized: environment={config.environment}, service={config.service_name}")


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Log an API request with performance metrics.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
    """
    if not _logfire_configured:
        return
    logfire.info(
        "API request completed",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=duration_ms,
    )


def log_export_job(job_id: str, status: str, progress: int, error_message: Optional[str] = None) -> None:
    """
    Log an export job state transition.

    Args:
        job_id: Export job identifier
        status: New job status
        progress: Progress percentage at the time of the transition
        error_message: Failure reason for failed jobs
    """
    logger.debug(f"Export job {job_id} -> {status} ({progress}%)")
    if not _logfire_configured:
        return
    logfire.info(
        "Export job {status}",
        job_id=job_id,
        status=status,
        progress=progress,
        error_message=error_message,
    )


def log_payment_event(payment_id: str, status: str, tier: str, amount: int) -> None:
    """Log a payment status change."""
    logger.debug(f"Payment {payment_id} -> {status} ({tier}, {amount})")
    if not _logfire_configured:
        return
    logfire.info("Payment {status}", payment_id=payment_id, status=status, tier=tier, amount=amount)


def log_error(error_type: str, error_message: str, context: Optional[dict[str, Any]] = None) -> None:
    """
    Log an error with context for debugging.

    Args:
        error_type: Type of error
        error_message: Error message
        context: Additional context dictionary
    """
    if not _logfire_configured:
        return
    logfire.error(f"{error_type}: {error_message}", **(context or {}))
