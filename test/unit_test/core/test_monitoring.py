"""
Unit tests for the Logfire monitoring module.

This test suite covers:
- Initialization gated on LOGFIRE_ENABLED and LOGFIRE_TOKEN
- Instrumentation of SQLAlchemy, HTTPX and FastAPI
- The log helpers being no-ops until Logfire is configured
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI

import vibe_creator.core.monitoring as monitoring
from vibe_creator.server.core.config import LogfireConfig


@pytest.fixture(autouse=True)
def _reset_configured(monkeypatch):
    monkeypatch.setattr(monitoring, "_logfire_configured", False)


@pytest.fixture
def mock_logfire():
    with patch("vibe_creator.core.monitoring.logfire") as mocked:
        yield mocked


def _settings(**config) -> MagicMock:
    fake = MagicMock()
    fake.logfire = LogfireConfig(**config)
    return fake


class TestInitializeLogfire:
    def test_disabled(self, mock_logfire):
        with patch("vibe_creator.core.monitoring.settings", _settings(enabled=False, token="t")):
            monitoring.initialize_logfire()

        mock_logfire.configure.assert_not_called()
        assert monitoring.is_logfire_configured() is False

    def test_enabled_without_token(self, mock_logfire):
        with patch("vibe_creator.core.monitoring.settings", _settings(enabled=True)):
            monitoring.initialize_logfire()

        mock_logfire.configure.assert_not_called()
        assert monitoring.is_logfire_configured() is False

    def test_enabled_with_app(self, mock_logfire):
        app = FastAPI()
        config = _settings(enabled=True, token="write-token", service_name="vibe-api", environment="staging")
        with patch("vibe_creator.core.monitoring.settings", config):
            monitoring.initialize_logfire(app)

        mock_logfire.configure.assert_called_once_with(
            token="write-token", service_name="vibe-api", environment="staging"
        )
        mock_logfire.instrument_sqlalchemy.assert_called_once()
        mock_logfire.instrument_httpx.assert_called_once()
        mock_logfire.instrument_fastapi.assert_called_once_with(app=app)
        assert monitoring.is_logfire_configured() is True

    def test_enabled_without_app_skips_fastapi(self, mock_logfire):
        with patch("vibe_creator.core.monitoring.settings", _settings(enabled=True, token="t")):
            monitoring.initialize_logfire()

        mock_logfire.instrument_fastapi.assert_not_called()
        assert monitoring.is_logfire_configured() is True


class TestLogHelpers:
    def test_helpers_are_silent_when_not_configured(self, mock_logfire):
        monitoring.log_api_request("GET", "/api/v1/projects", 200, 12.5)
        monitoring.log_export_job("job-1", "COMPLETED", 100)
        monitoring.log_payment_event("pay-1", "PAID", "PRO", 199000)
        monitoring.log_error("ValueError", "boom")

        mock_logfire.info.assert_not_called()
        mock_logfire.error.assert_not_called()

    def test_api_request(self, mock_logfire, monkeypatch):
        monkeypatch.setattr(monitoring, "_logfire_configured", True)

        monitoring.log_api_request("POST", "/api/v1/export/request", 201, 40.0)

        mock_logfire.info.assert_called_once_with(
            "API request completed",
            method="POST",
            path="/api/v1/export/request",
            status_code=201,
            duration_ms=40.0,
        )

    def test_export_job(self, mock_logfire, monkeypatch):
        monkeypatch.setattr(monitoring, "_logfire_configured", True)

        monitoring.log_export_job("job-1", "FAILED", 25, error_message="ffmpeg trim failed")

        _, kwargs = mock_logfire.info.call_args
        assert kwargs == {"job_id": "job-1", "status": "FAILED", "progress": 25, "error_message": "ffmpeg trim failed"}

    def test_payment_event(self, mock_logfire, monkeypatch):
        monkeypatch.setattr(monitoring, "_logfire_configured", True)

        monitoring.log_payment_event("pay-1", "PAID", "CREATOR", 99000)

        mock_logfire.info.assert_called_once_with(
            "Payment {status}", payment_id="pay-1", status="PAID", tier="CREATOR", amount=99000
        )

    def test_error_with_context(self, mock_logfire, monkeypatch):
        monkeypatch.setattr(monitoring, "_logfire_configured", True)

        monitoring.log_error("RuntimeError", "disk full", {"error_id": "abc"})

        mock_logfire.error.assert_called_once_with("RuntimeError: disk full", error_id="abc")
