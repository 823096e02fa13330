"""
Unit tests for the Logfire monitoring module.

This test suite covers:
- Initialization with the feature disabled, missing token and full configuration
- Instrumentation feature flags
- The request, signal score and error logging helpers with and without Logfire
"""

import sys
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI

from productlobby.core import monitoring

MODULE = "productlobby.core.monitoring"


@pytest.fixture
def fake_logfire():
    """Stand-in for the logfire package so no data leaves the test process."""
    fake = MagicMock()
    with patch.dict(sys.modules, {"logfire": fake}):
        yield fake


@pytest.fixture(autouse=True)
def _reset_initialized():
    with patch(f"{MODULE}._initialized", False):
        yield


class TestInitializeLogfire:
    @patch(f"{MODULE}.LOGFIRE_ENABLED", False)
    @patch(f"{MODULE}.logger")
    def test_initialize_logfire_disabled(self, mock_logger):
        monitoring.initialize_logfire()

        mock_logger.info.assert_called_once()
        assert "disabled" in mock_logger.info.call_args[0][0].lower()
        assert monitoring.is_enabled() is False

    @patch(f"{MODULE}.LOGFIRE_ENABLED", True)
    @patch(f"{MODULE}.LOGFIRE_TOKEN", "")
    @patch(f"{MODULE}.logger")
    def test_initialize_logfire_no_token(self, mock_logger):
        monitoring.initialize_logfire()

        mock_logger.warning.assert_called_once()
        assert "token" in mock_logger.warning.call_args[0][0].lower()
        assert monitoring.is_enabled() is False

    @patch(f"{MODULE}.LOGFIRE_ENABLED", True)
    @patch(f"{MODULE}.LOGFIRE_TOKEN", "test-token")
    @patch(f"{MODULE}.LOGFIRE_SERVICE_NAME", "test-service")
    @patch(f"{MODULE}.LOGFIRE_SERVICE_VERSION", "1.0.0")
    @patch(f"{MODULE}.LOGFIRE_ENVIRONMENT", "test")
    @patch(f"{MODULE}.LOGFIRE_TRACE_SQLALCHEMY", True)
    @patch(f"{MODULE}.LOGFIRE_TRACE_FASTAPI", True)
    def test_initialize_logfire_configures_and_instruments(self, fake_logfire):
        app = FastAPI()

        monitoring.initialize_logfire(app)

        fake_logfire.configure.assert_called_once_with(
            token="test-token",
            service_name="test-service",
            service_version="1.0.0",
            environment="test",
        )
        fake_logfire.instrument_sqlalchemy.assert_called_once()
        fake_logfire.instrument_fastapi.assert_called_once_with(app=app)
        assert monitoring.is_enabled() is True

    @patch(f"{MODULE}.LOGFIRE_ENABLED", True)
    @patch(f"{MODULE}.LOGFIRE_TOKEN", "test-token")
    @patch(f"{MODULE}.LOGFIRE_TRACE_SQLALCHEMY", False)
    @patch(f"{MODULE}.LOGFIRE_TRACE_FASTAPI", True)
    def test_initialize_logfire_skips_fastapi_without_app(self, fake_logfire):
        monitoring.initialize_logfire(app=None)

        fake_logfire.instrument_sqlalchemy.assert_not_called()
        fake_logfire.instrument_fastapi.assert_not_called()

    @patch(f"{MODULE}.LOGFIRE_ENABLED", True)
    @patch(f"{MODULE}.LOGFIRE_TOKEN", "test-token")
    @patch(f"{MODULE}.LOGFIRE_TRACE_SQLALCHEMY", True)
    @patch(f"{MODULE}.logger")
    def test_instrumentation_failure_is_only_a_warning(self, mock_logger, fake_logfire):
        fake_logfire.instrument_sqlalchemy.side_effect = RuntimeError("no engine")

        monitoring.initialize_logfire()

        mock_logger.warning.assert_called_once()
        assert monitoring.is_enabled() is True

    @patch(f"{MODULE}.LOGFIRE_ENABLED", True)
    @patch(f"{MODULE}.LOGFIRE_TOKEN", "test-token")
    @patch(f"{MODULE}.logger")
    def test_configure_failure_is_logged(self, mock_logger, fake_logfire):
        fake_logfire.configure.side_effect = RuntimeError("bad token")

        monitoring.initialize_logfire()

        mock_logger.error.assert_called_once()
        assert monitoring.is_enabled() is False


class TestLoggingHelpers:
    @patch(f"{MODULE}.logger")
    def test_api_request_without_logfire_goes_to_debug(self, mock_logger):
        monitoring.log_api_request("GET", "/api/v1/health", 200, 1.5)

        mock_logger.debug.assert_called_once()
        assert "/api/v1/health" in mock_logger.debug.call_args[0][0]

    def test_api_request_with_logfire(self, fake_logfire):
        with patch(f"{MODULE}._initialized", True):
            monitoring.log_api_request("POST", "/api/v1/campaigns", 201, 12.0)

        fake_logfire.info.assert_called_once_with(
            "API request completed", method="POST", path="/api/v1/campaigns", status_code=201, duration_ms=12.0
        )

    def test_signal_score_update_with_logfire(self, fake_logfire):
        with patch(f"{MODULE}._initialized", True):
            monitoring.log_signal_score_update("c1", 74.3, "high")

        fake_logfire.info.assert_called_once_with("Signal score updated", campaign_id="c1", score=74.3, tier="high")

    def test_error_without_logfire_is_silent(self, fake_logfire):
        monitoring.log_error("ValueError", "boom")

        fake_logfire.error.assert_not_called()

    def test_error_with_logfire_includes_context(self, fake_logfire):
        with patch(f"{MODULE}._initialized", True):
            monitoring.log_error("ValueError", "boom", {"path": "/x"})

        fake_logfire.error.assert_called_once_with("ValueError: boom", path="/x")
