"""Unit tests for the optional Logfire integration."""

import sys
from unittest.mock import MagicMock, patch

import pytest

from scriptorium.core import monitoring


@pytest.fixture(autouse=True)
def _reset_logfire():
    with patch.object(monitoring, "_logfire", None):
        yield


def _enabled(token: str = "token"):
    return patch.multiple(monitoring, LOGFIRE_ENABLED=True, LOGFIRE_TOKEN=token)


class TestInitializeLogfire:
    """Test initialize_logfire configuration paths."""

    def test_disabled_returns_false(self):
        with patch.object(monitoring, "LOGFIRE_ENABLED", False):
            assert monitoring.initialize_logfire() is False
        assert monitoring.is_enabled() is False

    def test_enabled_without_token_returns_false(self):
        with _enabled(token=""):
            assert monitoring.initialize_logfire() is False

    def test_missing_package_returns_false(self):
        with _enabled(), patch.dict(sys.modules, {"logfire": None}):
            assert monitoring.initialize_logfire() is False

    def test_enabled_with_token_configures_logfire(self):
        fake_logfire = MagicMock()
        app = MagicMock()
        with _enabled(), patch.dict(sys.modules, {"logfire": fake_logfire}):
            assert monitoring.initialize_logfire(app) is True
            assert monitoring.is_enabled() is True

        fake_logfire.configure.assert_called_once()
        assert fake_logfire.configure.call_args.kwargs["service_name"] == monitoring.LOGFIRE_SERVICE_NAME
        fake_logfire.instrument_fastapi.assert_called_once_with(app=app)
        fake_logfire.instrument_sqlalchemy.assert_called_once()

    def test_configure_failure_returns_false(self):
        fake_logfire = MagicMock()
        fake_logfire.configure.side_effect = RuntimeError("boom")
        with _enabled(), patch.dict(sys.modules, {"logfire": fake_logfire}):
            assert monitoring.initialize_logfire() is False
        assert monitoring.is_enabled() is False


class TestLogHelpers:
    """Test the log_* helpers."""

    def test_helpers_are_silent_when_disabled(self):
        fake_logfire = MagicMock()
        with patch.dict(sys.modules, {"logfire": fake_logfire}):
            monitoring.log_api_request("GET", "/health", 200, 1.0)
            monitoring.log_code_execution("python", "success", 3.0)
            monitoring.log_error("ValueError", "bad")

        fake_logfire.info.assert_not_called()
        fake_logfire.error.assert_not_called()

    def test_log_code_execution_forwards_fields(self):
        fake_logfire = MagicMock()
        with patch.object(monitoring, "_logfire", fake_logfire):
            monitoring.log_code_execution("python", "success", 12.5, template_id=4)

        kwargs = fake_logfire.info.call_args.kwargs
        assert kwargs["language"] == "python"
        assert kwargs["status"] == "success"
        assert kwargs["duration_ms"] == 12.5
        assert kwargs["template_id"] == 4

    def test_log_api_request_forwards_fields(self):
        fake_logfire = MagicMock()
        with patch.object(monitoring, "_logfire", fake_logfire):
            monitoring.log_api_request("GET", "/health", 200, 1.0)

        kwargs = fake_logfire.info.call_args.kwargs
        assert (kwargs["method"], kwargs["path"], kwargs["status_code"]) == ("GET", "/health", 200)

    def test_log_error_includes_context(self):
        fake_logfire = MagicMock()
        with patch.object(monitoring, "_logfire", fake_logfire):
            monitoring.log_error("ValueError", "bad {value}", {"path": "/x"})

        fake_logfire.error.assert_called_once_with(
            "{error_type}: {error_message}", error_type="ValueError", error_message="bad {value}", path="/x"
        )
