"""
Unit tests for server exception handlers.

Tests cover the mapping of domain errors to HTTP responses and the global
handler for unexpected exceptions.
"""

import json
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from scriptorium.core.errors import (
    InvalidTokenError,
    ScriptoriumError,
    ToolchainUnavailableError,
    UnsupportedLanguageError,
    UploadTooLargeError,
)
from scriptorium.server.exception_handlers import setup_exception_handlers
from scriptorium.server.exception_handlers.global_handler import (
    global_exception_handler,
    scriptorium_error_handler,
)

HANDLER_MODULE = "scriptorium.server.exception_handlers.global_handler"


@pytest.fixture
def mock_request():
    """Create a mock request object."""
    request = Mock(spec=Request)
    request.method = "POST"
    request.url.path = "/api/v1/execute"
    request.query_params = {"page": "1"}
    request.client = Mock()
    request.client.host = "127.0.0.1"
    return request


class TestScriptoriumErrorHandler:
    """Test the domain error handler."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "exc, status_code",
        [
            (UnsupportedLanguageError("cobol"), 400),
            (ToolchainUnavailableError("javac"), 503),
            (UploadTooLargeError(10), 413),
            (ScriptoriumError("Bad input"), 400),
        ],
    )
    async def test_status_and_detail(self, mock_request, exc, status_code):
        response = await scriptorium_error_handler(mock_request, exc)

        assert isinstance(response, JSONResponse)
        assert response.status_code == status_code
        assert json.loads(response.body.decode()) == {"detail": exc.message}
        assert "www-authenticate" not in response.headers

    @pytest.mark.asyncio
    async def test_invalid_token_challenges_bearer(self, mock_request):
        response = await scriptorium_error_handler(mock_request, InvalidTokenError())

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert json.loads(response.body.decode())["detail"] == "Invalid or expired token"


class TestGlobalExceptionHandler:
    """Test suite for global exception handler."""

    @pytest.mark.asyncio
    async def test_logs_error_with_context(self, mock_request):
        exc = ValueError("Test error")

        with patch(f"{HANDLER_MODULE}.logger") as mock_logger:
            await global_exception_handler(mock_request, exc)

        mock_logger.error.assert_called_once()
        message, kwargs = mock_logger.error.call_args[0][0], mock_logger.error.call_args[1]
        assert "Unhandled exception" in message
        assert "/api/v1/execute" in message
        assert kwargs["extra"]["error_type"] == "ValueError"
        assert kwargs["extra"]["method"] == "POST"
        assert kwargs["extra"]["query_params"] == {"page": "1"}
        assert kwargs["extra"]["client"] == "127.0.0.1"

    @pytest.mark.asyncio
    async def test_returns_500_body(self, mock_request):
        exc = RuntimeError("Test error")

        with patch(f"{HANDLER_MODULE}.logger"):
            response = await global_exception_handler(mock_request, exc)

        assert response.status_code == 500
        body = json.loads(response.body.decode())
        assert body["detail"] == "Internal server error"
        assert body["error_type"] == "RuntimeError"
        assert body["error_id"] == id(exc)

    @pytest.mark.asyncio
    async def test_missing_client(self, mock_request):
        mock_request.client = None

        with patch(f"{HANDLER_MODULE}.logger") as mock_logger:
            response = await global_exception_handler(mock_request, RuntimeError("boom"))

        assert response.status_code == 500
        assert mock_logger.error.call_args[1]["extra"]["client"] == "unknown"

    @pytest.mark.asyncio
    async def test_forwards_to_monitoring(self, mock_request):
        exc = KeyError("missing")

        with patch(f"{HANDLER_MODULE}.logger"), patch(f"{HANDLER_MODULE}.log_error") as mock_log_error:
            await global_exception_handler(mock_request, exc)

        mock_log_error.assert_called_once()
        assert mock_log_error.call_args[0][0] == "KeyError"


class TestSetupExceptionHandlers:
    """Test handler registration."""

    def test_registers_handlers(self):
        app = FastAPI()

        setup_exception_handlers(app)

        assert app.exception_handlers[ScriptoriumError] is scriptorium_error_handler
        assert app.exception_handlers[Exception] is global_exception_handler
