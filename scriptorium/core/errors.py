"""Error types shared across Scriptorium.

Defines a small hierarchy of exceptions raised below the route layer. Each
error carries the HTTP status it maps to; the server registers a handler
that turns any ``ScriptoriumError`` into a ``{"detail": ...}`` response.
"""

from __future__ import annotations


class ScriptoriumError(Exception):
    """Base error for all Scriptorium exceptions."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidTokenError(ScriptoriumError):
    """Raised when a bearer or refresh token cannot be trusted."""

    status_code = 401

    def __init__(self, reason: str = "Invalid or expired token") -> None:
        super().__init__(reason)


class ExecutionError(ScriptoriumError):
    """Base error for code execution failures that produce no result."""


class UnsupportedLanguageError(ExecutionError):
    """Raised when code is submitted in a language the runner does not know."""

    def __init__(self, language: str) -> None:
        super().__init__(f"Unsupported language: '{language}'")
        self.language = language


class ToolchainUnavailableError(ExecutionError):
    """Raised when the compiler or interpreter binary is missing on the host."""

    status_code = 503

    def __init__(self, command: str) -> None:
        super().__init__(f"Toolchain not available: '{command}'")
        self.command = command


class InvalidUploadError(ScriptoriumError):
    """Raised when an uploaded file has a type that is not accepted."""


class UploadTooLargeError(ScriptoriumError):
    """Raised when an uploaded file exceeds the configured size limit."""

    status_code = 413

    def __init__(self, limit_bytes: int) -> None:
        super().__init__(f"File too large; the limit is {limit_bytes} bytes")
        self.limit_bytes = limit_bytes
