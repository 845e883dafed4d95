"""
Optional Logfire tracing.

``initialize_logfire`` turns Logfire on when ``LOGFIRE_ENABLED`` is true and
``LOGFIRE_TOKEN`` is set, instrumenting FastAPI and SQLAlchemy. The
``log_*`` helpers send structured events for finished requests, code runs
and unhandled errors; until Logfire has been initialized they only write a
debug line to the standard logger.
"""

import logging
import os
from typing import Any, Optional

from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


LOGFIRE_ENABLED = _flag("LOGFIRE_ENABLED", "false")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "scriptorium")
LOGFIRE_SERVICE_VERSION = os.getenv("LOGFIRE_SERVICE_VERSION", "0.1.0")
LOGFIRE_TRACE_SQLALCHEMY = _flag("LOGFIRE_TRACE_SQLALCHEMY", "true")
LOGFIRE_TRACE_FASTAPI = _flag("LOGFIRE_TRACE_FASTAPI", "true")

# The configured logfire module, or None while tracing is off
_logfire: Optional[Any] = None


def is_enabled() -> bool:
    return _logfire is not None


def initialize_logfire(app: Optional[FastAPI] = None) -> bool:
    """
    Configure Logfire if the environment asks for it.

    Args:
        app: Application to instrument; SQLAlchemy is instrumented regardless

    Returns:
        Whether tracing is now active
    """
    global _logfire

    if not LOGFIRE_ENABLED:
        logger.info("Logfire disabled (LOGFIRE_ENABLED is not set)")
        return False
    if not LOGFIRE_TOKEN:
        logger.warning("LOGFIRE_ENABLED is set but LOGFIRE_TOKEN is empty; tracing stays off")
        return False

    try:
        import logfire
    except ImportError:
        logger.warning("LOGFIRE_ENABLED is set but logfire is not installed; install scriptorium[monitoring]")
        return False

    try:
        logfire.configure(
            token=LOGFIRE_TOKEN,
            service_name=LOGFIRE_SERVICE_NAME,
            service_version=LOGFIRE_SERVICE_VERSION,
            environment=LOGFIRE_ENVIRONMENT,
        )
    except Exception as e:
        logger.error(f"Logfire configuration failed: {e}", exc_info=True)
        return False

    if LOGFIRE_TRACE_SQLALCHEMY:
        logfire.instrument_sqlalchemy()
    if LOGFIRE_TRACE_FASTAPI and app is not None:
        logfire.instrument_fastapi(app=app)

    _logfire = logfire
    logger.info(f"Logfire tracing on for {LOGFIRE_SERVICE_NAME} ({LOGFIRE_ENVIRONMENT})")
    return True


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """Record one finished HTTP request."""
    if _logfire is None:
        return
    _logfire.info(
        "{method} {path} -> {status_code}",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=duration_ms,
    )


def log_code_execution(language: str, status: str, duration_ms: float, template_id: Optional[int] = None) -> None:
    """
    Record one finished code execution.

    Args:
        language: Canonical language name
        status: success, runtime_error, compile_error or timeout
        duration_ms: Wall-clock time including compilation
        template_id: Stored template that was run, if any
    """
    if _logfire is None:
        logger.debug(f"Execution event not traced: language={language} status={status}")
        return
    _logfire.info(
        "Code execution {language}: {status}",
        language=language,
        status=status,
        duration_ms=duration_ms,
        template_id=template_id,
    )


def log_error(error_type: str, error_message: str, context: Optional[dict] = None) -> None:
    """Record an unhandled error with extra context attributes."""
    if _logfire is None:
        return
    _logfire.error(
        "{error_type}: {error_message}", error_type=error_type, error_message=error_message, **(context or {})
    )
