"""
Per-request timing and logging.

Every response gets an ``X-Process-Time`` header in milliseconds. Requests
slower than ``SLOW_REQUEST_MS`` are logged as warnings, the rest at debug
level, and each one is also reported to Logfire when tracing is on.
"""

import time
from typing import Awaitable, Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from scriptorium.core.logging_config import get_logger
from scriptorium.core.monitoring import log_api_request
from scriptorium.server.core import constant

logger = get_logger(__name__)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Times each request and logs its outcome."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        started = time.perf_counter()
        request.state.start_time = started
        method, path = request.method, request.url.path

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = _elapsed_ms(started)
            logger.error(
                f"{method} {path} raised after {duration_ms:.2f}ms",
                exc_info=True,
                extra={"method": method, "path": path, "duration_ms": duration_ms, "error": str(e)},
            )
            log_api_request(method=method, path=path, status_code=500, duration_ms=duration_ms)
            raise

        duration_ms = _elapsed_ms(started)
        response.headers["X-Process-Time"] = f"{duration_ms:.2f}"
        log_api_request(method=method, path=path, status_code=response.status_code, duration_ms=duration_ms)

        if duration_ms > constant.SLOW_REQUEST_MS:
            logger.warning(
                f"Slow API request: {method} {path} -> {response.status_code} in {duration_ms:.2f}ms",
                extra={"method": method, "path": path, "status_code": response.status_code, "duration_ms": duration_ms},
            )
        else:
            logger.debug(f"{method} {path} -> {response.status_code} in {duration_ms:.2f}ms")
        return response
