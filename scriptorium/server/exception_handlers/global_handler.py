"""
JSON error responses.

``ScriptoriumError`` subclasses carry their own status code and become
``{"detail": message}`` bodies, the same shape FastAPI uses for
``HTTPException``. Anything else that escapes a route is logged with its
traceback under an error id and answered with a generic 500.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from scriptorium.core.errors import ScriptoriumError
from scriptorium.core.logging_config import get_logger
from scriptorium.core.monitoring import log_error

logger = get_logger(__name__)


async def scriptorium_error_handler(request: Request, exc: ScriptoriumError) -> JSONResponse:
    """Answer a domain error with its status code; 401s also get a Bearer challenge."""
    logger.info(f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler for unexpected exceptions.

    The response exposes only the exception type and an ``error_id``; the
    same id appears in the server log next to the traceback and request
    details, so a user report can be matched to the log entry.
    """
    error_id = id(exc)
    error_type = type(exc).__name__
    path = request.url.path

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {path}: {exc}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "error_type": error_type,
            "method": request.method,
            "path": path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "traceback": traceback.format_exc(),
        },
    )
    log_error(error_type, str(exc), {"error_id": error_id, "path": path})

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error_id": error_id, "error_type": error_type},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Install both handlers on ``app``."""
    app.add_exception_handler(ScriptoriumError, scriptorium_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers installed")
