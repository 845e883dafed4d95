"""
Scriptorium Server Package.

This package contains the web server implementation for Scriptorium.
It includes the API definition, middleware, exception handlers and
the service layer assembling API read models.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Settings and API constants.
    middleware: Request logging and timing.
    exception_handlers: Mapping of errors to JSON responses.
    services: Read-model assembly and cross-repository operations.
"""
