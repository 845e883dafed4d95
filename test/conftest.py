"""Shared test configuration.

Environment variables are set before any ``scriptorium`` module is imported,
because the settings object and the database engine are created at import
time.
"""

from __future__ import annotations

import os
import sys
import tempfile

os.environ.setdefault("SCRIPTORIUM_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SCRIPTORIUM_DATABASE_CREATE_TABLES", "true")
os.environ.setdefault("SCRIPTORIUM_BCRYPT_ROUNDS", "4")
os.environ.setdefault("SCRIPTORIUM_JWT_SECRET", "test-access-secret")
os.environ.setdefault("SCRIPTORIUM_JWT_REFRESH_SECRET", "test-refresh-secret")
os.environ.setdefault("SCRIPTORIUM_EXECUTION_PYTHON_COMMAND", sys.executable)
os.environ.setdefault("SCRIPTORIUM_UPLOAD_DIR", tempfile.mkdtemp(prefix="scriptorium-uploads-"))
os.environ.setdefault("LOGFIRE_ENABLED", "false")
