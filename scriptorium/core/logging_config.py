"""
Logging setup for Scriptorium.

Log level, line format and the optional log file come from the
``SCRIPTORIUM_LOG_*`` settings. Output always goes to the console; when file
logging is enabled a size-rotated ``scriptorium.log`` is written as well.
Noisy third-party loggers are capped through ``MODULE_LOG_LEVELS``.

Modules obtain their logger with ``get_logger(__name__)``.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from scriptorium.server.core.config import settings

LOG_LEVEL = settings.log_level.upper()
LOG_FORMAT = settings.log_format
LOG_FILE_DIR = settings.log_file_dir
ENABLE_FILE_LOGGING = settings.log_file_enabled

LOG_FILE_NAME = "scriptorium.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SIMPLE_FORMAT = "%(levelname)-8s %(name)s: %(message)s"
DETAILED_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(module)s.%(funcName)s:%(lineno)d] %(message)s"
JSON_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"location": "%(module)s.%(funcName)s:%(lineno)d", "message": "%(message)s"}'
)

FORMATS = {"simple": SIMPLE_FORMAT, "detailed": DETAILED_FORMAT, "json": JSON_FORMAT}

MODULE_LOG_LEVELS = {
    "scriptorium": "INFO",
    "scriptorium.execution": "DEBUG",
    "scriptorium.server.api": "DEBUG",
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "aiosqlite": "WARNING",
    "httpx": "WARNING",
    "asyncio": "WARNING",
    "uvicorn.access": "INFO",
}


def _handlers(level: str, formatter: logging.Formatter, with_file: bool) -> List[logging.Handler]:
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    handlers: List[logging.Handler] = [console]

    if with_file:
        directory = Path(LOG_FILE_DIR)
        directory.mkdir(parents=True, exist_ok=True)
        # The file keeps DEBUG records whatever the console level is
        file_handler = RotatingFileHandler(
            directory / LOG_FILE_NAME, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)
    return handlers


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    (Re)configure the root logger.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        log_level: Console level; defaults to ``SCRIPTORIUM_LOG_LEVEL``
        log_format: ``simple``, ``detailed`` or ``json``; unknown names fall back to ``detailed``
        enable_file: Set False to skip the log file even when file logging is configured
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT
    formatter = logging.Formatter(FORMATS.get(fmt, DETAILED_FORMAT), datefmt=DATE_FORMAT)
    with_file = enable_file and ENABLE_FILE_LOGGING

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    # Levels are enforced per handler
    root.setLevel(logging.DEBUG)
    for handler in _handlers(level, formatter, with_file):
        root.addHandler(handler)

    for name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(module_level)

    root.info(f"Logging ready: level={level} format={fmt} file={'on' if with_file else 'off'}")


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, usually called with ``__name__``."""
    return logging.getLogger(name)
