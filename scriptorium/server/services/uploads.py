"""
Avatar upload storage.

Avatars are written to the configured upload directory under a random name
and served back from ``/uploads``.
"""

import secrets
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from scriptorium.core.errors import InvalidUploadError, UploadTooLargeError
from scriptorium.core.logging_config import get_logger
from scriptorium.server.core.config import UploadConfig, settings

logger = get_logger(__name__)

UPLOADS_URL_PREFIX = "/uploads"
ALLOWED_AVATAR_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


async def save_avatar(upload: UploadFile, config: Optional[UploadConfig] = None) -> str:
    """
    Validate and store an uploaded avatar image.

    Args:
        upload: Multipart file from the request
        config: Upload settings; defaults to the global settings

    Returns:
        Public path of the stored file, e.g. ``/uploads/3f2a....png``

    Raises:
        InvalidUploadError: If the file is not a png/jpg/jpeg/gif/webp image
        UploadTooLargeError: If the file exceeds the size limit
    """
    cfg = config or settings.uploads
    extension = Path(upload.filename or "").suffix.lower()
    content_type = (upload.content_type or "").lower()
    if not content_type.startswith("image/") or extension not in ALLOWED_AVATAR_EXTENSIONS:
        raise InvalidUploadError(
            "Invalid file type; allowed: " + ", ".join(sorted(ext.lstrip(".") for ext in ALLOWED_AVATAR_EXTENSIONS))
        )

    data = await upload.read(cfg.max_avatar_bytes + 1)
    if len(data) > cfg.max_avatar_bytes:
        raise UploadTooLargeError(cfg.max_avatar_bytes)

    directory = Path(cfg.directory)
    directory.mkdir(parents=True, exist_ok=True)
    name = f"{secrets.token_hex(16)}{extension}"
    (directory / name).write_bytes(data)
    logger.info(f"Stored avatar {name} ({len(data)} bytes)")
    return f"{UPLOADS_URL_PREFIX}/{name}"
