"""Unit tests for avatar upload storage."""

from io import BytesIO
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from scriptorium.core.errors import InvalidUploadError, UploadTooLargeError
from scriptorium.server.core.config import UploadConfig
from scriptorium.server.services.uploads import UPLOADS_URL_PREFIX, save_avatar

pytestmark = pytest.mark.asyncio


def make_upload(data: bytes, filename: str, content_type: str) -> UploadFile:
    return UploadFile(file=BytesIO(data), filename=filename, headers=Headers({"content-type": content_type}))


@pytest.fixture
def upload_config(tmp_path) -> UploadConfig:
    return UploadConfig(directory=str(tmp_path / "avatars"), max_avatar_bytes=16)


class TestSaveAvatar:
    async def test_stores_file_under_random_name(self, upload_config):
        path = await save_avatar(make_upload(b"\x89PNG data", "me.PNG", "image/png"), upload_config)

        assert path.startswith(f"{UPLOADS_URL_PREFIX}/")
        assert path.endswith(".png")
        name = path.rsplit("/", 1)[1]
        assert (Path(upload_config.directory) / name).read_bytes() == b"\x89PNG data"

    async def test_names_are_unique(self, upload_config):
        first = await save_avatar(make_upload(b"a", "a.jpg", "image/jpeg"), upload_config)
        second = await save_avatar(make_upload(b"a", "a.jpg", "image/jpeg"), upload_config)
        assert first != second

    @pytest.mark.parametrize(
        "filename, content_type",
        [("notes.txt", "text/plain"), ("avatar.png", "application/octet-stream"), ("avatar.svg", "image/svg+xml")],
    )
    async def test_rejects_non_images(self, upload_config, filename, content_type):
        with pytest.raises(InvalidUploadError):
            await save_avatar(make_upload(b"x", filename, content_type), upload_config)

    async def test_rejects_oversized_file(self, upload_config):
        with pytest.raises(UploadTooLargeError) as exc_info:
            await save_avatar(make_upload(b"x" * 17, "big.gif", "image/gif"), upload_config)
        assert exc_info.value.status_code == 413

    async def test_accepts_file_at_limit(self, upload_config):
        path = await save_avatar(make_upload(b"x" * 16, "edge.webp", "image/webp"), upload_config)
        assert path.endswith(".webp")
