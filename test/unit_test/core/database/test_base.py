"""Unit tests for tag helpers and URL normalization."""

import pytest

from scriptorium.core.database.base import dump_tags, load_tags, normalize_tags
from scriptorium.core.database.utils import normalize_database_url


class TestTags:
    """Test tag serialization helpers."""

    def test_normalize_trims_and_deduplicates(self):
        assert normalize_tags([" python ", "", "python", "web", "  "]) == ["python", "web"]

    def test_normalize_none(self):
        assert normalize_tags(None) == []

    def test_dump_tags_is_json_array(self):
        assert dump_tags(["a", "b"]) == '["a", "b"]'

    def test_dump_tags_keeps_unicode(self):
        assert dump_tags(["café"]) == '["café"]'

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ('["a", "b"]', ["a", "b"]),
            ("", []),
            (None, []),
            ("a, b,,c", ["a", "b", "c"]),
            ('{"a": 1}', []),
            ("[1, 2]", ["1", "2"]),
        ],
    )
    def test_load_tags(self, raw, expected):
        assert load_tags(raw) == expected


class TestNormalizeDatabaseUrl:
    """Test sync URLs are rewritten to async drivers."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("postgresql://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
            ("postgres://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
            ("postgresql+psycopg2://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
            ("sqlite:///./x.db", "sqlite+aiosqlite:///./x.db"),
            ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
        ],
    )
    def test_normalize(self, url, expected):
        assert normalize_database_url(url) == expected
