"""
Shared pieces of the entity layer.

Holds the SQLModel base class, the naive-UTC clock used for every
timestamp column and the helpers that store tag lists as JSON text.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from pydantic import ConfigDict
from sqlmodel import SQLModel


class Base(SQLModel):
    """Parent of every table model; its metadata is the full schema."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


def utc_now() -> datetime:
    """Current UTC time without tzinfo, matching the naive DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Trim tags, drop empty ones and remove duplicates preserving order."""
    seen: List[str] = []
    for tag in tags or []:
        cleaned = tag.strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


def dump_tags(tags: Optional[Iterable[str]]) -> str:
    """Serialize tags to the JSON array string stored in ``tags`` columns."""
    return json.dumps(normalize_tags(tags), ensure_ascii=False)


def load_tags(raw: Optional[str]) -> List[str]:
    """Deserialize a ``tags`` column, tolerating legacy or corrupt values."""
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        # Legacy rows stored a comma separated string
        return normalize_tags(raw.split(","))
    if not isinstance(value, list):
        return []
    return normalize_tags(str(item) for item in value)
