"""
Health and version I/O models.
"""

from pydantic import BaseModel


class HealthRead(BaseModel):
    status: str


class VersionRead(BaseModel):
    version: str
    schema_version: str
