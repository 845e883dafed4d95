"""
Code execution I/O models.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from scriptorium.core.models.domain.enums import ExecutionStatus

from .common import NonBlankStr


class ExecutionRequest(BaseModel):
    """Schema for running a snippet of code."""

    language: str = Field(description="python, javascript, java, c or cpp (aliases: py, js, node, c++)")
    code: NonBlankStr = Field(max_length=100_000, description="Source code")
    input: Optional[str] = Field(default=None, description="Text fed to standard input")


class TemplateExecutionRequest(BaseModel):
    """Schema for running a stored code template."""

    input: Optional[str] = Field(default=None, description="Text fed to standard input")


class ExecutionRead(BaseModel):
    """Outcome of a code execution."""

    language: str
    status: ExecutionStatus
    stdout: str = ""
    stderr: str = ""
    exit_code: Optional[int] = None
    duration_ms: float = 0.0
    truncated: bool = False
