"""
Code execution for Scriptorium.

Modules:
- languages: Supported languages, aliases and Java class detection
- runner: Async child-process runner with timeouts and output limits
"""

from .languages import LANGUAGES, Language, get_language, normalize_language, supported_languages
from .runner import CodeRunner, ExecutionResult, get_code_runner

__all__ = [
    "LANGUAGES",
    "CodeRunner",
    "ExecutionResult",
    "Language",
    "get_code_runner",
    "get_language",
    "normalize_language",
    "supported_languages",
]
