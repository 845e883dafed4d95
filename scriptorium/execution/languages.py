"""
Supported execution languages.

Maps language names and aliases to how a source file is laid out and which
toolchain commands compile and run it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from scriptorium.core.errors import UnsupportedLanguageError


@dataclass(frozen=True)
class Language:
    """A language the runner can execute."""

    name: str
    extension: str
    compiled: bool


LANGUAGES: Dict[str, Language] = {
    "python": Language(name="python", extension=".py", compiled=False),
    "javascript": Language(name="javascript", extension=".js", compiled=False),
    "java": Language(name="java", extension=".java", compiled=True),
    "c": Language(name="c", extension=".c", compiled=True),
    "cpp": Language(name="cpp", extension=".cpp", compiled=True),
}

ALIASES: Dict[str, str] = {
    "py": "python",
    "python3": "python",
    "js": "javascript",
    "node": "javascript",
    "nodejs": "javascript",
    "c++": "cpp",
    "cxx": "cpp",
}

JAVA_WRAPPER_CLASS = "Main"

_JAVA_PUBLIC_CLASS = re.compile(r"\bpublic\s+(?:(?:final|abstract|strictfp)\s+)*class\s+([A-Za-z_$][\w$]*)")
_JAVA_ANY_CLASS = re.compile(r"^\s*(?:(?:final|abstract|strictfp)\s+)*class\s+([A-Za-z_$][\w$]*)", re.MULTILINE)
_JAVA_MAIN = re.compile(r"\bstatic\s+void\s+main\s*\(")


def supported_languages() -> List[str]:
    """Canonical names of every supported language."""
    return list(LANGUAGES)


def normalize_language(language: Optional[str]) -> str:
    """
    Resolve a language name or alias to its canonical name.

    Args:
        language: User supplied language, any case

    Returns:
        Canonical language name (e.g. ``"cpp"`` for ``"C++"``)

    Raises:
        UnsupportedLanguageError: If the language is unknown
    """
    key = (language or "").strip().lower()
    key = ALIASES.get(key, key)
    if key not in LANGUAGES:
        raise UnsupportedLanguageError(language or "")
    return key


def get_language(language: Optional[str]) -> Language:
    """Look up a language by name or alias."""
    return LANGUAGES[normalize_language(language)]


def prepare_java_source(code: str) -> Tuple[str, str]:
    """
    Decide the class to run for a Java snippet.

    Code declaring ``public class Name`` runs as-is from ``Name.java``. Code
    declaring a package-private class with a ``main`` method runs that class.
    Anything else is treated as the body of ``main`` and wrapped in a
    ``Main`` class.

    Returns:
        Tuple of (class name, full source)
    """
    public = _JAVA_PUBLIC_CLASS.search(code)
    if public:
        return public.group(1), code

    declared = _JAVA_ANY_CLASS.search(code)
    if declared and _JAVA_MAIN.search(code):
        return declared.group(1), code

    wrapped = (
        f"public class {JAVA_WRAPPER_CLASS} {{\n"
        "    public static void main(String[] args) throws Exception {\n"
        f"{code}\n"
        "    }\n"
        "}\n"
    )
    return JAVA_WRAPPER_CLASS, wrapped
