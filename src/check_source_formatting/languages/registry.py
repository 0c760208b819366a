from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class LanguageSpec:
    name: str
    extensions: tuple[str, ...]


LANGUAGES: tuple[LanguageSpec, ...] = (
    LanguageSpec("javascript", (".js", ".jsx", ".mjs", ".cjs")),
    LanguageSpec("css", (".css", ".scss", ".less")),
    LanguageSpec("html", (".html", ".htm", ".jsp", ".jspf", ".vm", ".ftl")),
)

_EXT_TO_LANG = {ext: spec.name for spec in LANGUAGES for ext in spec.extensions}


def detect_language(path: Path) -> str | None:
    """
    Language detection based on file extension.

    Returns the canonical language name from `LANGUAGES` or None if unsupported.
    """

    return _EXT_TO_LANG.get(path.suffix.lower())

