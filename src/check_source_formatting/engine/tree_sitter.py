from __future__ import annotations

import threading
from typing import Any, Protocol

try:  # pragma: no cover
    from tree_sitter import Parser
    from tree_sitter_languages import get_language
except (ImportError, OSError):  # pragma: no cover
    Parser = None  # type: ignore[assignment,misc]
    get_language = None  # type: ignore[assignment]

_TREE_SITTER_AVAILABLE = Parser is not None and get_language is not None

_local = threading.local()


class SyntaxTree(Protocol):
    root_node: Any


def _get_parser(language: str) -> Any:
    # Parsers hold mutable state; one per thread and language.
    parsers: dict[str, Any] = _local.__dict__.setdefault("parsers", {})
    parser = parsers.get(language)
    if parser is None:
        parser = Parser()
        parser.set_language(get_language(language))
        parsers[language] = parser
    return parser


def parse(language: str, source: str) -> SyntaxTree | None:
    """Parse `source`; None when tree-sitter is missing or the grammar cannot be loaded."""

    if not _TREE_SITTER_AVAILABLE:
        return None
    try:
        return _get_parser(language).parse(source.encode("utf-8", errors="replace"))
    except (AttributeError, KeyError, ValueError, TypeError, RuntimeError):
        return None


def is_available() -> bool:
    return _TREE_SITTER_AVAILABLE
