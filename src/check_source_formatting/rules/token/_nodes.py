from __future__ import annotations

from collections.abc import Iterator
from typing import Any


def iter_nodes(node: Any) -> Iterator[tuple[Any, Any | None]]:
    """Yield `(node, parent)` pairs in document order."""

    stack: list[tuple[Any, Any | None]] = [(node, None)]
    while stack:
        current, parent = stack.pop()
        yield current, parent
        children = getattr(current, "children", [])
        stack.extend((child, current) for child in reversed(children))


def node_text(node: Any, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def children_of_type(node: Any, node_type: str) -> list[Any]:
    return [child for child in getattr(node, "children", []) if getattr(child, "type", None) == node_type]
