from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FakeTree:
    root_node: object


class FakeNode:
    def __init__(
        self,
        node_type: str,
        *,
        children: list[FakeNode] | None = None,
        start_point: tuple[int, int] = (0, 0),
        start_byte: int = 0,
        end_byte: int = 0,
    ) -> None:
        self.type = node_type
        self.children = children or []
        self.start_point = start_point
        self.start_byte = start_byte
        self.end_byte = end_byte


def node_at(source: str, snippet: str, node_type: str, *, children: list[FakeNode] | None = None) -> FakeNode:
    """A node spanning the first occurrence of `snippet` in `source` (ASCII sources only)."""

    start = source.index(snippet)
    row = source.count("\n", 0, start)
    col = start - (source.rfind("\n", 0, start) + 1)
    return FakeNode(
        node_type,
        children=children,
        start_point=(row, col),
        start_byte=start,
        end_byte=start + len(snippet),
    )
