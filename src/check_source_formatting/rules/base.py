from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from check_source_formatting.engine.tree_sitter import SyntaxTree


@dataclass(frozen=True, slots=True)
class Finding:
    line: int  # 1-based
    column: int  # 1-based
    message: str


@dataclass(frozen=True, slots=True)
class TokenContext:
    path: Path
    text: str
    syntax_tree: SyntaxTree | None
    options: dict[str, object] = field(default_factory=dict)

    @property
    def source(self) -> bytes:
        return self.text.encode("utf-8", errors="replace")


@dataclass(frozen=True, slots=True)
class TokenRule:
    """A grammar-aware check run by the token linter adapter."""

    rule_id: str
    description: str
    check: Callable[[TokenContext], list[Finding]]


def finding_at(node: object, message: str) -> Finding:
    row, col = getattr(node, "start_point", (0, 0))
    return Finding(line=int(row) + 1, column=int(col) + 1, message=message)
