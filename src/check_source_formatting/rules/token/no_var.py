"""Prefer `let`/`const` over `var` once ES2015 syntax is enabled."""

from __future__ import annotations

from check_source_formatting.rules.base import Finding, TokenContext, finding_at
from check_source_formatting.rules.token._nodes import iter_nodes


def check(ctx: TokenContext) -> list[Finding]:
    if ctx.syntax_tree is None:
        return []

    return [
        finding_at(node, "Use let or const instead of var")
        for node, _parent in iter_nodes(ctx.syntax_tree.root_node)
        if getattr(node, "type", None) == "variable_declaration"
    ]
