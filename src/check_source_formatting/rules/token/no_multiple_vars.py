"""Disallow declaring more than one variable per declaration statement."""

from __future__ import annotations

from check_source_formatting.rules.base import Finding, TokenContext, finding_at
from check_source_formatting.rules.token._nodes import children_of_type, iter_nodes

_DECLARATIONS = {"variable_declaration", "lexical_declaration"}
_LOOP_PARENTS = {"for_statement", "for_in_statement"}


def check(ctx: TokenContext) -> list[Finding]:
    if ctx.syntax_tree is None:
        return []

    findings: list[Finding] = []
    for node, parent in iter_nodes(ctx.syntax_tree.root_node):
        if getattr(node, "type", None) not in _DECLARATIONS:
            continue
        # Loop initialisers commonly cache a length next to the index.
        if parent is not None and getattr(parent, "type", None) in _LOOP_PARENTS:
            continue
        if len(children_of_type(node, "variable_declarator")) > 1:
            findings.append(finding_at(node, "Each variable should have its own declaration"))
    return findings
