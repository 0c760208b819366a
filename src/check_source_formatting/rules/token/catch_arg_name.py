"""Require the parameter of a `catch` clause to be named `err`."""

from __future__ import annotations

from check_source_formatting.rules.base import Finding, TokenContext, finding_at
from check_source_formatting.rules.token._nodes import children_of_type, iter_nodes, node_text

EXPECTED_NAME = "err"


def check(ctx: TokenContext) -> list[Finding]:
    if ctx.syntax_tree is None:
        return []

    expected = str(ctx.options.get("name", EXPECTED_NAME))
    source = ctx.source
    findings: list[Finding] = []
    for node, _parent in iter_nodes(ctx.syntax_tree.root_node):
        if getattr(node, "type", None) != "catch_clause":
            continue
        params = children_of_type(node, "identifier")
        if not params:
            continue
        name = node_text(params[0], source)
        if name != expected:
            findings.append(finding_at(params[0], f"Catch statement param should be \"{expected}\", not \"{name}\""))
    return findings
