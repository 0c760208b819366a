from __future__ import annotations

from pathlib import Path

from check_source_formatting.rules.base import Finding, TokenContext
from check_source_formatting.rules.token import catch_arg_name, no_multiple_vars, no_var

from helpers import FakeNode, FakeTree, node_at


def _ctx(text: str, root: FakeNode | None, **options) -> TokenContext:
    tree = FakeTree(root_node=root) if root is not None else None
    return TokenContext(path=Path("a.js"), text=text, syntax_tree=tree, options=dict(options))


def _catch_tree(source: str, name: str) -> FakeNode:
    param = node_at(source, f"({name})", "identifier")
    # Span just the identifier, not the parentheses.
    param.start_byte += 1
    param.end_byte -= 1
    param.start_point = (param.start_point[0], param.start_point[1] + 1)
    clause = node_at(source, "catch", "catch_clause", children=[FakeNode("catch"), FakeNode("("), param])
    return FakeNode("program", children=[FakeNode("try_statement", children=[clause])])


def test_catch_arg_name_flags_other_names() -> None:
    source = "try {\n  x();\n} catch (e) {\n}\n"
    findings = catch_arg_name.check(_ctx(source, _catch_tree(source, "e")))
    assert findings == [Finding(line=3, column=10, message='Catch statement param should be "err", not "e"')]


def test_catch_arg_name_accepts_expected_and_configured_names() -> None:
    source = "try {\n} catch (err) {\n}\n"
    assert catch_arg_name.check(_ctx(source, _catch_tree(source, "err"))) == []

    source = "try {\n} catch (e) {\n}\n"
    assert catch_arg_name.check(_ctx(source, _catch_tree(source, "e"), name="e")) == []


def test_catch_without_param_is_ignored() -> None:
    clause = FakeNode("catch_clause", children=[FakeNode("catch"), FakeNode("statement_block")])
    assert catch_arg_name.check(_ctx("try {} catch {}", FakeNode("program", children=[clause]))) == []


def _declaration(node_type: str, declarators: int, *, start_point=(0, 0)) -> FakeNode:
    children = [FakeNode("var")] + [FakeNode("variable_declarator") for _ in range(declarators)]
    return FakeNode(node_type, children=children, start_point=start_point)


def test_no_multiple_vars() -> None:
    root = FakeNode(
        "program",
        children=[
            _declaration("variable_declaration", 2, start_point=(1, 2)),
            _declaration("lexical_declaration", 1),
            _declaration("lexical_declaration", 3, start_point=(4, 0)),
            FakeNode("for_statement", children=[_declaration("variable_declaration", 2)]),
        ],
    )
    findings = no_multiple_vars.check(_ctx("", root))
    assert findings == [
        Finding(line=2, column=3, message="Each variable should have its own declaration"),
        Finding(line=5, column=1, message="Each variable should have its own declaration"),
    ]


def test_no_var() -> None:
    root = FakeNode(
        "program",
        children=[
            _declaration("variable_declaration", 1, start_point=(0, 0)),
            _declaration("lexical_declaration", 1, start_point=(1, 0)),
        ],
    )
    assert no_var.check(_ctx("", root)) == [Finding(line=1, column=1, message="Use let or const instead of var")]


def test_token_rules_without_tree_find_nothing() -> None:
    for module in (catch_arg_name, no_multiple_vars, no_var):
        assert module.check(_ctx("var a, b;", None)) == []
