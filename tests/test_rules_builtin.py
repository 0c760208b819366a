from __future__ import annotations

import pytest

from check_source_formatting.engine.evaluator import RuleEngine
from check_source_formatting.engine.rule import make_rule
from check_source_formatting.rules.html import sort_class_names
from check_source_formatting.rules.registry import build_rule_set_store, builtin_store


def _apply(ref: str, line: str, make_ctx, *, engine: RuleEngine | None = None, **kwargs) -> str:
    engine = engine or RuleEngine(builtin_store())
    return engine.apply_rule_sets(("common", ref), make_ctx(line, **kwargs))


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("var x = function(){", "var x = function() {"),
        ("function foo(a, b){", "function foo(a, b) {"),
        ("var f = function (a) {", "var f = function(a) {"),
        ("if(a) {", "if (a) {"),
        ("}else{", "} else {"),
        ("return x ;", "return x;"),
        ("x = 1;   ", "x = 1;"),
    ],
)
def test_js_fixes(line: str, expected: str, make_ctx) -> None:
    assert _apply("js", line, make_ctx) == expected


@pytest.mark.parametrize("line", ["var x = function() {", "if (a) {", "} else {", "// if(a){", " * function(){"])
def test_js_clean_and_comment_lines_are_untouched(line: str, make_ctx, logged) -> None:
    assert _apply("js", line, make_ctx) == line
    assert logged == []


def test_js_warning_only_rules(make_ctx, logged) -> None:
    assert _apply("js", "if (a == b) {", make_ctx) == "if (a == b) {"
    assert _apply("js", "debugger;", make_ctx, line_num=2) == "debugger;"
    assert [n for n, _ in logged] == [1, 2]


def test_js_console_call_respects_shebang(make_ctx, logged) -> None:
    _apply("js", "console.log(x);", make_ctx, line_num=3)
    assert logged == [(3, "Line 3: Unexpected console.log() call")]

    _apply("js", "console.log(x);", make_ctx, has_shebang=True)
    assert len(logged) == 1


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("background: #FFFFFF", "background: #FFF"),
        ("color: #aabbcc;", "color: #ABC;"),
        ("color: #a1b2c3;", "color: #A1B2C3;"),
        ("margin:0px;", "margin: 0;"),
        ("padding: 0em 1em;", "padding: 0 1em;"),
        ("a { color: #fff; }", "a { color: #FFF; }"),
        ("margin: 0px calc(0px + 1em);", "margin: 0 calc(0px + 1em);"),
    ],
)
def test_css_fixes(line: str, expected: str, make_ctx) -> None:
    assert _apply("css", line, make_ctx) == expected


@pytest.mark.parametrize(
    "line",
    [
        "#fade {",
        "#FFFFFF, .x {",
        "/* color: #ffffff */",
        "width: 10px;",
        "a:hover {",
        "a:not(#fade),",
        "width: calc(100% - 0px);",
        "height: max(0em, 10vh);",
    ],
)
def test_css_untouched_lines(line: str, make_ctx, logged) -> None:
    assert _apply("css", line, make_ctx) == line
    assert logged == []


def test_html_sorts_class_names(make_ctx, logged) -> None:
    line = '<div class="foo bar"></div>'
    assert _apply("html", line, make_ctx) == '<div class="bar foo"></div>'
    assert logged == [(1, 'Line 1: Sort attribute values: "foo bar" should be "bar foo"')]


def test_html_other_rules(make_ctx) -> None:
    assert _apply("html", "<br/>", make_ctx) == "<br>"
    assert _apply("html", '<img src="a.png" />', make_ctx) == '<img src="a.png">'
    assert _apply("html", '<div class="${cls} a"></div>', make_ctx) == '<div class="${cls} a"></div>'


def test_html_embedded_aliases_resolve() -> None:
    store = builtin_store()
    assert store.lookup("html.script") == store.lookup("js")
    assert store.lookup("html.style") == store.lookup("css")


def test_sort_class_names() -> None:
    assert sort_class_names(" foo  bar baz") == "bar baz foo"


def test_custom_rule_sets_extend_builtins(make_ctx, logged) -> None:
    store = build_rule_set_store({"js": {"no_todo": make_rule(r"TODO", message="Line {0}: Resolve TODO")}})
    engine = RuleEngine(store)

    assert _apply("js", "if(x) { // TODO", make_ctx, engine=engine) == "if (x) { // TODO"
    assert (1, "Line 1: Resolve TODO") in logged
    js = store.lookup("js")
    assert js is not None
    assert "keyword_spacing" in js
    assert "no_todo" not in (builtin_store().lookup("js") or {})
