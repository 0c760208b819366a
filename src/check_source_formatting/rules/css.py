from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from check_source_formatting.engine.context import RuleContext
from check_source_formatting.engine.rule import Rule, make_rule

# `property: value` up to `;`, `}` or the end of the line. Selector lines
# (`#fade,`, `a:not(#fade) {`) never match, so id selectors keep their case.
_DECLARATION_RE = re.compile(r"(?<![\w#.:-])([a-z-]+\s*:)([^;{}]*)(?<!,)(?=[;}]|$)", re.IGNORECASE)

_MATH_FUNCTION_RE = re.compile(r"\b(?:calc|min|max|clamp)\s*$", re.IGNORECASE)


def _in_declaration_values(item: str, regex: re.Pattern[str], rule: Rule, context: RuleContext) -> Any:
    for declaration in _DECLARATION_RE.finditer(item):
        match = regex.search(declaration.group(2))
        if match is not None:
            return match
    return None


def _rewrite_declaration_values(full_item: str, regex: re.Pattern[str], repl: str | Callable[[re.Match[str]], str]) -> str:
    return _DECLARATION_RE.sub(lambda d: d.group(1) + regex.sub(repl, d.group(2)), full_item)


def _upper_hex(full_item: str, result: Any, rule: Rule, context: RuleContext) -> str:
    assert rule.regex is not None
    return _rewrite_declaration_values(full_item, rule.regex, lambda m: m.group(0).upper())


def _shorten_hex(full_item: str, result: Any, rule: Rule, context: RuleContext) -> str:
    assert rule.regex is not None
    return _rewrite_declaration_values(full_item, rule.regex, r"#\1\2\3")


def inside_math_function(text: str, pos: int) -> bool:
    """True when `pos` sits inside a `calc()`/`min()`/`max()`/`clamp()` call, at any depth."""

    opened: list[bool] = []
    for index, char in enumerate(text[:pos]):
        if char == "(":
            opened.append(_MATH_FUNCTION_RE.search(text, 0, index) is not None)
        elif char == ")" and opened:
            opened.pop()
    return any(opened)


def _zero_units_outside_math(item: str, regex: re.Pattern[str], rule: Rule, context: RuleContext) -> Any:
    for match in regex.finditer(item):
        if not inside_math_function(item, match.start()):
            return match
    return None


def _strip_zero_units(full_item: str, result: Any, rule: Rule, context: RuleContext) -> str:
    assert rule.regex is not None
    # Lengths inside calc() and friends need their units.
    return rule.regex.sub(
        lambda m: m.group(0) if inside_math_function(full_item, m.start()) else "0",
        full_item,
    )


CSS_RULES = {
    "IGNORE": re.compile(r"^\s*(?:/\*|\*|//)"),
    "hex_uppercase": make_rule(
        r"(?<!\()#(?=[0-9A-Fa-f]*[a-f])[0-9A-Fa-f]{3,8}\b",
        test=_in_declaration_values,
        message="Line {0}: Hex codes should be all uppercase",
        replacer=_upper_hex,
    ),
    "hex_shorthand": make_rule(
        r"(?<!\()#([0-9A-F])\1([0-9A-F])\2([0-9A-F])\3\b",
        test=_in_declaration_values,
        message="Line {0}: Hex code can be shortened",
        replacer=_shorten_hex,
    ),
    "property_colon_spacing": make_rule(
        r"^(\s*[a-z-]+):(?=[^\s:])(?=[^;{]*;\s*$)",
        message="Line {0}: Missing space after property colon",
        replacer=r"\1: ",
    ),
    "zero_units": make_rule(
        r"(?<![\w.#-])0(?:px|em|rem|pt|ex|ch|vh|vw)\b",
        test=_zero_units_outside_math,
        message="Line {0}: Zero values do not need units",
        replacer=_strip_zero_units,
    ),
}
