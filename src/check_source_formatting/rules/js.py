from __future__ import annotations

import re
from typing import Any

from check_source_formatting.engine.context import RuleContext
from check_source_formatting.engine.rule import Rule, make_rule


def _console_message(line_num: int, item: str, result: Any, rule: Rule, context: RuleContext) -> str:
    return f"Line {line_num}: Unexpected console.{result.group(1)}() call"


JS_RULES = {
    # Comment lines are prose, not code.
    "IGNORE": re.compile(r"^\s*(?://|/\*|\*)"),
    "anonymous_function_spacing": make_rule(
        r"\bfunction\s+\(",
        message="Line {0}: Anonymous functions should not have a space before the parenthesis",
        replacer="function(",
    ),
    "function_brace_spacing": make_rule(
        r"\bfunction\b([\w$ ]*)\(([^)]*)\)(?:\s{2,}|\t|)\{",
        message="Line {0}: Function bodies should be formatted as function() {",
        replacer=r"function\1(\2) {",
    ),
    "keyword_spacing": make_rule(
        r"\b(if|for|while|switch|catch)\(",
        message="Line {0}: Missing space between keyword and parenthesis",
        replacer=r"\1 (",
    ),
    "else_leading_space": make_rule(
        r"\}else\b",
        message="Line {0}: Missing space before else",
        replacer="} else",
    ),
    "else_trailing_space": make_rule(
        r"\belse\{",
        message="Line {0}: Missing space after else",
        replacer="else {",
    ),
    "space_before_semicolon": make_rule(
        r"(\S)[ \t]+;$",
        message="Line {0}: Extra space before semicolon",
        replacer=r"\1;",
    ),
    "loose_equality": make_rule(
        r"[^=!<>]==[^=]|!=[^=]",
        message="Line {0}: Use strict (in)equality operators",
    ),
    "debugger_statement": make_rule(
        r"^\s*debugger\s*;?$",
        message="Line {0}: Unexpected debugger statement",
    ),
    # Executable scripts (with a shebang) legitimately print.
    "console_call": make_rule(
        r"\bconsole\.(log|debug|info|warn|error|trace)\(",
        test="match",
        message=_console_message,
        ignore="node",
    ),
}
