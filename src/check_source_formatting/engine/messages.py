from __future__ import annotations

import re
from typing import Any

from check_source_formatting.engine.context import RuleContext
from check_source_formatting.engine.rule import SUPPRESSED, Callback, Rule, Template

_TOKEN_RE = re.compile(r"\{(\d+)\}")


def sub(template: str, *args: Any) -> str:
    """
    Substitute positional `{0}`, `{1}`, ... tokens in `template`.

    Tokens without a matching argument are left untouched, and no other brace
    syntax is interpreted (unlike `str.format`), so messages may quote code
    such as `function() {`.
    """

    def _replace(match: re.Match[str]) -> str:
        index = int(match.group(1))
        if index < len(args):
            return str(args[index])
        return match.group(0)

    return _TOKEN_RE.sub(_replace, template)


def default_message(line_num: int, item: str, result: Any, rule: Rule, context: RuleContext) -> str | None:
    """Fallback for rules without a message: a readable form of the rule name."""

    name = context.rule_name
    if not name:
        return None
    readable = name.replace("_", " ").replace("-", " ").strip()
    if not readable:
        return None
    return f"Line {line_num}: {readable[:1].upper()}{readable[1:]}"


def build_message(rule: Rule, line_num: int, item: str, result: Any, context: RuleContext) -> str | None:
    message = rule.message
    if message is SUPPRESSED:
        return None
    if isinstance(message, Template):
        return sub(message.text, line_num, item)
    if isinstance(message, Callback):
        return message.fn(line_num, item, result, rule, context)
    return default_message(line_num, item, result, rule, context)
