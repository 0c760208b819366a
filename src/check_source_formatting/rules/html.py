from __future__ import annotations

import re
from typing import Any

from check_source_formatting.engine.context import RuleContext
from check_source_formatting.engine.rule import Rule, make_rule


def sort_class_names(value: str) -> str:
    return " ".join(sorted(value.split()))


def _first_unsorted_class_attr(item: str, regex: re.Pattern[str], rule: Rule, context: RuleContext) -> Any:
    for match in regex.finditer(item):
        value = match.group(1)
        if sort_class_names(value) != value:
            return match
    return None


def _sorted_classes_message(line_num: int, item: str, result: Any, rule: Rule, context: RuleContext) -> str:
    value = result.group(1)
    return f'Line {line_num}: Sort attribute values: "{value}" should be "{sort_class_names(value)}"'


def _sort_class_attrs(full_item: str, result: Any, rule: Rule, context: RuleContext) -> str:
    assert rule.regex is not None
    return rule.regex.sub(lambda m: f'class="{sort_class_names(m.group(1))}"', full_item)


HTML_RULES = {
    # Server-side template directives make attribute values unpredictable.
    "IGNORE": re.compile(r"<%|\$\{|<#|\{\{"),
    "sorted_class_names": make_rule(
        r'\bclass="([^"]*)"',
        test=_first_unsorted_class_attr,
        message=_sorted_classes_message,
        replacer=_sort_class_attrs,
    ),
    "self_closing_void_tag": make_rule(
        r"<(br|hr|img|input|link|meta)\b([^>]*?)\s*/>",
        message="Line {0}: Void elements should not be self-closed",
        replacer=r"<\1\2>",
    ),
    # Code embedded in <script>/<style> blocks uses the language rule-sets.
    "script": "js",
    "style": "css",
}
