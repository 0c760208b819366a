from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from check_source_formatting.engine.store import RuleSetStore
from check_source_formatting.rules.common import COMMON_RULES
from check_source_formatting.rules.css import CSS_RULES
from check_source_formatting.rules.html import HTML_RULES
from check_source_formatting.rules.js import JS_RULES


def builtin_rule_sets() -> dict[str, Any]:
    return {
        "common": COMMON_RULES,
        "js": JS_RULES,
        "css": CSS_RULES,
        "html": HTML_RULES,
    }


@lru_cache(maxsize=1)
def builtin_store() -> RuleSetStore:
    return RuleSetStore(builtin_rule_sets())


def build_rule_set_store(custom_rule_sets: Mapping[str, Any] | None = None) -> RuleSetStore:
    """Built-in rule-sets with `custom_rule_sets` merged on top (custom definitions win)."""

    if not custom_rule_sets:
        return builtin_store()
    return builtin_store().merged(custom_rule_sets)
