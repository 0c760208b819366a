from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from check_source_formatting.engine.context import RuleContext
from check_source_formatting.engine.messages import build_message
from check_source_formatting.engine.rule import (
    IGNORE_KEY,
    MATCH,
    SEARCH,
    Callback,
    Rule,
    RuleSet,
    Template,
    ignore_pattern,
    is_reserved_name,
)
from check_source_formatting.engine.store import RuleSetRef, RuleSetStore

logger = logging.getLogger(__name__)

_ANONYMOUS = "<anonymous>"


class RuleDefinitionError(ValueError):
    """Raised when a rule cannot be evaluated because its definition is incomplete."""

    def __init__(self, message: str, *, rule_set: str, rule_name: str) -> None:
        super().__init__(f"Rule {rule_name!r} in rule-set {rule_set!r}: {message}")
        self.rule_set = rule_set
        self.rule_name = rule_name


class RuleEngine:
    """
    Line-oriented rule runner.

    `apply_rule_set()` resolves a rule-set through the store (lazily, so a
    reference may name a rule-set that only exists in a later store), runs
    every applicable rule against the context in insertion order, and
    returns the possibly rewritten `context.full_item`.
    """

    __slots__ = ("store",)

    def __init__(self, store: RuleSetStore | None = None) -> None:
        self.store = store if store is not None else RuleSetStore()

    def apply_rule_set(self, ref: RuleSetRef, context: RuleContext) -> str:
        rules = self.store.lookup(ref)
        if rules is None:
            logger.debug("no rule-set resolved for %r", ref)
            return context.full_item
        if not self.is_valid_rule_set(rules, context):
            return context.full_item

        rule_set_name = ref if isinstance(ref, str) else _ANONYMOUS
        for rule_name, rule in rules.items():
            if not isinstance(rule, Rule):
                continue
            if not self.is_valid_rule(rule_name, rule, context):
                continue

            context.rule_set_name = rule_set_name
            context.rule_name = rule_name

            result = self.test_line(rule, context)
            if not result:
                continue

            warning = build_message(rule, context.line_num, context.item, result, context)
            if warning and context.logger is not None:
                context.logger(context.line_num, warning)

            if rule.replacer is not None:
                self.replace_item(result, rule, context)

        return context.full_item

    def apply_rule_sets(self, refs: tuple[RuleSetRef, ...] | list[RuleSetRef], context: RuleContext) -> str:
        for ref in refs:
            self.apply_rule_set(ref, context)
        return context.full_item

    @staticmethod
    def is_valid_rule_set(rules: RuleSet, context: RuleContext) -> bool:
        if not isinstance(rules, Mapping):
            return False
        ignore = ignore_pattern(rules.get(IGNORE_KEY))
        if ignore is not None and ignore.search(context.full_item):
            return False
        custom_ignore = context.custom_ignore
        if custom_ignore is not None and custom_ignore.search(context.full_item):
            return False
        return True

    @staticmethod
    def is_valid_rule(rule_name: str, rule: Rule, context: RuleContext) -> bool:
        if is_reserved_name(rule_name):
            return False
        return rule.ignore != "node" or not context.has_shebang

    def test_line(self, rule: Rule, context: RuleContext) -> Any:
        test_item = context.full_item if rule.test_full_item else context.item
        test = rule.test

        if isinstance(test, Callback):
            return test.fn(test_item, rule.regex, rule, context)

        regex = self._require_regex(rule, context)
        if test is MATCH:
            return regex.search(test_item)
        if test is SEARCH:
            return regex.search(test_item) is not None

        raise self._definition_error(context, f"unsupported test {test!r}")

    def replace_item(self, result: Any, rule: Rule, context: RuleContext) -> str:
        """
        Apply the rule's replacer to `context.full_item`.

        When the pass treats the line as the whole item (`item == full_item`),
        `item` follows the replacement so later rules test the fixed text.
        """

        replacer = rule.replacer
        tracks_item = context.item == context.full_item
        if isinstance(replacer, Template):
            regex = self._require_regex(rule, context)
            full_item = regex.sub(replacer.text, context.full_item, count=rule.count)
        elif isinstance(replacer, Callback):
            full_item = replacer.fn(context.full_item, result, rule, context)
        else:
            return context.full_item

        context.full_item = full_item

        if context.format_item is not None:
            context.full_item = context.format_item(context.full_item, context)

        if tracks_item:
            context.item = context.full_item
        return context.full_item

    def _require_regex(self, rule: Rule, context: RuleContext) -> re.Pattern[str]:
        if rule.regex is None:
            raise self._definition_error(context, "a regex is required for this test/replacer")
        return rule.regex

    @staticmethod
    def _definition_error(context: RuleContext, message: str) -> RuleDefinitionError:
        return RuleDefinitionError(
            message,
            rule_set=context.rule_set_name or _ANONYMOUS,
            rule_name=context.rule_name or _ANONYMOUS,
        )


def apply_rule_set(store: RuleSetStore, ref: RuleSetRef, context: RuleContext) -> str:
    return RuleEngine(store).apply_rule_set(ref, context)
