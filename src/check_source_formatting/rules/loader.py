from __future__ import annotations

import importlib
import logging
import pkgutil
import re
from collections.abc import Iterator, Mapping
from pathlib import PurePath
from types import MappingProxyType, ModuleType

from check_source_formatting.rules.base import TokenRule
from check_source_formatting.rules.plugins import PluginLoadError, load_plugin_rules

logger = logging.getLogger(__name__)

TOKEN_RULES_PACKAGE = "check_source_formatting.rules.token"
RULE_ID_PREFIX = "csf-"

_RULE_ID_RE = re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)*$")


def convert_name_to_rule_id(name: str) -> str:
    """
    Derive a token rule id from a module file name.

    `lint_rules/no_multiple_vars.py` -> `csf-no-multiple-vars`.
    """

    stem = PurePath(name).name
    if stem.endswith(".py"):
        stem = stem[: -len(".py")]
    return RULE_ID_PREFIX + stem.replace("_", "-")


class TokenRuleRegistry:
    """Token rules keyed by id; registering an existing id replaces it."""

    __slots__ = ("_rules",)

    def __init__(self) -> None:
        self._rules: dict[str, TokenRule] = {}

    def register(self, rule: TokenRule) -> None:
        if not rule.rule_id.startswith(RULE_ID_PREFIX) or not _RULE_ID_RE.match(rule.rule_id):
            raise PluginLoadError(f"Token rule id must look like {RULE_ID_PREFIX}some-name: {rule.rule_id!r}")
        if rule.rule_id in self._rules:
            logger.debug("token rule %s overridden", rule.rule_id)
        self._rules[rule.rule_id] = rule

    def get(self, rule_id: str) -> TokenRule | None:
        return self._rules.get(rule_id)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def rules(self) -> Mapping[str, TokenRule]:
        return MappingProxyType(dict(self._rules))


def rule_from_module(module: ModuleType, *, rule_id: str) -> TokenRule:
    check = getattr(module, "check", None)
    if not callable(check):
        raise PluginLoadError(f"Token rule module {module.__name__!r} must define a `check(ctx)` function.")
    doc = (module.__doc__ or "").strip()
    description = doc.splitlines()[0] if doc else ""
    return TokenRule(rule_id=rule_id, description=description, check=check)


def discover_token_rules(package: str = TOKEN_RULES_PACKAGE) -> list[TokenRule]:
    """Import every public module of `package` and wrap it as a token rule."""

    pkg = importlib.import_module(package)
    rules: list[TokenRule] = []
    for info in sorted(pkgutil.iter_modules(pkg.__path__), key=lambda m: m.name):
        if info.ispkg or info.name.startswith("_"):
            continue
        module = importlib.import_module(f"{package}.{info.name}")
        rules.append(rule_from_module(module, rule_id=convert_name_to_rule_id(info.name)))
    return rules


def load_token_rules(
    plugin_specs: tuple[str, ...] = (),
    *,
    registry: TokenRuleRegistry | None = None,
    package: str = TOKEN_RULES_PACKAGE,
) -> TokenRuleRegistry:
    """
    Register the built-in token rules, then plugin rules on top.

    Safe to call repeatedly: each call re-reads the package and the last
    registration for an id wins.
    """

    target = registry if registry is not None else TokenRuleRegistry()
    for rule in discover_token_rules(package):
        target.register(rule)
    plugin_rules = load_plugin_rules(plugin_specs)
    for rule in plugin_rules:
        target.register(rule)
    logger.debug("registered %d token rule(s) (%d from plugins)", len(target), len(plugin_rules))
    return target
