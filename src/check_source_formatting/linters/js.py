from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from check_source_formatting.config import CsfConfig, TokenRuleSetting, TokenSeverity
from check_source_formatting.engine import tree_sitter
from check_source_formatting.engine.tree_sitter import SyntaxTree
from check_source_formatting.engine.types import Location, Violation
from check_source_formatting.rules.base import TokenContext
from check_source_formatting.rules.loader import TokenRuleRegistry

logger = logging.getLogger(__name__)

BASE_TOKEN_RULE_CONFIG: Mapping[str, TokenSeverity] = MappingProxyType(
    {
        "csf-catch-arg-name": "warn",
        "csf-no-multiple-vars": "error",
        "csf-no-var": "off",
    }
)

# Merged on top of the base config when parsing newer than ES5.
ES6_TOKEN_RULE_CONFIG: Mapping[str, TokenSeverity] = MappingProxyType(
    {
        "csf-no-var": "warn",
    }
)


def resolve_rule_config(config: CsfConfig | None = None) -> dict[str, TokenRuleSetting]:
    """
    Effective token rule settings: base config, the ES6 overlay when
    `ecma_version > 5`, then the user's `token-rules` table.
    """

    config = config if config is not None else CsfConfig()
    settings = {rule_id: TokenRuleSetting(severity=sev) for rule_id, sev in BASE_TOKEN_RULE_CONFIG.items()}
    if config.parser_options.ecma_version > 5:
        settings.update({rule_id: TokenRuleSetting(severity=sev) for rule_id, sev in ES6_TOKEN_RULE_CONFIG.items()})
    settings.update(config.token_rules)
    return settings


def run_linter(
    contents: str,
    path: Path,
    registry: TokenRuleRegistry,
    config: CsfConfig | None = None,
    *,
    syntax_tree: SyntaxTree | None = None,
) -> list[Violation]:
    settings = resolve_rule_config(config)
    active = []
    for rule_id, setting in settings.items():
        if setting.severity == "off":
            continue
        rule = registry.get(rule_id)
        if rule is None:
            continue
        active.append((rule, setting))

    if not active:
        return []

    if syntax_tree is None:
        if not tree_sitter.is_available():
            logger.debug("tree-sitter not installed; skipping token rules for %s", path)
            return []
        syntax_tree = tree_sitter.parse("javascript", contents)
        if syntax_tree is None:
            logger.debug("unable to parse %s; skipping token rules", path)
            return []

    violations: list[Violation] = []
    for rule, setting in active:
        ctx = TokenContext(path=path, text=contents, syntax_tree=syntax_tree, options=dict(setting.options))
        for finding in rule.check(ctx):
            violations.append(
                Violation(
                    rule_id=rule.rule_id,
                    severity="error" if setting.severity == "error" else "warn",
                    message=f"Line {finding.line}: {finding.message} ({rule.rule_id})",
                    location=Location(path=path, line=finding.line, column=finding.column),
                    source="token",
                )
            )
    violations.sort(key=lambda v: (v.location.line or 0, v.location.column or 0) if v.location else (0, 0))
    return violations


def unknown_rule_ids(config: CsfConfig, registry: TokenRuleRegistry) -> list[str]:
    return sorted(rule_id for rule_id in config.token_rules if rule_id not in registry)
