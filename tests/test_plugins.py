from __future__ import annotations

from pathlib import Path

import pytest

from check_source_formatting.rules.base import TokenRule
from check_source_formatting.rules.loader import (
    TokenRuleRegistry,
    convert_name_to_rule_id,
    discover_token_rules,
    load_token_rules,
)
from check_source_formatting.rules.plugins import PluginLoadError, load_plugin_rules

BUILTIN_IDS = {"csf-catch-arg-name", "csf-no-multiple-vars", "csf-no-var"}


def test_convert_name_to_rule_id() -> None:
    assert convert_name_to_rule_id("lint_rules/no_multiple_vars.py") == "csf-no-multiple-vars"
    assert convert_name_to_rule_id("catch_arg_name") == "csf-catch-arg-name"


def test_builtin_token_rules_are_discovered() -> None:
    rules = {rule.rule_id: rule for rule in discover_token_rules()}
    assert set(rules) == BUILTIN_IDS
    assert rules["csf-catch-arg-name"].description == "Require the parameter of a `catch` clause to be named `err`."


def test_loading_twice_is_idempotent() -> None:
    registry = TokenRuleRegistry()
    load_token_rules(registry=registry)
    load_token_rules(registry=registry)
    assert set(registry) == BUILTIN_IDS
    assert len(registry) == 3


def test_plugin_rules_override_builtins_by_id(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "csf_override_plugin.py").write_text(
        """
from check_source_formatting.rules.base import TokenRule


def _check(ctx):
    return []


TOKEN_RULES = [TokenRule(rule_id="csf-no-var", description="custom no-var", check=_check)]
""".lstrip(),
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))

    registry = load_token_rules(("csf_override_plugin",))
    rule = registry.get("csf-no-var")
    assert rule is not None
    assert rule.description == "custom no-var"
    assert len(registry) == 3


def test_single_rule_plugin_module_uses_module_name(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "no_todo_comment.py").write_text(
        '''
"""Disallow TODO comments."""


def check(ctx):
    return []
'''.lstrip(),
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))

    [rule] = load_plugin_rules(("no_todo_comment",))
    assert rule.rule_id == "csf-no-todo-comment"
    assert rule.description == "Disallow TODO comments."


def test_plugin_attribute_spec(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "csf_factory_plugin.py").write_text(
        """
from check_source_formatting.rules.base import TokenRule


def rules():
    return [TokenRule(rule_id="csf-custom", description="", check=lambda ctx: [])]
""".lstrip(),
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))

    [rule] = load_plugin_rules(("csf_factory_plugin:rules",))
    assert isinstance(rule, TokenRule)
    assert rule.rule_id == "csf-custom"


def test_plugin_errors(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "csf_empty_plugin.py").write_text("VALUE = 1\n", encoding="utf-8")
    (tmp_path / "csf_bad_id_plugin.py").write_text(
        """
from check_source_formatting.rules.base import TokenRule

TOKEN_RULES = [TokenRule(rule_id="NoVar", description="", check=lambda ctx: [])]
""".lstrip(),
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))

    with pytest.raises(PluginLoadError, match="Failed to import"):
        load_plugin_rules(("csf_missing_plugin_module",))
    with pytest.raises(PluginLoadError, match="no attribute"):
        load_plugin_rules(("csf_empty_plugin:rules",))
    with pytest.raises(PluginLoadError, match="must define"):
        load_plugin_rules(("csf_empty_plugin",))
    with pytest.raises(PluginLoadError, match="rule id"):
        load_token_rules(("csf_bad_id_plugin",))
