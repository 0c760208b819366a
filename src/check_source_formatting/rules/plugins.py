from __future__ import annotations

import importlib
from collections.abc import Iterable
from types import ModuleType
from typing import Any

from check_source_formatting.rules.base import TokenRule


class PluginLoadError(RuntimeError):
    """Raised when a configured plugin cannot be imported or doesn't expose token rules."""


def load_plugin_rules(plugin_specs: tuple[str, ...]) -> list[TokenRule]:
    rules: list[TokenRule] = []
    for raw_spec in plugin_specs:
        spec = raw_spec.strip()
        if not spec:
            continue
        rules.extend(_load_one(spec))
    return rules


def _load_one(spec: str) -> list[TokenRule]:
    from check_source_formatting.rules.loader import convert_name_to_rule_id, rule_from_module

    module_name, sep, attr = spec.partition(":")
    try:
        module = importlib.import_module(module_name)
    except Exception as exc:  # noqa: BLE001
        raise PluginLoadError(f"Failed to import plugin module {module_name!r}: {exc}") from exc

    if sep:
        try:
            obj: Any = getattr(module, attr)
        except AttributeError as exc:
            raise PluginLoadError(f"Plugin module {module_name!r} has no attribute {attr!r}") from exc
        return list(_extract_rules(obj))

    if not hasattr(module, "csf_token_rules") and not hasattr(module, "TOKEN_RULES") and callable(
        getattr(module, "check", None)
    ):
        # A single-rule module follows the built-in naming convention.
        rule_id = convert_name_to_rule_id(module_name.rpartition(".")[2])
        return [rule_from_module(module, rule_id=rule_id)]

    return list(_extract_rules(module))


def _extract_rules(obj: Any) -> Iterable[TokenRule]:
    if isinstance(obj, ModuleType):
        if hasattr(obj, "csf_token_rules"):
            return _extract_rules(obj.csf_token_rules)
        if hasattr(obj, "TOKEN_RULES"):
            return _extract_rules(obj.TOKEN_RULES)
        raise PluginLoadError("Plugin module must define `csf_token_rules()`, `TOKEN_RULES` or `check()`.")

    if isinstance(obj, TokenRule):
        return [obj]

    if callable(obj):
        produced = obj()
        return _extract_rules(produced)

    if isinstance(obj, list | tuple):
        out: list[TokenRule] = []
        for item in obj:
            if not isinstance(item, TokenRule):
                raise PluginLoadError(f"Plugin rules must be TokenRule instances, got: {type(item).__name__}")
            out.append(item)
        return out

    raise PluginLoadError(f"Unsupported plugin export type: {type(obj).__name__}")
