from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from check_source_formatting.engine.rule import IGNORE_KEY, RuleSet, ignore_pattern

RuleSetRef = str | Mapping[str, Any]


class RuleSetStore:
    """
    Read-only registry of named rule-sets.

    Rule-sets may nest (`"html.script"`), and a value may itself be a string
    naming another rule-set (an alias). The store is never mutated after
    construction; `merged()` returns a new store.
    """

    __slots__ = ("_rule_sets",)

    def __init__(self, rule_sets: Mapping[str, Any] | None = None) -> None:
        self._rule_sets: Mapping[str, Any] = _freeze(rule_sets or {})

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._rule_sets)

    def names(self) -> tuple[str, ...]:
        """Dotted names of every rule-set (nested ones included), in insertion order."""

        out: list[str] = []
        _collect_names(self._rule_sets, prefix="", out=out)
        return tuple(out)

    def is_alias(self, name: str) -> bool:
        return isinstance(get_path(self._rule_sets, name), str)

    def lookup(self, ref: RuleSetRef | None) -> RuleSet | None:
        """
        Resolve a rule-set reference.

        Mappings are returned as-is. Strings are resolved by dotted-path
        traversal; string values found along the way are followed as aliases.
        Misses, dangling aliases and alias cycles all resolve to None.
        """

        if ref is None:
            return None
        if isinstance(ref, Mapping):
            return ref
        if not isinstance(ref, str):
            return None

        seen: set[str] = set()
        current: Any = ref
        while isinstance(current, str):
            if current in seen:
                return None
            seen.add(current)
            current = get_path(self._rule_sets, current)

        if isinstance(current, Mapping):
            return current
        return None

    def merged(self, overrides: Mapping[str, Any]) -> RuleSetStore:
        """
        Return a new store with `overrides` layered on top.

        Rule-sets present on both sides are merged key by key (later
        definitions win, insertion order of the base is kept); new names are
        appended.
        """

        return RuleSetStore(_deep_merge(_thaw(self._rule_sets), _thaw(overrides)))


def get_path(root: Mapping[str, Any], path: str) -> Any:
    """Return the value at dotted `path` inside nested mappings, or None."""

    if not path:
        return None
    head, sep, rest = path.partition(".")
    if not isinstance(root, Mapping) or head not in root:
        return None
    value = root[head]
    if not sep:
        return value
    if not isinstance(value, Mapping):
        return None
    return get_path(value, rest)


def _collect_names(node: Mapping[str, Any], *, prefix: str, out: list[str]) -> None:
    for key, value in node.items():
        if not isinstance(value, (Mapping, str)):
            continue
        name = f"{prefix}{key}"
        out.append(name)
        if isinstance(value, Mapping):
            _collect_names(value, prefix=f"{name}.", out=out)


def _freeze(value: Mapping[str, Any]) -> Mapping[str, Any]:
    frozen: dict[str, Any] = {}
    for key, sub in value.items():
        if isinstance(sub, Mapping):
            frozen[key] = _freeze(sub)
        elif key == IGNORE_KEY and isinstance(sub, str):
            frozen[key] = ignore_pattern(sub)
        else:
            frozen[key] = sub
    return MappingProxyType(frozen)


def _thaw(value: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, sub in value.items():
        out[key] = _thaw(sub) if isinstance(sub, Mapping) else sub
    return out


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    for key, value in overrides.items():
        existing = base.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            base[key] = _deep_merge(existing, value)
        else:
            base[key] = value
    return base
