from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Union

IGNORE_KEY = "IGNORE"
RESERVED_PREFIX = "_"

IgnorePolicy = Literal["node"]


@dataclass(frozen=True, slots=True)
class Template:
    """Literal text: a positional message template or a `re.sub` replacement."""

    text: str


@dataclass(frozen=True, slots=True)
class Callback:
    fn: Callable[..., Any]


class MatchMode(Enum):
    SEARCH = "search"
    MATCH = "match"


class _Suppressed(Enum):
    SUPPRESSED = "suppressed"


SEARCH = MatchMode.SEARCH
MATCH = MatchMode.MATCH
SUPPRESSED = _Suppressed.SUPPRESSED

MessageSpec = Union[Template, Callback, _Suppressed, None]
TestSpec = Union[MatchMode, Callback]
ReplacerSpec = Union[Template, Callback, None]


@dataclass(frozen=True, slots=True)
class Rule:
    regex: re.Pattern[str] | None = None
    test: TestSpec = SEARCH
    test_full_item: bool = False
    message: MessageSpec = None
    replacer: ReplacerSpec = None
    ignore: IgnorePolicy | None = None
    # Template replacers rewrite every match by default (0); `count=1`
    # replaces only the first one.
    count: int = 0


# A rule-set maps rule names to rules; the reserved `IGNORE` key maps to a pattern.
RuleSet = Mapping[str, Any]


def ignore_pattern(value: str | re.Pattern[str] | None) -> re.Pattern[str] | None:
    """Normalise a rule-set `IGNORE` value; strings are compiled like rule regexes."""

    if value is None or isinstance(value, re.Pattern):
        return value
    if isinstance(value, str):
        return re.compile(value)
    raise TypeError(f"Rule-set IGNORE must be a pattern or a string, got: {type(value).__name__}")


def make_rule(
    regex: str | re.Pattern[str] | None = None,
    *,
    test: str | Callable[..., Any] | MatchMode | None = None,
    test_full_item: bool = False,
    message: str | bool | Callable[..., Any] | None = None,
    replacer: str | Callable[..., Any] | None = None,
    ignore: IgnorePolicy | None = None,
    count: int = 0,
    flags: int = 0,
) -> Rule:
    """
    Build a `Rule` from loosely typed values.

    This is the only place raw values are sniffed: strings become templates,
    callables become callbacks, `message=False` suppresses the warning and
    `test="match"` selects match mode.
    """

    compiled: re.Pattern[str] | None
    if regex is None or isinstance(regex, re.Pattern):
        compiled = regex
    else:
        compiled = re.compile(regex, flags)

    return Rule(
        regex=compiled,
        test=_coerce_test(test),
        test_full_item=bool(test_full_item),
        message=_coerce_message(message),
        replacer=_coerce_replacer(replacer),
        ignore=_coerce_ignore(ignore),
        count=count,
    )


def _coerce_test(value: str | Callable[..., Any] | MatchMode | None) -> TestSpec:
    if value is None:
        return SEARCH
    if isinstance(value, MatchMode):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == "match":
            return MATCH
        if normalized in {"search", "test"}:
            return SEARCH
        raise ValueError(f"Unsupported rule test mode: {value!r}")
    if callable(value):
        return Callback(value)
    raise TypeError(f"Rule test must be a mode name or a callable, got: {type(value).__name__}")


def _coerce_message(value: str | bool | Callable[..., Any] | None) -> MessageSpec:
    if value is None:
        return None
    if value is False:
        return SUPPRESSED
    if isinstance(value, str):
        return Template(value)
    if callable(value):
        return Callback(value)
    raise TypeError(f"Rule message must be a string, False or a callable, got: {type(value).__name__}")


def _coerce_replacer(value: str | Callable[..., Any] | None) -> ReplacerSpec:
    if value is None:
        return None
    if isinstance(value, str):
        return Template(value)
    if callable(value):
        return Callback(value)
    raise TypeError(f"Rule replacer must be a string or a callable, got: {type(value).__name__}")


def _coerce_ignore(value: str | None) -> IgnorePolicy | None:
    if value is None:
        return None
    if value != "node":
        raise ValueError(f"Unsupported rule ignore policy: {value!r} (expected 'node').")
    return "node"


def is_reserved_name(name: str) -> bool:
    return name == IGNORE_KEY or name.startswith(RESERVED_PREFIX)
