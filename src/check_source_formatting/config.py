from __future__ import annotations

import re
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Literal, cast

from check_source_formatting.engine.rule import IGNORE_KEY, make_rule


class ConfigError(ValueError):
    """Raised when a check-source-formatting configuration file is invalid."""


TokenSeverity = Literal["off", "warn", "error"]

DEFAULT_ECMA_VERSION = 5
MIN_ECMA_VERSION = 3
TOOL_TABLE = "csf"

_TOKEN_RULE_ID_RE = re.compile(r"^csf-[a-z0-9]+(?:-[a-z0-9]+)*$")
_SEVERITY_ALIASES = {"0": "off", "1": "warn", "2": "error", "warning": "warn"}
_RULE_KEYS = {"regex", "message", "replacer", "test", "test-full-item", "test_full_item", "ignore", "count", "ignore-case"}


@dataclass(frozen=True, slots=True)
class ParserOptions:
    ecma_version: int = DEFAULT_ECMA_VERSION


@dataclass(frozen=True, slots=True)
class TokenRuleSetting:
    severity: TokenSeverity
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True, slots=True)
class CsfConfig:
    parser_options: ParserOptions = field(default_factory=ParserOptions)
    ignore: re.Pattern[str] | None = None
    token_rules: Mapping[str, TokenRuleSetting] = field(default_factory=lambda: MappingProxyType({}))
    plugins: tuple[str, ...] = ()
    rule_sets: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    source: Path | None = None


def load_config(project_dir: Path | str = ".") -> CsfConfig:
    """
    Load configuration from `[tool.csf]` in `project_dir/pyproject.toml`.

    If no file / no `[tool.csf]` table exists, returns defaults.
    """

    pyproject_path = Path(project_dir) / "pyproject.toml"
    if not pyproject_path.exists():
        return CsfConfig()

    data = _read_toml(pyproject_path)
    tool_table = data.get("tool", {})
    if not isinstance(tool_table, dict):
        return CsfConfig()

    csf_table = tool_table.get(TOOL_TABLE, {})
    if not isinstance(csf_table, dict) or not csf_table:
        return CsfConfig()

    return parse_config_table(csf_table, source=pyproject_path)


def load_config_file(path: Path | str) -> CsfConfig:
    """
    Load an explicit config file (`--config`).

    The file may hold the settings at top level or under `[tool.csf]`.
    """

    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")

    data = _read_toml(config_path)
    tool_table = data.get("tool")
    if isinstance(tool_table, dict) and isinstance(tool_table.get(TOOL_TABLE), dict):
        data = tool_table[TOOL_TABLE]
    return parse_config_table(data, source=config_path)


def find_project_dir(start: Path) -> Path:
    """Closest directory (from `start` upwards) containing a pyproject.toml, else `start`'s directory."""

    base = start if start.is_dir() else start.parent
    for candidate in [base, *base.parents]:
        if (candidate / "pyproject.toml").exists():
            return candidate
    return base


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc


def parse_config_table(table: Mapping[str, Any], *, source: Path | None = None) -> CsfConfig:
    parser_options = _parse_parser_options(table.get("parser-options", table.get("parser_options")))
    ignore = _parse_ignore(table.get("ignore"))
    token_rules = _parse_token_rules(table.get("token-rules", table.get("token_rules")))
    plugins = _parse_plugins(table.get("plugins"))
    rule_sets = _parse_rule_sets(table.get("rules"), field_name="tool.csf.rules")

    return CsfConfig(
        parser_options=parser_options,
        ignore=ignore,
        token_rules=token_rules,
        plugins=plugins,
        rule_sets=rule_sets,
        source=source,
    )


def _parse_parser_options(value: Any) -> ParserOptions:
    if value is None:
        return ParserOptions()
    if not isinstance(value, dict):
        raise ConfigError("`tool.csf.parser-options` must be a table.")

    ecma_version = value.get("ecma-version", value.get("ecma_version", DEFAULT_ECMA_VERSION))
    if isinstance(ecma_version, bool) or not isinstance(ecma_version, int):
        raise ConfigError("`tool.csf.parser-options.ecma-version` must be an integer.")
    # Year-style versions (2015+) map onto edition numbers (6+).
    if ecma_version >= 2015:
        ecma_version = ecma_version - 2009
    if ecma_version < MIN_ECMA_VERSION:
        raise ConfigError(f"`tool.csf.parser-options.ecma-version` must be >= {MIN_ECMA_VERSION}.")
    return ParserOptions(ecma_version=ecma_version)


def _parse_ignore(value: Any) -> re.Pattern[str] | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError("`tool.csf.ignore` must be a regular expression string.")
    if not value.strip():
        return None
    return _compile(value, field_name="tool.csf.ignore")


def _parse_plugins(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or any(not isinstance(v, str) for v in value):
        raise ConfigError("`tool.csf.plugins` must be a list of strings.")
    return tuple(v.strip() for v in value if v.strip())


def _normalize_severity(value: Any, *, field_name: str) -> TokenSeverity:
    if isinstance(value, bool) or not isinstance(value, str | int):
        raise ConfigError(f"`{field_name}` must be one of: off, warn, error.")
    normalized = str(value).strip().lower()
    normalized = _SEVERITY_ALIASES.get(normalized, normalized)
    if normalized not in {"off", "warn", "error"}:
        raise ConfigError(f"`{field_name}` must be one of: off, warn, error.")
    return cast(TokenSeverity, normalized)


def _parse_token_rules(value: Any) -> Mapping[str, TokenRuleSetting]:
    if value is None:
        return MappingProxyType({})
    if not isinstance(value, dict):
        raise ConfigError("`tool.csf.token-rules` must be a table.")

    out: dict[str, TokenRuleSetting] = {}
    for raw_id, raw_setting in value.items():
        rule_id = str(raw_id).strip().lower()
        field_name = f"tool.csf.token-rules.{raw_id}"
        if not _TOKEN_RULE_ID_RE.match(rule_id):
            raise ConfigError(f"`{field_name}` is invalid; expected a rule id like csf-no-var.")
        if isinstance(raw_setting, dict):
            options = dict(raw_setting)
            severity = _normalize_severity(options.pop("severity", "warn"), field_name=f"{field_name}.severity")
            out[rule_id] = TokenRuleSetting(severity=severity, options=MappingProxyType(options))
        else:
            out[rule_id] = TokenRuleSetting(severity=_normalize_severity(raw_setting, field_name=field_name))
    return MappingProxyType(out)


def _parse_rule_sets(value: Any, *, field_name: str) -> Mapping[str, Any]:
    """
    Parse `[tool.csf.rules]` into rule-set mappings.

    A table with a `regex` key is a rule; any other table is a (nested)
    rule-set. Dotted rule-set names (`"html.extra"`) are split into nesting.
    Inside a rule-set, `IGNORE` is a pattern and other strings are aliases.
    """

    if value is None:
        return MappingProxyType({})
    if not isinstance(value, dict):
        raise ConfigError(f"`{field_name}` must be a table.")

    out: dict[str, Any] = {}
    for raw_name, raw_rule_set in value.items():
        name = str(raw_name).strip()
        sub_field = f"{field_name}.{raw_name}"
        if not name:
            raise ConfigError(f"`{field_name}` contains an empty rule-set name.")
        if isinstance(raw_rule_set, str):
            parsed: Any = raw_rule_set.strip()
        elif isinstance(raw_rule_set, dict):
            parsed = _parse_rule_set(raw_rule_set, field_name=sub_field)
        else:
            raise ConfigError(f"`{sub_field}` must be a table or a rule-set name.")
        _assign_dotted(out, name, parsed)
    return out


def _parse_rule_set(value: dict[str, Any], *, field_name: str) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for raw_key, raw_value in value.items():
        key = str(raw_key)
        sub_field = f"{field_name}.{key}"
        if key == IGNORE_KEY:
            if not isinstance(raw_value, str):
                raise ConfigError(f"`{sub_field}` must be a regular expression string.")
            out[key] = _compile(raw_value, field_name=sub_field)
        elif isinstance(raw_value, str):
            out[key] = raw_value.strip()
        elif isinstance(raw_value, dict) and "regex" in raw_value:
            out[key] = _parse_rule(raw_value, field_name=sub_field)
        elif isinstance(raw_value, dict):
            out[key] = _parse_rule_set(raw_value, field_name=sub_field)
        else:
            raise ConfigError(f"`{sub_field}` must be a rule table, a rule-set table or a rule-set name.")
    return out


def _parse_rule(value: dict[str, Any], *, field_name: str) -> Any:
    unknown = sorted(set(value) - _RULE_KEYS)
    if unknown:
        raise ConfigError(f"`{field_name}` has unknown keys: {', '.join(unknown)}.")

    regex = value.get("regex")
    if not isinstance(regex, str) or not regex:
        raise ConfigError(f"`{field_name}.regex` must be a non-empty string.")

    ignore_case = value.get("ignore-case", False)
    if not isinstance(ignore_case, bool):
        raise ConfigError(f"`{field_name}.ignore-case` must be a boolean.")
    compiled = _compile(regex, field_name=f"{field_name}.regex", flags=re.IGNORECASE if ignore_case else 0)

    message = value.get("message")
    if message is not None and message is not False and not isinstance(message, str):
        raise ConfigError(f"`{field_name}.message` must be a string or false.")

    replacer = value.get("replacer")
    if replacer is not None and not isinstance(replacer, str):
        raise ConfigError(f"`{field_name}.replacer` must be a string.")

    test = value.get("test")
    if test is not None and test not in {"match", "search"}:
        raise ConfigError(f"`{field_name}.test` must be one of: match, search.")

    test_full_item = value.get("test-full-item", value.get("test_full_item", False))
    if not isinstance(test_full_item, bool):
        raise ConfigError(f"`{field_name}.test-full-item` must be a boolean.")

    ignore = value.get("ignore")
    if ignore is not None and ignore != "node":
        raise ConfigError(f"`{field_name}.ignore` must be \"node\".")

    count = value.get("count", 0)
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise ConfigError(f"`{field_name}.count` must be an integer >= 0.")

    if replacer is not None:
        try:
            compiled.sub(replacer, "")
        except re.error as exc:
            raise ConfigError(f"`{field_name}.replacer` is not a valid replacement template: {exc}") from exc

    return make_rule(
        compiled,
        test=test,
        test_full_item=test_full_item,
        message=message,
        replacer=replacer,
        ignore=ignore,
        count=count,
    )


def _assign_dotted(target: dict[str, Any], dotted: str, value: Any) -> None:
    head, sep, rest = dotted.partition(".")
    if not sep:
        existing = target.get(head)
        if isinstance(existing, dict) and isinstance(value, dict):
            existing.update(value)
        else:
            target[head] = value
        return
    node = target.get(head)
    if not isinstance(node, dict):
        node = {}
        target[head] = node
    _assign_dotted(node, rest, value)


def _compile(pattern: str, *, field_name: str, flags: int = 0) -> re.Pattern[str]:
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise ConfigError(f"`{field_name}` is not a valid regular expression: {exc}") from exc
