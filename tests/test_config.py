from __future__ import annotations

import re
from pathlib import Path

import pytest

from check_source_formatting.config import (
    ConfigError,
    CsfConfig,
    find_project_dir,
    load_config,
    load_config_file,
    parse_config_table,
)
from check_source_formatting.engine.rule import SUPPRESSED, Rule, Template


def test_load_config_defaults_when_no_pyproject(tmp_path: Path) -> None:
    config = load_config(tmp_path)
    assert isinstance(config, CsfConfig)
    assert config.parser_options.ecma_version == 5
    assert config.ignore is None
    assert dict(config.token_rules) == {}
    assert config.plugins == ()
    assert config.source is None


def test_load_config_defaults_without_tool_table(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
    config = load_config(tmp_path)
    assert config.source is None
    assert dict(config.rule_sets) == {}


def test_load_config_reads_tool_table(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        """
[tool.csf]
ignore = "@generated"
plugins = ["my_plugin"]

[tool.csf.parser-options]
ecma-version = 6

[tool.csf.token-rules]
csf-no-var = "error"
csf-catch-arg-name = { severity = "warn", name = "error" }

[tool.csf.rules.js.no_todo]
regex = "TODO"
message = "Line {0}: Resolve TODO"

[tool.csf.rules.js.var_to_let]
regex = "\\\\bvar "
replacer = "let "
message = false
test = "match"
ignore = "node"
""".lstrip(),
        encoding="utf-8",
    )

    config = load_config(tmp_path)
    assert config.source == tmp_path / "pyproject.toml"
    assert config.parser_options.ecma_version == 6
    assert config.ignore is not None and config.ignore.pattern == "@generated"
    assert config.plugins == ("my_plugin",)
    assert config.token_rules["csf-no-var"].severity == "error"
    assert config.token_rules["csf-catch-arg-name"].severity == "warn"
    assert dict(config.token_rules["csf-catch-arg-name"].options) == {"name": "error"}

    js = config.rule_sets["js"]
    assert isinstance(js["no_todo"], Rule)
    assert js["no_todo"].message == Template("Line {0}: Resolve TODO")
    var_to_let = js["var_to_let"]
    assert var_to_let.message is SUPPRESSED
    assert var_to_let.replacer == Template("let ")
    assert var_to_let.ignore == "node"
    assert var_to_let.regex.pattern == r"\bvar "


def test_rule_set_tables_support_nesting_aliases_and_ignore() -> None:
    config = parse_config_table(
        {
            "rules": {
                "jsx": "js",
                "html.extra": {
                    "IGNORE": "^<!--",
                    "no_font": {"regex": "<font\\b", "ignore-case": True},
                },
            }
        }
    )
    assert config.rule_sets["jsx"] == "js"
    extra = config.rule_sets["html"]["extra"]
    assert isinstance(extra["IGNORE"], re.Pattern)
    assert extra["no_font"].regex.search("<FONT color=red>")


def test_ecma_version_years_and_minimum() -> None:
    assert parse_config_table({"parser-options": {"ecma-version": 2015}}).parser_options.ecma_version == 6
    assert parse_config_table({"parser-options": {"ecma-version": 3}}).parser_options.ecma_version == 3
    with pytest.raises(ConfigError, match="ecma-version"):
        parse_config_table({"parser-options": {"ecma-version": 2}})
    with pytest.raises(ConfigError, match="ecma-version"):
        parse_config_table({"parser-options": {"ecma-version": "6"}})


@pytest.mark.parametrize(
    ("table", "match"),
    [
        ({"ignore": "("}, "not a valid regular expression"),
        ({"ignore": 1}, "tool.csf.ignore"),
        ({"plugins": "x"}, "plugins"),
        ({"token-rules": {"csf-no-var": "loud"}}, "off, warn, error"),
        ({"token-rules": {"no-var": "warn"}}, "rule id"),
        ({"rules": {"js": {"a": {"regex": "x", "fix": "y"}}}}, "unknown keys"),
        ({"rules": {"js": {"a": {"regex": "x", "message": 1}}}}, "message"),
        ({"rules": {"js": {"a": {"regex": "x", "test": "full"}}}}, "test"),
        ({"rules": {"js": {"a": {"regex": "x", "ignore": "browser"}}}}, "ignore"),
        ({"rules": {"js": {"a": {"regex": "x", "count": -1}}}}, "count"),
        ({"rules": {"js": {"a": 5}}}, "rule table"),
        ({"rules": {"js": 5}}, "rule-set name"),
    ],
)
def test_invalid_values_raise_config_error(table, match: str) -> None:
    with pytest.raises(ConfigError, match=match):
        parse_config_table(table)


def test_invalid_toml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.csf\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_load_config_file_accepts_top_level_or_tool_table(tmp_path: Path) -> None:
    flat = tmp_path / "csf.toml"
    flat.write_text('plugins = ["a"]\n', encoding="utf-8")
    assert load_config_file(flat).plugins == ("a",)

    nested = tmp_path / "other.toml"
    nested.write_text('[tool.csf]\nplugins = ["b"]\n', encoding="utf-8")
    assert load_config_file(nested).plugins == ("b",)

    with pytest.raises(ConfigError, match="not found"):
        load_config_file(tmp_path / "missing.toml")


def test_find_project_dir_walks_up(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("", encoding="utf-8")
    nested = tmp_path / "src" / "app"
    nested.mkdir(parents=True)
    source = nested / "main.js"
    source.write_text("", encoding="utf-8")

    assert find_project_dir(source) == tmp_path
    assert find_project_dir(nested) == tmp_path
