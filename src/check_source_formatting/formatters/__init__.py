from __future__ import annotations

from pathlib import Path

from check_source_formatting.config import CsfConfig
from check_source_formatting.engine.evaluator import RuleEngine
from check_source_formatting.formatters.base import Formatter, FormatResult
from check_source_formatting.formatters.css import CssFormatter
from check_source_formatting.formatters.html import HtmlFormatter
from check_source_formatting.formatters.js import JsFormatter
from check_source_formatting.languages.registry import detect_language
from check_source_formatting.rules.loader import TokenRuleRegistry

__all__ = ["CssFormatter", "FormatResult", "Formatter", "HtmlFormatter", "JsFormatter", "formatter_for"]


def formatter_for(
    path: Path,
    engine: RuleEngine,
    *,
    config: CsfConfig | None = None,
    token_rules: TokenRuleRegistry | None = None,
) -> Formatter | None:
    """Formatter for `path` by extension, or None for unsupported files."""

    language = detect_language(path)
    custom_ignore = config.ignore if config is not None else None
    if language == "javascript":
        return JsFormatter(engine, custom_ignore=custom_ignore, token_rules=token_rules, config=config)
    if language == "css":
        return CssFormatter(engine, custom_ignore=custom_ignore)
    if language == "html":
        return HtmlFormatter(engine, custom_ignore=custom_ignore)
    return None
