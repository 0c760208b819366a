from __future__ import annotations

import re
from pathlib import Path

from check_source_formatting.config import CsfConfig
from check_source_formatting.engine.evaluator import RuleEngine
from check_source_formatting.engine.types import Violation
from check_source_formatting.formatters.base import Formatter
from check_source_formatting.linters.js import run_linter
from check_source_formatting.rules.loader import TokenRuleRegistry


class JsFormatter(Formatter):
    """JavaScript: line rules, then the token linter over the fixed text."""

    language = "javascript"
    rule_sets = ("common", "js")

    def __init__(
        self,
        engine: RuleEngine,
        *,
        custom_ignore: re.Pattern[str] | None = None,
        token_rules: TokenRuleRegistry | None = None,
        config: CsfConfig | None = None,
    ) -> None:
        super().__init__(engine, custom_ignore=custom_ignore)
        self.token_rules = token_rules
        self.config = config

    def lint(self, text: str, path: Path) -> list[Violation]:
        if self.token_rules is None:
            return []
        return run_linter(text, path, self.token_rules, self.config)
