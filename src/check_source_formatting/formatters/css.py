from __future__ import annotations

from check_source_formatting.formatters.base import Formatter


class CssFormatter(Formatter):
    language = "css"
    rule_sets = ("common", "css")
