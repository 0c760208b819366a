from __future__ import annotations

import re
from collections.abc import Sequence

from check_source_formatting.formatters.base import Formatter

_OPEN_RE = re.compile(r"<(script|style)\b([^>]*)>", re.IGNORECASE)
_CLOSE_RE = {
    "script": re.compile(r"</script\s*>", re.IGNORECASE),
    "style": re.compile(r"</style\s*>", re.IGNORECASE),
}
# <script type="text/template"> and friends hold markup, not code.
_NON_JS_TYPE_RE = re.compile(r"""\btype\s*=\s*["']?text/(?:template|html|x-[\w-]*template)""", re.IGNORECASE)


class HtmlFormatter(Formatter):
    """
    HTML pages; lines inside `<script>` / `<style>` blocks go to the
    `html.script` / `html.style` rule-sets instead of `html`.
    """

    language = "html"
    rule_sets = ("common", "html")

    def plan(self, lines: Sequence[str]) -> list[tuple[str, ...]]:
        plan: list[tuple[str, ...]] = []
        block: str | None = None
        for line in lines:
            if block is not None:
                if _CLOSE_RE[block].search(line):
                    block = None
                    plan.append(self.rule_sets)
                else:
                    plan.append(("common", f"html.{block}"))
                continue

            plan.append(self.rule_sets)
            opened = _embedded_block_opened(line)
            if opened is not None and not _CLOSE_RE[opened].search(line):
                block = opened
        return plan


def _embedded_block_opened(line: str) -> str | None:
    last = None
    for match in _OPEN_RE.finditer(line):
        last = match
    if last is None:
        return None
    tag = last.group(1).lower()
    if tag == "script" and _NON_JS_TYPE_RE.search(last.group(2)):
        return None
    return tag
