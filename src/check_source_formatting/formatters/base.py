from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from check_source_formatting.engine.context import Logger, RuleContext
from check_source_formatting.engine.evaluator import RuleEngine
from check_source_formatting.engine.types import Location, Violation

logger = logging.getLogger(__name__)

# Only real line terminators; str.splitlines() would also split on form feeds
# and other separators that belong to the line content.
_LINE_RE = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+")
_ENDING_RE = re.compile(r"(\r\n|\r|\n)$")


@dataclass(frozen=True, slots=True)
class FormatResult:
    path: Path
    original: str
    updated: str
    violations: tuple[Violation, ...]

    @property
    def changed(self) -> bool:
        return self.original != self.updated


def split_lines(text: str) -> list[tuple[str, str]]:
    """Split `text` into `(content, line_ending)` pairs."""

    out: list[tuple[str, str]] = []
    for raw in _LINE_RE.findall(text):
        match = _ENDING_RE.search(raw)
        if match is None:
            out.append((raw, ""))
        else:
            out.append((raw[: match.start()], match.group(1)))
    return out


def has_shebang(text: str) -> bool:
    return text.startswith("#!")


class Formatter:
    """
    Runs line rule-sets over a whole file.

    Subclasses name their rule-sets and may route individual lines to other
    rule-sets (`plan()`), or add whole-file checks (`lint()`).
    """

    language: ClassVar[str] = ""
    rule_sets: ClassVar[tuple[str, ...]] = ()

    def __init__(self, engine: RuleEngine, *, custom_ignore: re.Pattern[str] | None = None) -> None:
        self.engine = engine
        self.custom_ignore = custom_ignore

    def plan(self, lines: Sequence[str]) -> list[tuple[str, ...]]:
        return [self.rule_sets for _ in lines]

    def lint(self, text: str, path: Path) -> list[Violation]:
        return []

    def format(self, text: str, *, path: Path) -> FormatResult:
        lines = split_lines(text)
        plan = self.plan([content for content, _ in lines])
        shebang = has_shebang(text)
        violations: list[Violation] = []
        out: list[str] = []

        for line_num, ((content, ending), refs) in enumerate(zip(lines, plan, strict=True), start=1):
            context = RuleContext.for_line(
                content,
                line_num=line_num,
                has_shebang=shebang,
                custom_ignore=self.custom_ignore,
            )
            context.logger = _collector(context, path, violations)
            self.engine.apply_rule_sets(refs, context)
            out.append(context.full_item + ending)

        updated = "".join(out)
        violations.extend(self.lint(updated, path))
        logger.debug("%s: %d violation(s) from %s", path, len(violations), ", ".join(self.rule_sets))
        return FormatResult(path=path, original=text, updated=updated, violations=tuple(violations))


def _collector(context: RuleContext, path: Path, sink: list[Violation]) -> Logger:
    def _log(line_num: int, message: str) -> None:
        sink.append(
            Violation(
                rule_id=f"{context.rule_set_name}.{context.rule_name}",
                severity="warn",
                message=message,
                location=Location(path=path, line=line_num),
                source="line",
            )
        )

    return _log
