from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

Logger = Callable[[int, str], None]
FormatItem = Callable[[str, "RuleContext"], str]


@dataclass(slots=True)
class RuleContext:
    """
    Per-pass state threaded through rule evaluation.

    `full_item` is the accumulator: every replacement reassigns it before the
    next rule runs. `rule_set_name` / `rule_name` are updated by the engine
    while a rule is evaluated so a logger can attribute the warning.
    """

    item: str
    full_item: str
    line_num: int = 1
    has_shebang: bool = False
    custom_ignore: re.Pattern[str] | None = None
    logger: Logger | None = None
    format_item: FormatItem | None = None
    rule_set_name: str | None = None
    rule_name: str | None = None

    @classmethod
    def for_line(
        cls,
        line: str,
        *,
        line_num: int,
        has_shebang: bool = False,
        custom_ignore: re.Pattern[str] | None = None,
        logger: Logger | None = None,
        format_item: FormatItem | None = None,
    ) -> RuleContext:
        return cls(
            item=line,
            full_item=line,
            line_num=line_num,
            has_shebang=has_shebang,
            custom_ignore=custom_ignore,
            logger=logger,
            format_item=format_item,
        )
