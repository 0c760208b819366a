from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from check_source_formatting.engine.context import RuleContext


@pytest.fixture()
def logged() -> list[tuple[int, str]]:
    return []


@pytest.fixture()
def make_ctx(logged: list[tuple[int, str]]) -> Callable[..., RuleContext]:
    def _make(line: str, *, line_num: int = 1, **kwargs: Any) -> RuleContext:
        return RuleContext.for_line(
            line,
            line_num=line_num,
            logger=lambda n, message: logged.append((n, message)),
            **kwargs,
        )

    return _make
