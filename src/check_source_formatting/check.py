from __future__ import annotations

import glob
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from check_source_formatting.config import CsfConfig
from check_source_formatting.engine.evaluator import RuleEngine
from check_source_formatting.engine.types import CheckSummary, FileReport
from check_source_formatting.files import FileReadError, FileWriteError, describe_read_error, read_source, write_source
from check_source_formatting.formatters import formatter_for
from check_source_formatting.linters.js import unknown_rule_ids
from check_source_formatting.rules.loader import TokenRuleRegistry, load_token_rules
from check_source_formatting.rules.registry import build_rule_set_store

logger = logging.getLogger(__name__)

_GLOB_CHARS_RE = re.compile(r"[*?\[]")


@dataclass(frozen=True, slots=True)
class Checker:
    engine: RuleEngine
    config: CsfConfig
    token_rules: TokenRuleRegistry


def build_checker(config: CsfConfig | None = None) -> Checker:
    """
    Assemble the rule engine (built-in rule-sets plus custom ones from
    config) and the token rule registry (built-in plus plugins).
    """

    config = config if config is not None else CsfConfig()
    store = build_rule_set_store(config.rule_sets)
    registry = load_token_rules(config.plugins)
    for rule_id in unknown_rule_ids(config, registry):
        logger.warning("Unknown token rule in config: %s", rule_id)
    return Checker(engine=RuleEngine(store), config=config, token_rules=registry)


def expand_paths(args: Iterable[str]) -> list[Path]:
    """
    Expand glob patterns in `args`, keeping order and dropping duplicates.

    A pattern without matches is kept as-is so it is reported as missing.
    """

    out: list[Path] = []
    seen: set[Path] = set()
    for arg in args:
        if _GLOB_CHARS_RE.search(arg):
            matches = sorted(glob.glob(arg, recursive=True))
            candidates = [Path(m) for m in matches] if matches else [Path(arg)]
        else:
            candidates = [Path(arg)]
        for candidate in candidates:
            if candidate in seen:
                continue
            seen.add(candidate)
            out.append(candidate)
    return out


def check_file(path: Path, checker: Checker, *, inline_edit: bool = False) -> FileReport | None:
    """
    Check (and with `inline_edit`, fix) one file.

    Returns None for files that are skipped: unsupported extensions and
    directories.
    """

    formatter = formatter_for(path, checker.engine, config=checker.config, token_rules=checker.token_rules)
    if formatter is None:
        logger.debug("skipping unsupported file %s", path)
        return None

    try:
        text = read_source(path)
    except FileReadError as exc:
        message = describe_read_error(exc)
        if not message:
            logger.debug("skipping directory %s", path)
            return None
        return FileReport(path=path, error=message)

    result = formatter.format(text, path=path)
    if not (inline_edit and result.changed):
        return FileReport(path=path, violations=result.violations, remaining=result.violations, changed=result.changed)

    try:
        write_source(path, result.updated)
    except FileWriteError as exc:
        return FileReport(
            path=path,
            violations=result.violations,
            remaining=result.violations,
            changed=True,
            write_error=str(exc),
        )

    # Whatever the rules could not fix is still reported by a second pass.
    remaining = formatter.format(result.updated, path=path).violations
    return FileReport(path=path, violations=result.violations, remaining=remaining, changed=True, written=True)


def check_paths(args: Iterable[str], config: CsfConfig | None = None, *, inline_edit: bool = False) -> CheckSummary:
    checker = build_checker(config)
    paths = expand_paths(args)
    logger.debug("checking %d path(s)", len(paths))

    reports: list[FileReport] = []
    for path in paths:
        report = check_file(path, checker, inline_edit=inline_edit)
        if report is not None:
            reports.append(report)
    return CheckSummary(files=tuple(reports))
