from __future__ import annotations

from rich.console import Console
from rich.text import Text

from check_source_formatting.engine.types import CheckSummary, FileReport, Violation
from check_source_formatting.utils import display_path

_SEVERITY_ICON = {"error": "✖", "warn": "⚠", "info": "ℹ"}
_SEVERITY_STYLE = {"error": "bold red", "warn": "yellow", "info": "dim"}


def render_terminal(summary: CheckSummary, *, console: Console, relative: bool = False, quiet: bool = False) -> None:
    for report in summary.files:
        if quiet and not report.violations and report.error is None and report.write_error is None:
            continue
        _print_file(report, console=console, relative=relative)
    _print_summary(summary, console=console)


def _print_file(report: FileReport, *, console: Console, relative: bool) -> None:
    header = Text(display_path(report.path, relative=relative), style="bold")
    if report.written:
        header.append("  (fixed)", style="green")
    console.print(header)

    if report.error is not None:
        console.print(Text(f"  ✖ {report.error}", style="bold red"))
    elif not report.violations:
        console.print(Text("  No problems found", style="dim"))

    remaining = _keys(report.remaining)
    for v in sorted(report.violations, key=_sort_key):
        _print_violation(console, v, fixed=report.written and _key(v) not in remaining)

    if report.write_error is not None:
        console.print(Text(f"  ✖ Unable to write changes: {report.write_error}", style="bold red"))
    console.print()


def _print_violation(console: Console, v: Violation, *, fixed: bool) -> None:
    icon = "✔" if fixed else _SEVERITY_ICON.get(v.severity, "•")
    style = "green" if fixed else _SEVERITY_STYLE.get(v.severity, "")

    line = Text()
    line.append(f"  {icon} ", style=style)
    line.append(v.message)
    line.append(f"  {v.rule_id}", style="dim")
    console.print(line)


def _print_summary(summary: CheckSummary, *, console: Console) -> None:
    fixed = summary.fixed_count
    parts = [f"Checked {summary.files_checked} file(s)", f"{summary.violation_count} problem(s)"]
    if fixed:
        parts.append(f"{fixed} fixed")
    style = "bold red" if summary.has_unresolved else "bold green"
    console.print(Text(", ".join(parts), style=style))


def _key(v: Violation) -> tuple[str, int, str]:
    line = v.location.line if v.location is not None and v.location.line is not None else 0
    return v.rule_id, line, v.message


def _keys(violations: tuple[Violation, ...]) -> set[tuple[str, int, str]]:
    return {_key(v) for v in violations}


def _sort_key(v: Violation) -> tuple[int, int, str]:
    line = v.location.line if v.location and v.location.line else 10**9
    column = v.location.column if v.location and v.location.column else 0
    return line, column, v.rule_id
