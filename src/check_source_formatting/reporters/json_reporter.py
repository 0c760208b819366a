from __future__ import annotations

import json
from typing import Any

from check_source_formatting import __version__
from check_source_formatting.engine.types import CheckSummary, FileReport, Violation
from check_source_formatting.utils import display_path

REPORT_SCHEMA_VERSION = 1


def render_json(summary: CheckSummary, *, relative: bool = False) -> str:
    payload = {
        "schema_version": REPORT_SCHEMA_VERSION,
        "tool": {"name": "check-source-formatting", "version": __version__},
        "files": [_file_to_dict(report, relative=relative) for report in summary.files],
        "summary": {
            "files_checked": summary.files_checked,
            "violations": summary.violation_count,
            "remaining": summary.remaining_count,
            "fixed": summary.fixed_count,
        },
    }
    return json.dumps(payload, indent=2, sort_keys=False)


def _file_to_dict(report: FileReport, *, relative: bool) -> dict[str, Any]:
    # Multiset: a rule may legitimately fire twice on the same line.
    remaining: dict[tuple[str, int | None, str], int] = {}
    for v in report.remaining:
        key = _key(v)
        remaining[key] = remaining.get(key, 0) + 1

    violations = []
    for v in report.violations:
        key = _key(v)
        fixed = True
        if remaining.get(key, 0) > 0:
            remaining[key] -= 1
            fixed = False
        violations.append(_violation_to_dict(v, fixed=fixed and report.written))

    return {
        "path": display_path(report.path, relative=relative),
        "error": report.error,
        "write_error": report.write_error,
        "changed": report.changed,
        "written": report.written,
        "violations": violations,
    }


def _violation_to_dict(v: Violation, *, fixed: bool) -> dict[str, Any]:
    return {
        "rule_id": v.rule_id,
        "severity": v.severity,
        "source": v.source,
        "line": v.location.line if v.location is not None else None,
        "column": v.location.column if v.location is not None else None,
        "message": v.message,
        "fixed": fixed,
    }


def _key(v: Violation) -> tuple[str, int | None, str]:
    return v.rule_id, v.location.line if v.location is not None else None, v.message
