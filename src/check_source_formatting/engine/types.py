from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

Severity = Literal["info", "warn", "error"]
Source = Literal["line", "token"]


@dataclass(frozen=True, slots=True)
class Location:
    path: Path | None = None
    line: int | None = None  # 1-based
    column: int | None = None  # 1-based


@dataclass(frozen=True, slots=True)
class Violation:
    rule_id: str
    severity: Severity
    message: str
    location: Location | None = None
    source: Source = "line"


@dataclass(frozen=True, slots=True)
class FileReport:
    path: Path
    violations: tuple[Violation, ...] = ()
    remaining: tuple[Violation, ...] = ()
    changed: bool = False
    written: bool = False
    error: str | None = None
    write_error: str | None = None

    @property
    def fixed_count(self) -> int:
        return max(0, len(self.violations) - len(self.remaining))


@dataclass(frozen=True, slots=True)
class CheckSummary:
    files: tuple[FileReport, ...]

    @property
    def files_checked(self) -> int:
        return sum(1 for f in self.files if f.error is None)

    @property
    def violation_count(self) -> int:
        return sum(len(f.violations) for f in self.files)

    @property
    def remaining_count(self) -> int:
        return sum(len(f.remaining) for f in self.files)

    @property
    def fixed_count(self) -> int:
        return sum(f.fixed_count for f in self.files)

    @property
    def has_unresolved(self) -> bool:
        return self.remaining_count > 0
