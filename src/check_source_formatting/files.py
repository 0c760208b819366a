from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

logger = logging.getLogger(__name__)

ReadErrorKind = Literal["not_found", "is_directory", "permission_denied", "unreadable"]


class FileReadError(OSError):
    """Raised when a source file cannot be read as UTF-8 text."""

    def __init__(self, path: Path, kind: ReadErrorKind, detail: str = "") -> None:
        super().__init__(f"{path}: {detail or kind}")
        self.path = path
        self.kind = kind


class FileWriteError(OSError):
    """Raised when formatted content cannot be written back."""

    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(f"{path}: {detail}")
        self.path = path


def read_source(path: Path) -> str:
    if not path.exists():
        raise FileReadError(path, "not_found")
    if path.is_dir():
        raise FileReadError(path, "is_directory")
    try:
        # newline="" keeps CRLF line endings intact for round-tripping.
        with path.open("r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except PermissionError as exc:
        raise FileReadError(path, "permission_denied", str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise FileReadError(path, "unreadable", f"not valid UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise FileReadError(path, "unreadable", str(exc)) from exc


def write_source(path: Path, text: str) -> None:
    try:
        with path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(text)
    except OSError as exc:
        raise FileWriteError(path, exc.strerror or str(exc)) from exc
    logger.debug("wrote %s", path)


def describe_read_error(error: FileReadError) -> str:
    """
    User-facing message for a read failure.

    Directories are not reported (they are skipped), so they map to "".
    """

    if error.kind == "not_found":
        return "File not found"
    if error.kind == "is_directory":
        return ""
    if error.kind == "permission_denied":
        return "Permission denied"
    return f"Unable to read file: {error}"
