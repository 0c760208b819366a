from __future__ import annotations

import os
from pathlib import Path


def display_path(path: Path, *, relative: bool, cwd: Path | None = None) -> str:
    """
    Path as shown in reports and `--filenames` output.

    With `relative`, the path is made relative to `cwd` (default: the process
    working directory), falling back to the path as given when that is not
    possible (e.g. a different drive on Windows).
    """

    if not relative:
        return str(path)
    base = cwd if cwd is not None else Path.cwd()
    try:
        return os.path.relpath(path, base)
    except ValueError:
        return str(path)
