from __future__ import annotations

from pathlib import Path

import pytest

from check_source_formatting.files import (
    FileReadError,
    FileWriteError,
    describe_read_error,
    read_source,
    write_source,
)


def test_read_and_write_keep_line_endings(tmp_path: Path) -> None:
    path = tmp_path / "a.js"
    write_source(path, "a;\r\nb;\n")
    assert path.read_bytes() == b"a;\r\nb;\n"
    assert read_source(path) == "a;\r\nb;\n"


def test_read_errors_have_kinds(tmp_path: Path) -> None:
    with pytest.raises(FileReadError) as missing:
        read_source(tmp_path / "missing.js")
    assert missing.value.kind == "not_found"
    assert describe_read_error(missing.value) == "File not found"

    with pytest.raises(FileReadError) as directory:
        read_source(tmp_path)
    assert directory.value.kind == "is_directory"
    assert describe_read_error(directory.value) == ""

    binary = tmp_path / "bin.js"
    binary.write_bytes(b"\xff\xfe\x00bad")
    with pytest.raises(FileReadError) as unreadable:
        read_source(binary)
    assert unreadable.value.kind == "unreadable"
    assert describe_read_error(unreadable.value).startswith("Unable to read file")


def test_write_errors_are_wrapped(tmp_path: Path) -> None:
    with pytest.raises(FileWriteError) as excinfo:
        write_source(tmp_path / "no" / "such" / "dir.js", "x")
    assert isinstance(excinfo.value, OSError)
    assert "dir.js" in str(excinfo.value)
