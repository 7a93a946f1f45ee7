from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from marq.cli import cli
from marq.filesystem import (
    enforce_file_size,
    get_max_file_size,
    normalize_filepath,
    safe_read,
    write_output,
)


def _error_text(result) -> str:
    """Return combined stdout and exception text for assertions."""
    return f"{result.output}{result.exception}"


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="Symlink support is required")
def test_symlink_rejected(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = tmp_path / "source.md"
    source.write_text("# Heading\n", encoding="utf-8")
    link = tmp_path / "alias.md"
    try:
        os.symlink(source, link, target_is_directory=False)
    except OSError as error:  # pragma: no cover - platform dependent
        pytest.skip(f"Unable to create symlink: {error}")

    result = cli_runner.invoke(cli, [str(link)])
    assert result.exit_code != 0
    assert "Symlinks" in _error_text(result)


def test_file_size_limit_enforced(tmp_path: Path):
    target = tmp_path / "large.md"
    target.write_text("X" * 20, encoding="utf-8")

    enforce_file_size(target, 20)
    with pytest.raises(IOError, match="maximum allowed size"):
        enforce_file_size(target, 10)


def test_max_file_size_default(monkeypatch):
    monkeypatch.delenv("MARQ_MAX_FILE_SIZE", raising=False)
    assert get_max_file_size(default=123) == 123


@pytest.mark.parametrize("value", ["0", "-5", "ten"])
def test_max_file_size_rejects_invalid_values(monkeypatch, value: str):
    monkeypatch.setenv("MARQ_MAX_FILE_SIZE", value)
    with pytest.raises(ValueError):
        get_max_file_size()


def test_normalize_filepath_requires_existing_file(tmp_path: Path):
    with pytest.raises(ValueError, match="does not exist"):
        normalize_filepath(str(tmp_path / "missing.md"))
    with pytest.raises(ValueError, match="not a regular file"):
        normalize_filepath(str(tmp_path))


@pytest.mark.parametrize("name", ["doc.md", "doc.markdown", "doc.marq", "DOC.MD", "notes.txt"])
def test_normalize_filepath_accepts_markup_extensions(tmp_path: Path, name: str):
    target = tmp_path / name
    target.write_text("x", encoding="utf-8")
    assert normalize_filepath(str(target)) == target.resolve()


def test_safe_read_keeps_carriage_returns(tmp_path: Path):
    target = tmp_path / "doc.md"
    target.write_bytes(b"a\r\nb\r\n")

    with safe_read(target) as handle:
        assert handle.read() == "a\r\nb\r\n"


def test_safe_read_missing_file(tmp_path: Path):
    with pytest.raises(IOError, match="Error accessing"):
        safe_read(tmp_path / "missing.md")


def test_write_output_replaces_file(tmp_path: Path):
    target = tmp_path / "out.html"
    target.write_text("old", encoding="utf-8")

    write_output(target, "<p>new</p>")

    assert target.read_text(encoding="utf-8") == "<p>new</p>"
    assert stat.S_IMODE(target.stat().st_mode) == 0o644
    assert [path.name for path in tmp_path.iterdir()] == ["out.html"]


def test_write_output_requires_existing_directory(tmp_path: Path):
    with pytest.raises(IOError):
        write_output(tmp_path / "missing" / "out.html", "<p></p>")
