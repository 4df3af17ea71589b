from __future__ import annotations

import os
from pathlib import Path

import pytest

from flightdeck.collect import collect_sources, ensure_root, source_kind
from flightdeck.exceptions import NotFoundError
from flightdeck.model import SourceKind


def _touch(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_source_kind_by_extension_family() -> None:
    assert source_kind(Path("a.js")) is SourceKind.SCRIPT
    assert source_kind(Path("a.TSX")) is SourceKind.SCRIPT
    assert source_kind(Path("a.mjs")) is SourceKind.SCRIPT
    assert source_kind(Path("a.css")) is SourceKind.STYLE
    assert source_kind(Path("a.html")) is SourceKind.MARKUP
    assert source_kind(Path("a.htm")) is SourceKind.MARKUP
    assert source_kind(Path("a.py")) is None
    assert source_kind(Path("Makefile")) is None


def test_ensure_root_rejects_missing_and_files(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError, match="Source directory not found"):
        ensure_root(tmp_path / "missing")

    file_path = _touch(tmp_path / "a.js")
    with pytest.raises(NotFoundError):
        ensure_root(file_path)


def test_collect_sorted_and_filtered(tmp_path: Path) -> None:
    _touch(tmp_path / "b.css")
    _touch(tmp_path / "a" / "z.ts")
    _touch(tmp_path / "a" / "readme.md")
    _touch(tmp_path / "index.html")
    _touch(tmp_path / "node_modules" / "lib.js")
    _touch(tmp_path / ".git" / "hooks.js")
    _touch(tmp_path / ".baseline" / "index.html")

    collected = collect_sources(tmp_path)

    names = [Path(item.display_path).relative_to(tmp_path).as_posix() for item in collected.files]
    assert names == ["a/z.ts", "b.css", "index.html"]
    assert [item.kind for item in collected.files] == [
        SourceKind.SCRIPT,
        SourceKind.STYLE,
        SourceKind.MARKUP,
    ]
    assert collected.diagnostics == ()


def test_collect_empty_directory(tmp_path: Path) -> None:
    collected = collect_sources(tmp_path)
    assert collected.files == ()
    assert collected.diagnostics == ()


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_collect_skips_symlink_cycle(tmp_path: Path) -> None:
    _touch(tmp_path / "src" / "app.js")
    try:
        (tmp_path / "src" / "loop").symlink_to(tmp_path / "src", target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    collected = collect_sources(tmp_path)

    assert [Path(item.display_path).name for item in collected.files] == ["app.js"]
    assert [item.kind for item in collected.diagnostics] == ["skipped-entry"]
    assert collected.diagnostics[0].message == "symlink cycle"


def test_collect_skips_unreadable_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _touch(tmp_path / "a.js")
    _touch(tmp_path / "locked" / "b.js")
    _touch(tmp_path / "open" / "c.css")
    real_scandir = os.scandir

    def _scandir(path: Path) -> object:
        if Path(path).name == "locked":
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr("flightdeck.collect.os.scandir", _scandir)

    collected = collect_sources(tmp_path)

    names = [Path(item.display_path).relative_to(tmp_path).as_posix() for item in collected.files]
    assert names == ["a.js", "open/c.css"]
    assert [(item.kind, item.message) for item in collected.diagnostics] == [
        ("skipped-entry", "Permission denied")
    ]
    assert collected.diagnostics[0].file == (tmp_path / "locked").as_posix()
