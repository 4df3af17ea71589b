"""Source file enumeration under a scan root."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path

from .constants import EXCLUDED_DIR_NAMES, MARKUP_SUFFIXES, SCRIPT_SUFFIXES, STYLE_SUFFIXES
from .exceptions import NotFoundError
from .model import Diagnostic, SourceKind

LOGGER = logging.getLogger(__name__)

_KIND_BY_SUFFIX: dict[str, SourceKind] = {
    **{suffix: SourceKind.SCRIPT for suffix in SCRIPT_SUFFIXES},
    **{suffix: SourceKind.STYLE for suffix in STYLE_SUFFIXES},
    **{suffix: SourceKind.MARKUP for suffix in MARKUP_SUFFIXES},
}


@dataclass(frozen=True)
class SourceFile:
    path: Path
    display_path: str
    kind: SourceKind


@dataclass(frozen=True)
class CollectedSources:
    files: tuple[SourceFile, ...]
    diagnostics: tuple[Diagnostic, ...]


def source_kind(path: Path) -> SourceKind | None:
    """Classify a path by extension family, or None when it is not scanned."""
    return _KIND_BY_SUFFIX.get(path.suffix.lower())


def ensure_root(root: Path) -> None:
    if not root.is_dir():
        raise NotFoundError(str(root))


def collect_sources(root: Path) -> CollectedSources:
    """Recursively list script, style and markup files under ``root``.

    Directory symlinks are followed once; a directory reached twice is a cycle
    and is skipped. Unreadable entries are skipped. Both produce diagnostics.
    """
    ensure_root(root)

    files: list[SourceFile] = []
    diagnostics: list[Diagnostic] = []
    visited: set[tuple[int, int]] = set()

    def _skip(path: Path, reason: str) -> None:
        LOGGER.debug("skipping %s: %s", path, reason)
        diagnostics.append(
            Diagnostic(kind="skipped-entry", message=reason, file=path.as_posix())
        )

    def _walk(directory: Path) -> None:
        try:
            stat = directory.stat()
        except OSError as exc:
            _skip(directory, exc.strerror or exc.__class__.__name__)
            return
        key = (stat.st_dev, stat.st_ino)
        if key in visited:
            _skip(directory, "symlink cycle")
            return
        visited.add(key)

        try:
            with os.scandir(directory) as entries:
                children = sorted(entries, key=lambda entry: entry.name)
        except OSError as exc:
            _skip(directory, exc.strerror or exc.__class__.__name__)
            return

        for entry in children:
            path = directory / entry.name
            try:
                is_dir = entry.is_dir()
                is_file = not is_dir and entry.is_file()
            except OSError as exc:
                _skip(path, exc.strerror or exc.__class__.__name__)
                continue
            if is_dir:
                if entry.name in EXCLUDED_DIR_NAMES:
                    continue
                _walk(path)
            elif is_file:
                kind = source_kind(path)
                if kind is not None:
                    files.append(SourceFile(path=path, display_path=path.as_posix(), kind=kind))

    _walk(root)
    files.sort(key=lambda item: item.display_path)
    LOGGER.debug("collected %d source files under %s", len(files), root)
    return CollectedSources(files=tuple(files), diagnostics=tuple(diagnostics))
