"""Per-format extraction of raw token occurrences."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
import logging
from pathlib import Path

from ..collect import SourceFile
from ..exceptions import ParseFailure
from ..model import Diagnostic, Occurrence, SourceKind
from .markup import extract_markup
from .script import extract_script
from .style import extract_style, has_supports_wrapper

LOGGER = logging.getLogger(__name__)

Extractor = Callable[[str, Mapping[str, str], Path], list[Occurrence]]

EXTRACTORS: dict[SourceKind, Extractor] = {
    SourceKind.SCRIPT: extract_script,
    SourceKind.STYLE: extract_style,
    SourceKind.MARKUP: extract_markup,
}


@dataclass(frozen=True)
class FileExtraction:
    """Everything one file contributes to a scan."""

    source: SourceFile
    occurrences: tuple[Occurrence, ...] = ()
    supports_wrapped: bool = False
    diagnostic: Diagnostic | None = None


def _failure(source: SourceFile, reason: str) -> FileExtraction:
    LOGGER.debug("parse failure in %s: %s", source.display_path, reason)
    return FileExtraction(
        source=source,
        diagnostic=Diagnostic(kind="parse-failure", message=reason, file=source.display_path),
    )


def extract_file(source: SourceFile, aliases: Mapping[str, str]) -> FileExtraction:
    """Read and extract one file; failures become a diagnostic, never an exception."""
    try:
        text = source.path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        return _failure(source, f"not valid UTF-8 ({exc.reason})")
    except OSError as exc:
        return _failure(source, exc.strerror or exc.__class__.__name__)

    try:
        occurrences = EXTRACTORS[source.kind](text, aliases, source.path)
    except ParseFailure as exc:
        return _failure(source, exc.reason)

    return FileExtraction(
        source=source,
        occurrences=tuple(occurrences),
        supports_wrapped=source.kind is SourceKind.STYLE and has_supports_wrapper(text),
    )
