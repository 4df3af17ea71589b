"""Audience distribution parsing from analytics CSV exports."""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path

from .exceptions import InvalidConfigRow
from .model import Diagnostic
from .util.text import parse_share

LOGGER = logging.getLogger(__name__)


def parse_distribution(
    text: str, source: str = "<analytics>"
) -> tuple[dict[str, float], list[Diagnostic]]:
    """Parse ``browser,share`` rows after a header row.

    Rows without a browser name or with a non-numeric share are skipped and
    reported; shares for a repeated browser accumulate.
    """
    distribution: dict[str, float] = {}
    diagnostics: list[Diagnostic] = []
    reader = csv.reader(io.StringIO(text))
    for row_number, row in enumerate(reader, start=1):
        if row_number == 1 or not any(cell.strip() for cell in row):
            continue
        name = row[0].strip().lower() if row else ""
        share = parse_share(row[1]) if len(row) > 1 else None
        if not name or share is None or share < 0:
            error = InvalidConfigRow(row_number, row)
            LOGGER.debug("%s", error)
            diagnostics.append(
                Diagnostic(kind="invalid-config-row", message=str(error), file=source)
            )
            continue
        distribution[name] = distribution.get(name, 0.0) + share
    return distribution, diagnostics


def load_distribution(path: Path) -> tuple[dict[str, float], list[Diagnostic]]:
    """Load an analytics CSV; a missing file yields an empty distribution."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        LOGGER.debug("analytics source %s unavailable: %s", path, exc)
        return {}, [
            Diagnostic(
                kind="missing-config",
                message="analytics source not found, using the browser query instead",
                file=path.as_posix(),
            )
        ]
    return parse_distribution(text, path.as_posix())
