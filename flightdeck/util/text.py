"""Text utility helpers."""

from __future__ import annotations

import math
import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(value: str) -> str:
    """Collapse repeated whitespace and trim ends."""
    return _WHITESPACE_RE.sub(" ", value).strip()


def parse_share(value: str | None) -> float | None:
    """Parse an audience share such as ``70``, ``12.5%`` or ``12,5``."""
    if not value:
        return None
    cleaned = normalize_whitespace(value).replace("%", "").replace(",", ".")
    try:
        share = float(cleaned)
    except ValueError:
        return None
    if math.isnan(share) or math.isinf(share):
        return None
    return share


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def clamp_percent(value: int) -> int:
    return max(0, min(100, value))


def source_line(lines: list[str], line_no: int) -> str:
    """Return the trimmed 1-based source line, or an empty string."""
    if 1 <= line_no <= len(lines):
        return lines[line_no - 1].strip()
    return ""


def line_window(lines: list[str], line_no: int, radius: int) -> str:
    """Join the lines within ``radius`` of a 1-based line number."""
    start = max(line_no - 1 - radius, 0)
    stop = min(line_no + radius, len(lines))
    return "\n".join(lines[start:stop])


def ellipsize(value: str, width: int) -> str:
    """Shorten long strings while preserving suffix visibility."""
    if width <= 0:
        return ""
    if len(value) <= width:
        return value
    if width <= 1:
        return "…"
    return f"{value[: width - 1]}…"
