"""Progressive-enhancement detection for script hits.

This is a textual approximation, not an analysis of control flow. It misses
guards that live elsewhere (an early return, a helper function) and it can
fire on an unrelated ``in`` test or ``try`` block near the hit. A stricter
detector can be passed to :func:`flightdeck.scanner.scan` in its place; the
severity policy only consumes its boolean answer.
"""

from __future__ import annotations

import re
from typing import Protocol

_IN_CHECK_RE = re.compile(r"""\bif\s*\(\s*['"][\w$]+['"]\s*in\s*[\w$]+(?:\.[\w$]+)*\s*\)""")
_TRY_CATCH_RE = re.compile(r"\btry\s*\{[\s\S]+\}\s*catch\s*[({]")


class GuardDetector(Protocol):
    def __call__(self, context: str) -> bool: ...


def is_progressive(context: str) -> bool:
    """Detect a feature-detection ``in`` check or a try/catch around the hit."""
    return bool(_IN_CHECK_RE.search(context) or _TRY_CATCH_RE.search(context))
