"""Report viewing entry point: interactive on a terminal, static otherwise."""

from __future__ import annotations

import sys

from rich.console import Console

from ..model import ScanResult
from .render import render_report


def _supports_tui() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def run_viewer(result: ScanResult, *, interactive: bool | None = None) -> None:
    """Show a report in the Textual viewer, or print it when not on a TTY."""
    if interactive is None:
        interactive = _supports_tui()
    if interactive:
        from .textual_viewer import run_textual_viewer

        run_textual_viewer(result)
        return
    Console().print(render_report(result))
