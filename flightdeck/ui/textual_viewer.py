"""Textual app for browsing a scan report interactively."""

from __future__ import annotations

from typing import ClassVar, TypeVar

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Input, Static

from ..model import ScanResult
from .render import SEVERITY_FILTERS, SORT_KEYS, ViewState, render_report

_T = TypeVar("_T", bound=str)


def cycle(options: tuple[_T, ...], current: _T) -> _T:
    return options[(options.index(current) + 1) % len(options)]


class _ReportViewerApp(App[None]):
    CSS = """
    Screen {
        layout: vertical;
    }

    #search {
        margin: 0 1;
    }

    #frame {
        height: 1fr;
    }

    #hint {
        color: $text-muted;
        margin: 0 1;
    }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("f", "cycle_severity", show=False),
        Binding("s", "cycle_sort", show=False),
        Binding("o", "toggle_order", show=False),
        Binding("slash", "focus_search", show=False),
        Binding("q", "quit_app", show=False),
        Binding("escape", "quit_app", show=False),
    ]

    def __init__(self, result: ScanResult) -> None:
        super().__init__()
        self._result = result
        self._state = ViewState()

    def compose(self) -> ComposeResult:
        yield Input(placeholder="Filter features…", id="search")
        with VerticalScroll(id="frame"):
            yield Static(id="report")
        yield Static(id="hint")

    def on_mount(self) -> None:
        self.query_one("#frame").focus()
        self._refresh_frame()

    def _refresh_frame(self) -> None:
        self.query_one("#report", Static).update(render_report(self._result, self._state))
        order = "desc" if self._state.descending else "asc"
        self.query_one("#hint", Static).update(
            f"f severity: {self._state.severity}  s sort: {self._state.sort_key} ({order})"
            "  o order  / search  q quit"
        )

    def on_input_changed(self, event: Input.Changed) -> None:
        self._state.query = event.value
        self._refresh_frame()

    def action_cycle_severity(self) -> None:
        self._state.severity = cycle(SEVERITY_FILTERS, self._state.severity)
        self._refresh_frame()

    def action_cycle_sort(self) -> None:
        self._state.sort_key = cycle(SORT_KEYS, self._state.sort_key)
        self._refresh_frame()

    def action_toggle_order(self) -> None:
        self._state.descending = not self._state.descending
        self._refresh_frame()

    def action_focus_search(self) -> None:
        self.query_one("#search", Input).focus()

    def action_quit_app(self) -> None:
        self.exit()


def run_textual_viewer(result: ScanResult) -> None:
    """Run the interactive report viewer until the user quits."""
    _ReportViewerApp(result).run()
