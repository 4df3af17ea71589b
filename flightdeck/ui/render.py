"""Rich renderables for scan results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..constants import SEVERITY_ICON_MAP, SEVERITY_RANK, SEVERITY_STYLE_MAP
from ..model import FeatureUsage, ScanResult
from ..util.text import ellipsize

SortKey = Literal["severity", "hits", "coverage", "id"]
SeverityFilter = Literal["all", "warn", "error"]

SORT_KEYS: tuple[SortKey, ...] = ("severity", "hits", "coverage", "id")
SEVERITY_FILTERS: tuple[SeverityFilter, ...] = ("all", "warn", "error")


@dataclass
class ViewState:
    query: str = ""
    severity: SeverityFilter = "all"
    sort_key: SortKey = "severity"
    descending: bool = True


def _sort_value(usage: FeatureUsage, key: SortKey) -> tuple[object, ...]:
    if key == "severity":
        return (SEVERITY_RANK[usage.severity], usage.count)
    if key == "hits":
        return (usage.count,)
    if key == "coverage":
        return (usage.coverage,)
    return (usage.id,)


def visible_features(result: ScanResult, state: ViewState) -> list[FeatureUsage]:
    """Filter by severity floor and search text, then sort."""
    floor = 0 if state.severity == "all" else SEVERITY_RANK[state.severity]
    needle = state.query.strip().lower()
    rows = [
        usage
        for usage in result.features.values()
        if SEVERITY_RANK[usage.severity] >= floor
        and (not needle or needle in usage.id.lower() or needle in usage.status)
    ]
    rows.sort(key=lambda usage: usage.id)
    rows.sort(key=lambda usage: _sort_value(usage, state.sort_key), reverse=state.descending)
    return rows


def severity_text(severity: str) -> Text:
    icon = SEVERITY_ICON_MAP.get(severity, "?")
    return Text(f"{icon} {severity}", style=SEVERITY_STYLE_MAP.get(severity, ""))


def render_summary(result: ScanResult) -> Panel:
    summary = result.summary
    verdict = Text("PASS", style="bold green") if summary.passed else Text("FAIL", style="bold red")
    lines = [
        Text.assemble("Result: ", verdict),
        Text(f"Violations (not yet Baseline or below coverage): {len(summary.violations)}"),
        Text(f"Warnings (newly / budget): {len(summary.warnings)}"),
        Text(f"Coverage: {summary.achieved}% (budget {summary.coverage_budget}%)"),
    ]
    if result.diagnostics:
        lines.append(Text(f"Diagnostics: {len(result.diagnostics)}", style="dim"))
    return Panel(Group(*lines), title="Baseline Flightdeck", border_style="blue")


def render_features_table(features: list[FeatureUsage], *, snippet_width: int = 48) -> Table:
    table = Table(expand=True)
    table.add_column("Feature", style="bold")
    table.add_column("Status")
    table.add_column("Severity")
    table.add_column("Coverage", justify="right")
    table.add_column("Hits", justify="right")
    table.add_column("First occurrence")
    for usage in features:
        first = usage.hits[0] if usage.hits else None
        location = ""
        if first is not None:
            location = f"{first.file}:{first.line}  {ellipsize(first.snippet, snippet_width)}"
        table.add_row(
            usage.id,
            usage.status.upper(),
            severity_text(usage.severity),
            f"{usage.coverage}%",
            str(usage.count),
            Text(location),
        )
    return table


def render_diagnostics(result: ScanResult) -> Group:
    lines = [Text("Diagnostics", style="bold")]
    for item in result.diagnostics:
        where = f"{item.file}: " if item.file else ""
        lines.append(Text(f"  [{item.kind}] {where}{item.message}", style="dim"))
    return Group(*lines)


def render_report(result: ScanResult, state: ViewState | None = None) -> Group:
    """Render the summary panel, the feature table and any diagnostics."""
    parts: list[object] = [render_summary(result)]
    features = visible_features(result, state or ViewState())
    if features:
        parts.append(render_features_table(features))
    else:
        parts.append(Text("No Baseline-tracked features found.", style="dim"))
    if result.diagnostics:
        parts.append(render_diagnostics(result))
    return Group(*parts)
