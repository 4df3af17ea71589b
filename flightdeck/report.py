"""Persisted report: JSON (de)serialization and report directory output."""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path
from typing import Any

from rich.console import Console

from .model import Diagnostic, FeatureUsage, Hit, ScanResult, Summary
from .ui.render import render_report

LOGGER = logging.getLogger(__name__)

REPORT_JSON = "report.json"
REPORT_HTML = "index.html"
REPORT_BADGE = "badge.svg"

_BADGE_TEMPLATE = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="130" height="20">'
    '<rect width="130" height="20" fill="#555"/>'
    '<rect x="60" width="70" height="20" fill="{color}"/>'
    '<g fill="#fff" font-family="Verdana" font-size="11">'
    '<text x="7" y="14">baseline</text><text x="70" y="14">{label}</text></g></svg>'
)


def _usage_to_dict(usage: FeatureUsage) -> dict[str, Any]:
    return {
        "id": usage.id,
        "count": usage.count,
        "hits": [
            {"file": hit.file, "line": hit.line, "column": hit.column, "snippet": hit.snippet}
            for hit in usage.hits
        ],
        "status": usage.status,
        "coverage": usage.coverage,
        "severity": usage.severity,
        "minBrowserVersions": dict(sorted(usage.min_browser_versions.items())),
        "docLink": usage.doc_link,
    }


def to_dict(result: ScanResult) -> dict[str, Any]:
    summary = result.summary
    return {
        "features": {fid: _usage_to_dict(usage) for fid, usage in result.features.items()},
        "summary": {
            "violations": list(summary.violations),
            "warnings": list(summary.warnings),
            "pass": summary.passed,
            "coverageBudget": summary.coverage_budget,
            "achieved": summary.achieved,
        },
        "diagnostics": [
            {"kind": item.kind, "message": item.message, "file": item.file}
            for item in result.diagnostics
        ],
    }


def from_dict(data: dict[str, Any]) -> ScanResult:
    """Rebuild a :class:`ScanResult` from its JSON record."""
    features = {
        fid: FeatureUsage(
            id=entry["id"],
            count=entry["count"],
            hits=tuple(
                Hit(file=h["file"], line=h["line"], column=h["column"], snippet=h["snippet"])
                for h in entry["hits"]
            ),
            status=entry["status"],
            coverage=entry["coverage"],
            severity=entry["severity"],
            min_browser_versions=dict(entry.get("minBrowserVersions") or {}),
            doc_link=entry.get("docLink"),
        )
        for fid, entry in data["features"].items()
    }
    raw_summary = data["summary"]
    summary = Summary(
        violations=tuple(raw_summary["violations"]),
        warnings=tuple(raw_summary["warnings"]),
        passed=raw_summary["pass"],
        coverage_budget=raw_summary["coverageBudget"],
        achieved=raw_summary["achieved"],
    )
    diagnostics = tuple(
        Diagnostic(kind=item["kind"], message=item["message"], file=item.get("file"))
        for item in data.get("diagnostics", [])
    )
    return ScanResult(features=features, summary=summary, diagnostics=diagnostics)


def dumps(result: ScanResult) -> str:
    return json.dumps(to_dict(result), indent=2, ensure_ascii=False) + "\n"


def loads(raw: str) -> ScanResult:
    return from_dict(json.loads(raw))


def read_report(path: Path) -> ScanResult:
    return loads(path.read_text(encoding="utf-8"))


def render_badge(passed: bool) -> str:
    return _BADGE_TEMPLATE.format(
        color="#4c1" if passed else "#e05d44",
        label="passing" if passed else "failing",
    )


def render_html(result: ScanResult) -> str:
    """Render the report table as a standalone HTML page."""
    console = Console(record=True, width=120, file=io.StringIO())
    console.print(render_report(result))
    return console.export_html(inline_styles=True)


def write_report(result: ScanResult, out_dir: Path) -> Path:
    """Write ``report.json``, ``index.html`` and ``badge.svg`` into ``out_dir``."""
    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / REPORT_JSON).write_text(dumps(result), encoding="utf-8")
    (out_dir / REPORT_HTML).write_text(render_html(result), encoding="utf-8")
    (out_dir / REPORT_BADGE).write_text(render_badge(result.summary.passed), encoding="utf-8")
    LOGGER.debug("wrote report to %s", out_dir)
    return out_dir / REPORT_JSON
