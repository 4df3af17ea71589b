"""Console script for flightdeck."""

from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.text import Text

from . import __version__ as _version
from .advise import render_advice
from .annotate import GitHubContext, build_annotations, post_check_run
from .config import load_config
from .constants import CANIUSE_DATA_URL, DEFAULT_REPORT_DIR, WEB_FEATURES_DATA_URL
from .databuild import build_agents, build_features, load_source, write_tables
from .exceptions import FlightdeckError
from .http import use_shared_client
from .model import ScanResult
from .plugin import ViolationGate
from .report import REPORT_JSON, read_report, write_report
from .scanner import scan
from .tables import load_tables
from .ui.render import render_summary
from .ui.viewer import run_viewer
from .util.log import configure_logging

EXIT_PASS = 0
EXIT_WARNINGS = 1
EXIT_VIOLATIONS = 2


def exit_code_for(result: ScanResult) -> int:
    """0 when clean, 1 for warnings only, 2 for any violation."""
    if result.summary.violations:
        return EXIT_VIOLATIONS
    if result.summary.warnings:
        return EXIT_WARNINGS
    return EXIT_PASS


def _fail(message: str) -> NoReturn:
    Console(stderr=True).print(Text(message, style="red"))
    raise SystemExit(EXIT_VIOLATIONS)


def _load_report(path: Path) -> ScanResult:
    try:
        return read_report(path)
    except (OSError, ValueError, KeyError, TypeError) as exc:
        _fail(f"Could not read {path}: {exc}")


def _run_scan(
    src: Path,
    *,
    config_path: Path | None = None,
    analytics: Path | None = None,
    browserslist_query: str | None = None,
    budget: int | None = None,
    jobs: int = 1,
) -> ScanResult:
    try:
        config = load_config(
            src,
            config_path,
            analyticsSource=str(analytics.resolve()) if analytics else None,
            browserslistQuery=browserslist_query,
            coverageBudget=budget,
        )
        return scan(src, config, tables=load_tables(), jobs=jobs)
    except FlightdeckError as exc:
        _fail(str(exc))


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(_version, "-v", "--version")
def main() -> None:
    """
    Check a source tree against Baseline web-platform features.

    \b
    Example usages:
      flightdeck scan --src ./src --report ./.baseline
      flightdeck advise --src ./src --write
      flightdeck view ./.baseline/report.json
    """
    configure_logging()


@main.command("scan")
@click.option("--src", required=True, type=click.Path(path_type=Path), help="Source directory.")
@click.option(
    "--report",
    "report_dir",
    type=click.Path(path_type=Path),
    help="Write report.json, index.html and badge.svg to this directory.",
)
@click.option("--analytics", type=click.Path(path_type=Path), help="Analytics CSV (browser,share).")
@click.option("--browserslist", "browserslist_query", help="Browser query (overrides config).")
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Config file.")
@click.option("--budget", type=click.IntRange(0, 100), help="Coverage budget in percent.")
@click.option("--jobs", type=click.IntRange(min=1), default=1, show_default=True)
def scan_command(
    src: Path,
    report_dir: Path | None,
    analytics: Path | None,
    browserslist_query: str | None,
    config_path: Path | None,
    budget: int | None,
    jobs: int,
) -> None:
    """Scan a source tree and gate on violations (exit 0/1/2)."""
    result = _run_scan(
        src,
        config_path=config_path,
        analytics=analytics,
        browserslist_query=browserslist_query,
        budget=budget,
        jobs=jobs,
    )
    console = Console()
    console.print(render_summary(result))
    for item in result.diagnostics:
        where = f"{item.file}: " if item.file else ""
        console.print(Text(f"{item.kind}: {where}{item.message}", style="dim"))
    if report_dir is not None:
        path = write_report(result, report_dir)
        console.print(Text(f"Report written to {path}"))
    raise SystemExit(exit_code_for(result))


@main.command("advise")
@click.option("--src", required=True, type=click.Path(path_type=Path), help="Source directory.")
@click.option(
    "--report",
    "report_dir",
    type=click.Path(path_type=Path),
    help=f"Report directory (default: {DEFAULT_REPORT_DIR} inside --src).",
)
@click.option("--write", is_flag=True, default=False, help="Write suggestions.md.")
def advise_command(src: Path, report_dir: Path | None, write: bool) -> None:
    """Print remediation advice for the features a scan found."""
    out_dir = report_dir or src / DEFAULT_REPORT_DIR
    json_path = out_dir / REPORT_JSON
    if json_path.is_file():
        result = _load_report(json_path)
    else:
        result = _run_scan(src)
        write_report(result, out_dir)

    advice = render_advice(result)
    if write:
        target = out_dir / "suggestions.md"
        out_dir.mkdir(parents=True, exist_ok=True)
        target.write_text(advice + "\n", encoding="utf-8")
        Console().print(Text(f"Wrote {target}", style="green"))
    else:
        Console().print(Markdown(advice))


@main.command("view")
@click.argument("report", type=click.Path(path_type=Path, exists=True, dir_okay=False))
@click.option("--static", "static", is_flag=True, default=False, help="Print instead of a TUI.")
def view_command(report: Path, static: bool) -> None:
    """Browse a report.json interactively."""
    result = _load_report(report)
    run_viewer(result, interactive=False if static else None)


@main.command("lint")
@click.argument("files", nargs=-1, type=click.Path(path_type=Path))
@click.option(
    "--root",
    type=click.Path(path_type=Path, file_okay=False),
    default=Path("."),
    show_default=True,
    help="Repository root to scan once.",
)
def lint_command(files: tuple[Path, ...], root: Path) -> None:
    """Flag each file while the repository has not-yet-Baseline violations."""
    try:
        gate = ViolationGate(root=root, config=load_config(root), tables=load_tables())
        messages = gate.lint(list(files))
    except FlightdeckError as exc:
        _fail(str(exc))
    for path, message in messages:
        click.echo(f"{path.as_posix()}: {message}")
    raise SystemExit(EXIT_WARNINGS if messages else EXIT_PASS)


@main.command("annotate")
@click.option(
    "--report",
    type=click.Path(path_type=Path),
    default=Path(DEFAULT_REPORT_DIR) / REPORT_JSON,
    show_default=True,
)
@click.option("--dry-run", is_flag=True, default=False, help="Print annotations, post nothing.")
def annotate_command(report: Path, dry_run: bool) -> None:
    """Post report hits as GitHub check-run annotations."""
    if not report.is_file():
        _fail(f"Report not found at {report}")
    result = _load_report(report)
    try:
        if dry_run:
            click.echo(json.dumps(build_annotations(result), indent=2))
            return
        context = GitHubContext.from_env()
        with use_shared_client():
            count = post_check_run(result, context)
    except FlightdeckError as exc:
        _fail(str(exc))
    click.echo(f"Posted {count} annotations.")


@main.group("data")
def data_group() -> None:
    """Prepare the feature and browser tables."""


@data_group.command("build")
@click.option("--web-features", "web_features", default=WEB_FEATURES_DATA_URL, show_default=True)
@click.option("--caniuse", "caniuse", default=CANIUSE_DATA_URL, show_default=True)
@click.option("--out", type=click.Path(path_type=Path), default=Path("data"), show_default=True)
@click.option(
    "--all-features",
    is_flag=True,
    default=False,
    help="Keep every web-features entry, not only those referenced by aliases.",
)
def data_build_command(web_features: str, caniuse: str, out: Path, all_features: bool) -> None:
    """Regenerate features.json and browsers.json from upstream data."""
    try:
        wanted = None if all_features else set(load_tables().aliases.values())
        with use_shared_client():
            features = build_features(load_source(web_features), wanted)
            agents = build_agents(load_source(caniuse))
    except FlightdeckError as exc:
        _fail(str(exc))
    for path in write_tables(out, features, agents):
        click.echo(f"✓ Generated {path}")
