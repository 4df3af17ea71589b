"""Scan orchestration: collect, extract, resolve, classify, assemble."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import logging
from pathlib import Path

from .audience import load_distribution
from .browsers import selected_browser_names
from .collect import collect_sources, ensure_root
from .coverage import estimate_coverage
from .extract import FileExtraction, extract_file
from .guard import GuardDetector, is_progressive
from .model import (
    Diagnostic,
    FeatureDefinition,
    FeatureUsage,
    Hit,
    ScanConfig,
    ScanResult,
    SourceKind,
)
from .policy import classify, summarize
from .tables import DataTables, load_tables

LOGGER = logging.getLogger(__name__)


@dataclass
class _Accumulator:
    """Hits gathered for one feature before classification."""

    hits: list[Hit] = field(default_factory=list)
    softened: bool = False


def _merge(
    extractions: Iterable[FileExtraction],
    tables: DataTables,
    guard_detector: GuardDetector,
) -> tuple[dict[str, _Accumulator], list[Diagnostic]]:
    """Resolve occurrences to feature ids and group hits per feature."""
    accumulators: dict[str, _Accumulator] = {}
    diagnostics: list[Diagnostic] = []

    for extraction in extractions:
        if extraction.diagnostic is not None:
            diagnostics.append(extraction.diagnostic)
            continue

        source = extraction.source
        touched: set[str] = set()
        for occurrence in extraction.occurrences:
            feature_id = tables.aliases.get(occurrence.token)
            if feature_id is None:
                continue
            if feature_id not in tables.features:
                LOGGER.debug("alias %r points at unknown feature %s", occurrence.token, feature_id)
                continue
            accumulator = accumulators.setdefault(feature_id, _Accumulator())
            accumulator.hits.append(
                Hit(
                    file=source.display_path,
                    line=occurrence.line,
                    column=occurrence.column,
                    snippet=occurrence.snippet,
                )
            )
            touched.add(feature_id)
            if source.kind is SourceKind.SCRIPT and guard_detector(occurrence.context):
                accumulator.softened = True

        if extraction.supports_wrapped:
            for feature_id in touched:
                accumulators[feature_id].softened = True

    return accumulators, diagnostics


def _usage(
    definition: FeatureDefinition,
    accumulator: _Accumulator,
    coverage: int,
    config: ScanConfig,
) -> FeatureUsage:
    hits = tuple(sorted(accumulator.hits, key=lambda hit: hit.sort_key))
    return FeatureUsage(
        id=definition.id,
        count=len(hits),
        hits=hits,
        status=definition.status,
        coverage=coverage,
        severity=classify(definition, coverage, accumulator.softened, config),
        min_browser_versions=dict(definition.min_browser_versions),
        doc_link=definition.doc_link,
    )


def scan(
    root: Path | str,
    config: ScanConfig,
    audience_source: Path | None = None,
    *,
    tables: DataTables | None = None,
    guard_detector: GuardDetector = is_progressive,
    jobs: int = 1,
) -> ScanResult:
    """Scan ``root`` and classify every feature it uses.

    Only a missing or non-directory root raises (:class:`NotFoundError`);
    unreadable files, unparseable files and malformed audience rows are
    reported in ``ScanResult.diagnostics`` and otherwise skipped.

    Args:
        root: Directory to scan.
        config: Scan configuration, already loaded by the caller.
        audience_source: Analytics CSV; defaults to ``config.analytics_source``.
        tables: Feature, alias and browser tables; the bundled ones when omitted.
        guard_detector: Progressive-enhancement detector for script hits.
        jobs: Number of files extracted concurrently.
    """
    root_path = Path(root)
    ensure_root(root_path)
    tables = tables or load_tables()

    diagnostics: list[Diagnostic] = []
    distribution: Mapping[str, float] = {}
    source = audience_source or config.analytics_source
    if source is not None:
        distribution, audience_diagnostics = load_distribution(Path(source))
        diagnostics.extend(audience_diagnostics)
    selected_names = (
        frozenset()
        if distribution
        else selected_browser_names(config.browserslist_query, tables.agents)
    )

    collected = collect_sources(root_path)
    diagnostics.extend(collected.diagnostics)

    if jobs > 1 and len(collected.files) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            extractions = list(
                executor.map(lambda item: extract_file(item, tables.aliases), collected.files)
            )
    else:
        extractions = [extract_file(item, tables.aliases) for item in collected.files]

    accumulators, extraction_diagnostics = _merge(extractions, tables, guard_detector)
    diagnostics.extend(extraction_diagnostics)

    features: dict[str, FeatureUsage] = {}
    for feature_id in sorted(accumulators):
        definition = tables.features[feature_id]
        coverage = estimate_coverage(definition.min_browser_versions, distribution, selected_names)
        features[feature_id] = _usage(definition, accumulators[feature_id], coverage, config)

    summary = summarize(features, config.coverage_budget)
    LOGGER.debug(
        "scanned %d files: %d features, %d violations, %d warnings",
        len(collected.files),
        len(features),
        len(summary.violations),
        len(summary.warnings),
    )
    return ScanResult(
        features=features,
        summary=summary,
        diagnostics=tuple(sorted(diagnostics, key=lambda item: item.sort_key)),
    )
