"""Severity classification and pass/fail summary."""

from __future__ import annotations

from collections.abc import Iterable

from .model import FeatureDefinition, FeatureUsage, ScanConfig, Severity, Summary
from .util.text import clamp_percent, round_half_up


def classify(
    definition: FeatureDefinition,
    coverage: int,
    softened: bool,
    config: ScanConfig,
) -> Severity:
    """Apply the severity rules to one feature, in precedence order.

    ``softened`` is true when a hit was guarded by progressive enhancement
    (a feature check, try/catch, or an ``@supports`` stylesheet).
    """
    severity: Severity = "info"

    if softened:
        severity = "warn"

    if definition.id in config.ignore:
        return "info"

    if definition.status == "none":
        severity = "error"
    elif definition.status == "newly":
        if config.treat_newly_as_violation:
            severity = "error"
        elif severity == "info":
            severity = "warn"

    override = config.overrides.get(definition.id)
    if override is not None:
        if override.severity is not None:
            severity = override.severity
        if override.min_coverage is not None and coverage < override.min_coverage:
            severity = "error"

    if coverage < config.coverage_budget:
        severity = "error" if severity == "error" else "warn"

    return severity


def achieved_coverage(usages: Iterable[FeatureUsage]) -> int:
    """Hit-weighted mean coverage over features with hits, 100 when there are none."""
    covered = 0
    count = 0
    for usage in usages:
        if usage.count == 0:
            continue
        covered += min(100, usage.coverage) * usage.count
        count += usage.count
    if not count:
        return 100
    return clamp_percent(round_half_up(covered / count))


def summarize(usages: dict[str, FeatureUsage], coverage_budget: int) -> Summary:
    violations = tuple(fid for fid, usage in usages.items() if usage.severity == "error")
    warnings = tuple(fid for fid, usage in usages.items() if usage.severity == "warn")
    achieved = achieved_coverage(usages.values())
    return Summary(
        violations=violations,
        warnings=warnings,
        passed=not violations and achieved >= coverage_budget,
        coverage_budget=coverage_budget,
        achieved=achieved,
    )
