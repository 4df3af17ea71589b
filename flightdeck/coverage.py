"""Audience coverage estimation for a single feature."""

from __future__ import annotations

from collections.abc import Mapping, Set

from .util.text import clamp_percent, round_half_up


def estimate_coverage(
    min_versions: Mapping[str, str],
    distribution: Mapping[str, float],
    selected_names: Set[str],
) -> int:
    """Estimate the percentage of the audience that can use a feature.

    With audience data, coverage is the share of the audience whose browser
    appears in ``min_versions``. Without it, coverage is the fraction of the
    distinct browsers selected by the fallback query that appear there.

    A listed browser counts as fully covered: the audience's versions are
    never compared against the minimum version.
    """
    if distribution:
        total = sum(distribution.values())
        if total == 0:
            return 0
        covered = sum(share for name, share in distribution.items() if name in min_versions)
        return clamp_percent(round_half_up(100 * covered / total))

    if not selected_names:
        return 0
    have = sum(1 for name in selected_names if name in min_versions)
    return clamp_percent(round_half_up(100 * have / len(selected_names)))
