"""Offline browser-selection queries over the bundled browser usage table."""

from __future__ import annotations

from collections.abc import Callable
import logging
import operator
import re

from .constants import DEAD_BROWSERS
from .exceptions import QueryError
from .tables import AgentTable

LOGGER = logging.getLogger(__name__)

Selection = set[tuple[str, str]]

_DEFAULTS_QUERY = "> 0.5%, last 2 versions, not dead"

_NAME_ALIASES: dict[str, str] = {
    "ff": "firefox",
    "explorer": "ie",
    "ios": "ios_saf",
    "chromeandroid": "and_chr",
    "firefoxandroid": "and_ff",
    "operamini": "op_mini",
    "ucandroid": "and_uc",
    "samsunginternet": "samsung",
}

_COMPARATORS: dict[str, Callable[[object, object], bool]] = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
}

_SPLIT_RE = re.compile(r"\s*,\s*|\s+(or|and)\s+", re.IGNORECASE)
_USAGE_RE = re.compile(r"^(>=|<=|>|<)\s*(\d+(?:\.\d+)?)%$")
_LAST_RE = re.compile(r"^last\s+(\d+)\s+versions?$", re.IGNORECASE)
_LAST_BROWSER_RE = re.compile(r"^last\s+(\d+)\s+([\w-]+)\s+versions?$", re.IGNORECASE)
_VERSION_RANGE_RE = re.compile(r"^([\w-]+)\s*(>=|<=|>|<)\s*([\d.]+)$")
_VERSION_RE = re.compile(r"^([\w-]+)\s+([\w.]+)$")


def _browser_name(raw: str, agents: AgentTable) -> str:
    name = raw.lower()
    name = _NAME_ALIASES.get(name, name)
    if name not in agents:
        raise QueryError(raw)
    return name


def _version_tuple(version: str) -> tuple[int, ...] | None:
    try:
        return tuple(int(part) for part in version.split("."))
    except ValueError:
        return None


def _resolve(query: str, agents: AgentTable) -> Selection:
    text = query.strip()
    lowered = text.lower()

    if lowered == "defaults":
        return set(_evaluate(_DEFAULTS_QUERY, agents))
    if lowered == "dead":
        return {
            (name, version)
            for name in DEAD_BROWSERS
            for version, _ in agents.get(name, ())
        }

    if match := _USAGE_RE.match(text):
        compare = _COMPARATORS[match.group(1)]
        threshold = float(match.group(2))
        return {
            (name, version)
            for name, versions in agents.items()
            for version, usage in versions
            if compare(usage, threshold)
        }

    if match := _LAST_RE.match(text):
        count = int(match.group(1))
        return {
            (name, version)
            for name, versions in agents.items()
            for version, _ in versions[-count:]
        }

    if match := _LAST_BROWSER_RE.match(text):
        count = int(match.group(1))
        name = _browser_name(match.group(2), agents)
        return {(name, version) for version, _ in agents[name][-count:]}

    if match := _VERSION_RANGE_RE.match(text):
        name = _browser_name(match.group(1), agents)
        compare = _COMPARATORS[match.group(2)]
        bound = _version_tuple(match.group(3))
        if bound is None:
            raise QueryError(query)
        selected: Selection = set()
        for version, _ in agents[name]:
            parsed = _version_tuple(version)
            if parsed is not None and compare(parsed, bound):
                selected.add((name, version))
        return selected

    if match := _VERSION_RE.match(text):
        name = _browser_name(match.group(1), agents)
        wanted = match.group(2)
        return {(name, version) for version, _ in agents[name] if version == wanted}

    raise QueryError(query)


def _split(query: str) -> list[tuple[str, str]]:
    """Split a query into (combinator, sub-query) pairs; the first is always ``or``."""
    parts: list[tuple[str, str]] = []
    combinator = "or"
    position = 0
    for match in _SPLIT_RE.finditer(query):
        parts.append((combinator, query[position : match.start()]))
        combinator = (match.group(1) or "or").lower()
        position = match.end()
    parts.append((combinator, query[position:]))
    return [(comb, part.strip()) for comb, part in parts if part.strip()]


def _evaluate(query: str, agents: AgentTable) -> Selection:
    result: Selection = set()
    parts = _split(query)
    if not parts:
        return result
    for index, (combinator, part) in enumerate(parts):
        if part.lower().startswith("not "):
            if index == 0:
                raise QueryError(query)
            result -= _resolve(part[4:], agents)
        elif combinator == "and":
            result &= _resolve(part, agents)
        else:
            result |= _resolve(part, agents)
    return result


def expand_query(query: str, agents: AgentTable) -> list[str]:
    """Expand a browserslist-style query into ``"name version"`` selectors."""
    order = {
        (name, version): index
        for name, versions in agents.items()
        for index, (version, _) in enumerate(versions)
    }
    selected = sorted(_evaluate(query, agents), key=lambda item: (item[0], -order[item]))
    LOGGER.debug("query %r selected %d browser versions", query, len(selected))
    return [f"{name} {version}" for name, version in selected]


def selected_browser_names(query: str, agents: AgentTable) -> frozenset[str]:
    """Reduce an expanded query to its distinct, lowercased browser names."""
    return frozenset(item.split(" ", 1)[0].lower() for item in expand_query(query, agents))
