"""Loading of the static feature, alias and browser usage tables."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, get_args

from .constants import ALIAS_SOURCE_ORDER
from .exceptions import DataTableError
from .model import BaselineStatus, FeatureDefinition

LOGGER = logging.getLogger(__name__)

BUNDLED_DATA_DIR = Path(__file__).parent / "data"

AgentTable = Mapping[str, tuple[tuple[str, float], ...]]


@dataclass(frozen=True)
class DataTables:
    """Immutable inputs shared by every file of a scan."""

    features: Mapping[str, FeatureDefinition]
    aliases: Mapping[str, str]
    agents: AgentTable


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise DataTableError(str(path), "file not found") from exc
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DataTableError(str(path), str(exc)) from exc


def parse_features(raw: Any, source: str = "<features>") -> dict[str, FeatureDefinition]:
    """Validate a raw feature table into definitions keyed by id."""
    if not isinstance(raw, dict):
        raise DataTableError(source, "expected an object of features")

    statuses = get_args(BaselineStatus)
    features: dict[str, FeatureDefinition] = {}
    for feature_id, entry in raw.items():
        if not isinstance(entry, dict):
            raise DataTableError(source, f"feature {feature_id!r} is not an object")
        status = entry.get("status")
        if status not in statuses:
            raise DataTableError(source, f"feature {feature_id!r} has unknown status {status!r}")
        versions = entry.get("minBrowserVersions") or {}
        if not isinstance(versions, dict):
            raise DataTableError(source, f"feature {feature_id!r} has invalid minBrowserVersions")
        features[feature_id] = FeatureDefinition(
            id=feature_id,
            title=str(entry.get("title") or feature_id),
            status=status,
            min_browser_versions={str(k).lower(): str(v) for k, v in versions.items()},
            doc_link=entry.get("docLink") or None,
        )
    return features


def parse_aliases(raw: Any, source: str = "<aliases>") -> dict[str, str]:
    if not isinstance(raw, dict) or not all(
        isinstance(key, str) and isinstance(value, str) for key, value in raw.items()
    ):
        raise DataTableError(source, "expected an object of token -> feature id strings")
    return dict(raw)


def parse_agents(raw: Any, source: str = "<browsers>") -> dict[str, tuple[tuple[str, float], ...]]:
    """Validate the browser usage table: name -> [[version, usage %], ...] oldest first."""
    if not isinstance(raw, dict):
        raise DataTableError(source, "expected an object of browsers")
    agents: dict[str, tuple[tuple[str, float], ...]] = {}
    for name, versions in raw.items():
        if not isinstance(versions, list):
            raise DataTableError(source, f"browser {name!r} must map to a list")
        rows: list[tuple[str, float]] = []
        for item in versions:
            if (
                not isinstance(item, list)
                or len(item) != 2
                or not isinstance(item[1], (int, float))
            ):
                raise DataTableError(source, f"browser {name!r} has a malformed version row")
            rows.append((str(item[0]), float(item[1])))
        agents[str(name).lower()] = tuple(rows)
    return agents


def merge_aliases(*sources: Mapping[str, str]) -> dict[str, str]:
    """Merge alias sources in order; a later definition of a token wins."""
    merged: dict[str, str] = {}
    for source in sources:
        for token, feature_id in source.items():
            previous = merged.get(token)
            if previous is not None and previous != feature_id:
                LOGGER.debug("alias %r remapped from %s to %s", token, previous, feature_id)
            merged[token] = feature_id
    return merged


def load_tables(data_dir: Path | None = None) -> DataTables:
    """Read every table once; the result is passed explicitly into a scan."""
    base = data_dir or BUNDLED_DATA_DIR
    features_path = base / "features.json"
    features = parse_features(_read_json(features_path), str(features_path))

    alias_sources: list[dict[str, str]] = []
    for name in ALIAS_SOURCE_ORDER:
        alias_path = base / "aliases" / f"{name}.json"
        alias_sources.append(parse_aliases(_read_json(alias_path), str(alias_path)))

    browsers_path = base / "browsers.json"
    agents = parse_agents(_read_json(browsers_path), str(browsers_path))

    LOGGER.debug("loaded %d features and %d browsers from %s", len(features), len(agents), base)
    return DataTables(
        features=MappingProxyType(features),
        aliases=MappingProxyType(merge_aliases(*alias_sources)),
        agents=MappingProxyType(agents),
    )
