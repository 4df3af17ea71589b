"""Data preparation: derive the bundled tables from upstream datasets."""

from __future__ import annotations

from collections.abc import Iterable
import json
import logging
from pathlib import Path
from typing import Any

from .constants import BASELINE_STATUS_MAP, CANIUSE_URL, WEB_FEATURES_BROWSER_MAP
from .exceptions import DataTableError
from .http import fetch_json

LOGGER = logging.getLogger(__name__)


def load_source(source: str) -> Any:
    """Read a JSON dataset from a URL or a local path."""
    if source.startswith(("http://", "https://")):
        return fetch_json(source, timeout=60.0)
    path = Path(source)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise DataTableError(source, str(exc)) from exc


def _doc_link(entry: dict[str, Any]) -> str | None:
    caniuse = entry.get("caniuse")
    if isinstance(caniuse, str):
        caniuse = [caniuse]
    if isinstance(caniuse, list) and caniuse:
        return f"{CANIUSE_URL}/{caniuse[0]}"
    spec = entry.get("spec")
    if isinstance(spec, list):
        spec = spec[0] if spec else None
    return spec if isinstance(spec, str) else None


def build_features(
    web_features: Any, feature_ids: Iterable[str] | None = None
) -> dict[str, dict[str, Any]]:
    """Convert web-features entries into the ``features.json`` layout.

    Baseline ``high``/``low``/``false`` become ``widely``/``newly``/``none`` and
    browser keys are renamed to browser-query agent names.
    """
    if not isinstance(web_features, dict):
        raise DataTableError("web-features", "expected a JSON object")
    entries = web_features.get("features", web_features)
    if not isinstance(entries, dict):
        raise DataTableError("web-features", "missing features object")

    wanted = set(feature_ids) if feature_ids is not None else None
    output: dict[str, dict[str, Any]] = {}
    for feature_id in sorted(entries):
        entry = entries[feature_id]
        if wanted is not None and feature_id not in wanted:
            continue
        if not isinstance(entry, dict) or entry.get("kind", "feature") != "feature":
            continue
        status = entry.get("status") or {}
        baseline = status.get("baseline")
        if baseline not in BASELINE_STATUS_MAP:
            LOGGER.debug("skipping %s: unknown baseline value %r", feature_id, baseline)
            continue
        support = status.get("support") or {}
        output[feature_id] = {
            "title": entry.get("name") or feature_id,
            "status": BASELINE_STATUS_MAP[baseline],
            "minBrowserVersions": {
                WEB_FEATURES_BROWSER_MAP[key]: str(version)
                for key, version in sorted(support.items())
                if key in WEB_FEATURES_BROWSER_MAP
            },
            "docLink": _doc_link(entry),
        }

    if wanted is not None:
        for feature_id in sorted(wanted - set(output)):
            LOGGER.warning("feature %s was not found in web-features", feature_id)
    return output


def build_agents(caniuse: Any) -> dict[str, list[list[Any]]]:
    """Extract released versions and global usage per browser from caniuse data."""
    agents = caniuse.get("agents") if isinstance(caniuse, dict) else None
    if not isinstance(agents, dict):
        raise DataTableError("caniuse", "missing agents object")

    output: dict[str, list[list[Any]]] = {}
    for name in sorted(agents):
        version_list = agents[name].get("version_list") or []
        rows = [
            [str(item["version"]), round(float(item.get("global_usage") or 0.0), 6)]
            for item in version_list
            if isinstance(item, dict) and item.get("release_date") is not None
        ]
        if rows:
            output[name] = rows
    return output


def write_tables(
    out_dir: Path,
    features: dict[str, dict[str, Any]] | None = None,
    agents: dict[str, list[list[Any]]] | None = None,
) -> list[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for name, payload in (("features.json", features), ("browsers.json", agents)):
        if payload is None:
            continue
        path = out_dir / name
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        written.append(path)
    return written
