from __future__ import annotations

from types import MappingProxyType

import pytest

from flightdeck.model import ScanConfig
from flightdeck.tables import DataTables, merge_aliases, parse_agents, parse_aliases, parse_features

FEATURES = {
    "view-transitions": {
        "title": "View transitions",
        "status": "newly",
        "minBrowserVersions": {"chrome": "111", "edge": "111"},
        "docLink": "https://caniuse.com/view-transitions",
    },
    "clipboard-api": {
        "title": "Async clipboard",
        "status": "newly",
        "minBrowserVersions": {"chrome": "66", "firefox": "125", "safari": "13.1"},
    },
    "selector-has": {
        "title": ":has()",
        "status": "newly",
        "minBrowserVersions": {"chrome": "105", "firefox": "121", "safari": "15.4"},
    },
    "web-share": {
        "title": "Web share",
        "status": "none",
        "minBrowserVersions": {"safari": "12.1"},
    },
    "dialog-element": {
        "title": "<dialog>",
        "status": "widely",
        "minBrowserVersions": {"chrome": "37", "edge": "79", "firefox": "98", "safari": "15.4"},
    },
}

SCRIPT_ALIASES = {
    "document.startViewTransition": "view-transitions",
    "navigator.clipboard": "clipboard-api",
    "navigator.share": "web-share",
    "HTMLDialogElement": "dialog-element",
}
STYLE_ALIASES = {":has": "selector-has", "dialog": "dialog-element"}
MARKUP_ALIASES = {"dialog": "dialog-element", "popover": "popover-attribute"}

AGENTS = {
    "chrome": [["120", 40.0], ["121", 5.0]],
    "edge": [["120", 4.0]],
    "firefox": [["121", 3.0]],
    "safari": [["17", 10.0]],
    "ie": [["11", 0.3]],
}


def build_tables() -> DataTables:
    return DataTables(
        features=MappingProxyType(parse_features(FEATURES)),
        aliases=MappingProxyType(
            merge_aliases(
                parse_aliases(SCRIPT_ALIASES),
                parse_aliases(STYLE_ALIASES),
                parse_aliases(MARKUP_ALIASES),
            )
        ),
        agents=MappingProxyType(parse_agents(AGENTS)),
    )


@pytest.fixture
def tables() -> DataTables:
    return build_tables()


@pytest.fixture
def config() -> ScanConfig:
    return ScanConfig(coverage_budget=0)
