"""Constants used across flightdeck."""

from __future__ import annotations

from typing import Final

SCRIPT_SUFFIXES: Final[tuple[str, ...]] = (
    ".js",
    ".jsx",
    ".mjs",
    ".cjs",
    ".ts",
    ".tsx",
    ".mts",
    ".cts",
)
STYLE_SUFFIXES: Final[tuple[str, ...]] = (".css",)
MARKUP_SUFFIXES: Final[tuple[str, ...]] = (".html", ".htm")

EXCLUDED_DIR_NAMES: Final[frozenset[str]] = frozenset({".git", "node_modules", ".baseline"})

CONFIG_FILE_NAME: Final[str] = ".flightdeckrc.json"
DEFAULT_REPORT_DIR: Final[str] = ".baseline"
DEFAULT_COVERAGE_BUDGET: Final[int] = 95
DEFAULT_BROWSERSLIST_QUERY: Final[str] = ">0.5%, not dead"
DEFAULT_PROFILE: Final[str] = "moderate"

# Lines on each side of a script hit handed to the guard detector.
GUARD_CONTEXT_LINES: Final[int] = 2

# Style heuristics: substrings matched in selector text and in declarations.
STYLE_SELECTOR_TOKENS: Final[tuple[str, ...]] = ("dialog",)
STYLE_DECLARATION_TOKENS: Final[tuple[str, ...]] = ("popover",)

# Alias sources are merged in this order; a later definition of a key wins.
ALIAS_SOURCE_ORDER: Final[tuple[str, ...]] = ("script", "style", "markup")

SEVERITY_RANK: Final[dict[str, int]] = {"info": 0, "warn": 1, "error": 2}

SEVERITY_ICON_MAP: Final[dict[str, str]] = {
    "info": "ℹ",
    "warn": "⚠",
    "error": "✖",
}

SEVERITY_STYLE_MAP: Final[dict[str, str]] = {
    "info": "cyan",
    "warn": "yellow",
    "error": "bold red",
}

ANNOTATION_LEVEL_MAP: Final[dict[str, str]] = {
    "info": "notice",
    "warn": "warning",
    "error": "failure",
}
MAX_ANNOTATIONS_PER_FEATURE: Final[int] = 30
CHECK_RUN_NAME: Final[str] = "Baseline Flightdeck"

# Browsers without official support or updates for 24 months.
DEAD_BROWSERS: Final[frozenset[str]] = frozenset({"ie", "ie_mob", "bb", "baidu", "kaios"})

# web-features browser keys -> browserslist agent names.
WEB_FEATURES_BROWSER_MAP: Final[dict[str, str]] = {
    "chrome": "chrome",
    "chrome_android": "and_chr",
    "edge": "edge",
    "firefox": "firefox",
    "firefox_android": "and_ff",
    "safari": "safari",
    "safari_ios": "ios_saf",
}

BASELINE_STATUS_MAP: Final[dict[object, str]] = {
    "high": "widely",
    "low": "newly",
    False: "none",
}

GITHUB_API_URL: Final[str] = "https://api.github.com"
CANIUSE_URL: Final[str] = "https://caniuse.com"
WEB_FEATURES_DATA_URL: Final[str] = "https://unpkg.com/web-features/data.json"
CANIUSE_DATA_URL: Final[str] = (
    "https://raw.githubusercontent.com/Fyrd/caniuse/main/fulldata-json/data-2.0.json"
)

DEBUG_ENV_VAR: Final[str] = "FLIGHTDECK_DEBUG"
DEFAULT_TIMEOUT_SECONDS: Final[float] = 10.0
