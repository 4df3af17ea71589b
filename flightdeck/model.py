"""Data models for feature tables, scan configuration and scan results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from pathlib import Path
from typing import Literal

from .constants import DEFAULT_BROWSERSLIST_QUERY, DEFAULT_COVERAGE_BUDGET, DEFAULT_PROFILE

Severity = Literal["info", "warn", "error"]
BaselineStatus = Literal["widely", "newly", "none"]
DiagnosticKind = Literal["parse-failure", "skipped-entry", "invalid-config-row", "missing-config"]


class SourceKind(Enum):
    SCRIPT = "script"
    STYLE = "style"
    MARKUP = "markup"


@dataclass(frozen=True)
class FeatureDefinition:
    id: str
    title: str
    status: BaselineStatus
    min_browser_versions: dict[str, str]
    doc_link: str | None = None


@dataclass(frozen=True)
class Hit:
    file: str
    line: int
    column: int
    snippet: str

    @property
    def sort_key(self) -> tuple[str, int, int]:
        return (self.file, self.line, self.column)


@dataclass(frozen=True)
class Occurrence:
    """A raw token match produced by an extractor, before alias resolution."""

    token: str
    line: int
    column: int
    snippet: str
    context: str = ""


@dataclass(frozen=True)
class FeatureUsage:
    id: str
    count: int
    hits: tuple[Hit, ...]
    status: BaselineStatus
    coverage: int
    severity: Severity
    min_browser_versions: dict[str, str]
    doc_link: str | None = None


@dataclass(frozen=True)
class Override:
    min_coverage: int | None = None
    severity: Severity | None = None


@dataclass(frozen=True)
class ScanConfig:
    profile: str = DEFAULT_PROFILE
    coverage_budget: int = DEFAULT_COVERAGE_BUDGET
    treat_newly_as_violation: bool = False
    ignore: frozenset[str] = frozenset()
    overrides: dict[str, Override] = field(default_factory=dict)
    analytics_source: Path | None = None
    browserslist_query: str = DEFAULT_BROWSERSLIST_QUERY


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    file: str | None = None

    @property
    def sort_key(self) -> tuple[str, str, str]:
        return (self.file or "", self.kind, self.message)


@dataclass(frozen=True)
class Summary:
    violations: tuple[str, ...]
    warnings: tuple[str, ...]
    passed: bool
    coverage_budget: int
    achieved: int


@dataclass(frozen=True)
class ScanResult:
    features: dict[str, FeatureUsage]
    summary: Summary
    diagnostics: tuple[Diagnostic, ...] = ()

    @cached_property
    def has_violations(self) -> bool:
        """Whether any feature is classified as an error, computed once."""
        return any(usage.severity == "error" for usage in self.features.values())
