"""Loading of ``.flightdeckrc.json`` into a :class:`ScanConfig`.

Precedence (highest to lowest):
1. Explicit keyword overrides passed to :func:`load_config` (CLI flags)
2. The JSON config file
3. Built-in defaults (``coverageBudget`` 95, ``browserslistQuery`` ">0.5%, not dead")

A missing config file is not an error; an unreadable or invalid one is.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .constants import (
    CONFIG_FILE_NAME,
    DEFAULT_BROWSERSLIST_QUERY,
    DEFAULT_COVERAGE_BUDGET,
    DEFAULT_PROFILE,
)
from .exceptions import ConfigError
from .model import Override, ScanConfig, Severity

LOGGER = logging.getLogger(__name__)


class OverrideModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    min_coverage: int | None = Field(default=None, alias="minCoverage", ge=0, le=100)
    severity: Severity | None = None


class RcFile(BaseModel):
    """Schema of ``.flightdeckrc.json``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    profile: Literal["conservative", "moderate", "early"] = Field(
        default=DEFAULT_PROFILE,
        description="Informational label for the team's risk appetite.",
    )
    baseline_year: int | None = Field(default=None, alias="baselineYear")
    coverage_budget: int = Field(
        default=DEFAULT_COVERAGE_BUDGET,
        alias="coverageBudget",
        ge=0,
        le=100,
        description="Minimum acceptable audience coverage, in percent.",
    )
    treat_newly_as_violation: bool = Field(default=False, alias="treatNewlyAsViolation")
    ignore: list[str] = Field(default_factory=list)
    overrides: dict[str, OverrideModel] = Field(default_factory=dict)
    analytics_source: str | None = Field(
        default=None,
        validation_alias=AliasChoices("analyticsSource", "analyticsCsv", "analytics_source"),
        description="CSV of browser,share rows, relative to the config file.",
    )
    browserslist_query: str = Field(
        default=DEFAULT_BROWSERSLIST_QUERY,
        validation_alias=AliasChoices("browserslistQuery", "browserslist", "browserslist_query"),
    )

    def to_scan_config(self, base_dir: Path) -> ScanConfig:
        analytics = None
        if self.analytics_source:
            analytics = Path(self.analytics_source)
            if not analytics.is_absolute():
                analytics = base_dir / analytics
        return ScanConfig(
            profile=self.profile,
            coverage_budget=self.coverage_budget,
            treat_newly_as_violation=self.treat_newly_as_violation,
            ignore=frozenset(self.ignore),
            overrides={
                feature_id: Override(min_coverage=item.min_coverage, severity=item.severity)
                for feature_id, item in self.overrides.items()
            },
            analytics_source=analytics,
            browserslist_query=self.browserslist_query,
        )


def _read_rc(path: Path) -> dict[str, Any] | None:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise ConfigError(str(path), exc.strerror or exc.__class__.__name__) from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(str(path), f"not valid JSON ({exc.msg})") from exc
    if not isinstance(data, dict):
        raise ConfigError(str(path), "expected a JSON object")
    return data


def load_config(
    root: Path | None = None,
    config_path: Path | None = None,
    **overrides: Any,
) -> ScanConfig:
    """Load the scan configuration for ``root``.

    Args:
        root: Directory holding ``.flightdeckrc.json``; defaults to the cwd.
        config_path: Explicit config file, used instead of the one in ``root``.
        **overrides: Config-file keys (camelCase) whose values win over the file;
            None values are ignored.

    Raises:
        ConfigError: On unreadable JSON or values that fail validation.
    """
    path = config_path or (root or Path.cwd()) / CONFIG_FILE_NAME
    data = _read_rc(path)
    if data is None:
        if config_path is not None:
            raise ConfigError(str(path), "file not found")
        LOGGER.debug("no %s found, using defaults", path)
        data = {}

    values = {**data, **{key: value for key, value in overrides.items() if value is not None}}
    try:
        rc = RcFile.model_validate(values)
    except ValidationError as exc:
        err = exc.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError(str(path), f"{field}: {err['msg']}") from exc
    return rc.to_scan_config(path.parent)
