"""File-level lint diagnostic backed by a single repository scan."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .model import ScanConfig, ScanResult
from .scanner import scan
from .tables import DataTables

LINT_MESSAGE = (
    "Repo uses features that are not yet in Baseline. "
    "Run `flightdeck scan` for details."
)


@dataclass
class ViolationGate:
    """Answer "does the repository have any violation?" once per gate.

    The first question triggers a scan of ``root``; later ones reuse it.
    """

    root: Path
    config: ScanConfig
    tables: DataTables | None = None
    _result: ScanResult | None = field(default=None, init=False, repr=False)

    @property
    def result(self) -> ScanResult:
        if self._result is None:
            self._result = scan(self.root, self.config, tables=self.tables)
        return self._result

    def has_violations(self) -> bool:
        return self.result.has_violations

    def lint(self, paths: list[Path]) -> list[tuple[Path, str]]:
        """Report every linted file while the repository has violations."""
        if not paths or not self.has_violations():
            return []
        return [(path, LINT_MESSAGE) for path in paths]
