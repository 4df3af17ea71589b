"""GitHub check-run annotations built from a scan report."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Any

from .constants import (
    ANNOTATION_LEVEL_MAP,
    CHECK_RUN_NAME,
    GITHUB_API_URL,
    MAX_ANNOTATIONS_PER_FEATURE,
)
from .exceptions import FlightdeckError
from .http import post_json
from .model import ScanResult

LOGGER = logging.getLogger(__name__)

# The checks API accepts at most 50 annotations per request.
ANNOTATION_BATCH_SIZE = 50


class GitHubContextError(FlightdeckError):
    """Raised when the GitHub token, repository or commit is not available."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing GitHub context/environment: {', '.join(missing)}")


@dataclass(frozen=True)
class GitHubContext:
    token: str
    owner: str
    repo: str
    sha: str

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> GitHubContext:
        env = os.environ if env is None else env
        token = env.get("GITHUB_TOKEN", "")
        owner, _, repo = env.get("GITHUB_REPOSITORY", "").partition("/")
        sha = env.get("GITHUB_SHA", "")
        missing = [
            name
            for name, value in (
                ("GITHUB_TOKEN", token),
                ("GITHUB_REPOSITORY", owner and repo),
                ("GITHUB_SHA", sha),
            )
            if not value
        ]
        if missing:
            raise GitHubContextError(missing)
        return cls(token=token, owner=owner, repo=repo, sha=sha)


def relative_path(file: str, cwd: Path) -> str:
    """Express a hit path relative to the working directory when it is inside it."""
    path = Path(file)
    if path.is_absolute():
        try:
            return path.relative_to(cwd).as_posix()
        except ValueError:
            return path.as_posix()
    return path.as_posix()


def build_annotations(result: ScanResult, cwd: Path | None = None) -> list[dict[str, Any]]:
    cwd = cwd or Path.cwd()
    annotations: list[dict[str, Any]] = []
    for usage in result.features.values():
        level = ANNOTATION_LEVEL_MAP[usage.severity]
        doc = f" | {usage.doc_link}" if usage.doc_link else ""
        message = f"[{usage.id}] {usage.status.upper()}: coverage {usage.coverage}%{doc}"
        for hit in usage.hits[:MAX_ANNOTATIONS_PER_FEATURE]:
            annotations.append(
                {
                    "path": relative_path(hit.file, cwd),
                    "start_line": hit.line,
                    "end_line": hit.line,
                    "annotation_level": level,
                    "message": message,
                    "title": CHECK_RUN_NAME,
                }
            )
    return annotations


def build_check_output(result: ScanResult, annotations: list[dict[str, Any]]) -> dict[str, Any]:
    summary = result.summary
    return {
        "title": CHECK_RUN_NAME,
        "summary": (
            f"Coverage {summary.achieved}% (budget {summary.coverage_budget}%). "
            f"Violations: {len(summary.violations)}, Warnings: {len(summary.warnings)}"
        ),
        "annotations": annotations,
    }


def post_check_run(result: ScanResult, context: GitHubContext, cwd: Path | None = None) -> int:
    """Create a completed check run carrying every annotation; return the count posted."""
    annotations = build_annotations(result, cwd)
    headers = {
        "Authorization": f"Bearer {context.token}",
        "Accept": "application/vnd.github+json",
    }
    base = f"{GITHUB_API_URL}/repos/{context.owner}/{context.repo}/check-runs"
    batches = [
        annotations[start : start + ANNOTATION_BATCH_SIZE]
        for start in range(0, len(annotations), ANNOTATION_BATCH_SIZE)
    ] or [[]]

    created = post_json(
        base,
        {
            "name": CHECK_RUN_NAME,
            "head_sha": context.sha,
            "status": "completed",
            "conclusion": "failure" if result.summary.violations else "success",
            "output": build_check_output(result, batches[0]),
        },
        headers=headers,
    )
    check_id = created.get("id") if isinstance(created, dict) else None
    for batch in batches[1:]:
        post_json(
            f"{base}/{check_id}",
            {"output": build_check_output(result, batch)},
            headers=headers,
            method="PATCH",
        )
    LOGGER.debug("posted %d annotations to check run %s", len(annotations), check_id)
    return len(annotations)
