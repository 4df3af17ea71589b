"""Markdown remediation advice built from a scan result."""

from __future__ import annotations

from .constants import CONFIG_FILE_NAME, SEVERITY_ICON_MAP, SEVERITY_RANK
from .model import FeatureUsage, Hit, ScanResult

MAX_ADVICE_HITS = 10

_REMEDIATIONS: dict[str, list[str]] = {
    "selector-has": [
        "**CSS :has()**",
        "- Wrap the rule in `@supports selector(:has(*)) { ... }`.",
        "- Keep a plain selector as the fallback for older engines.",
        "- A `@supports selector(...)` wrapper does not change the reported severity; "
        "only a `@supports (...)` condition in the same stylesheet softens it.",
        "```css",
        "@supports selector(:has(*)) {",
        "  .card:has(button) { outline: 1px solid #ddd; }",
        "}",
        "```",
    ],
    "view-transitions": [
        "**View Transitions API**",
        "- Feature-detect before calling and update the DOM directly otherwise.",
        "```js",
        "if ('startViewTransition' in document) {",
        "  document.startViewTransition(() => update());",
        "} else {",
        "  update();",
        "}",
        "```",
    ],
    "popover-attribute": [
        "**Popover**",
        "- Toggle `hidden` from script when `togglePopover` is missing, or use `<dialog>`.",
        "```js",
        "if (!('togglePopover' in HTMLElement.prototype)) {",
        "  panel.hidden = !panel.hidden;",
        "}",
        "```",
    ],
    "dialog-element": [
        "**<dialog>**",
        "- Safe to keep; add a `role=\"dialog\"` fallback only for very old targets.",
    ],
    "clipboard-api": [
        "**Async Clipboard API**",
        "- Use optional chaining and catch rejections so older browsers degrade quietly.",
        "```js",
        "try {",
        "  navigator.clipboard?.readText?.().then(show);",
        "} catch (err) {",
        "  showManualPasteHint();",
        "}",
        "```",
    ],
}

_DEFAULT_REMEDIATION = (
    "_Use progressive enhancement (feature checks, `@supports`) "
    f"or `{CONFIG_FILE_NAME}` overrides as appropriate._"
)


def remediation(feature_id: str) -> str:
    lines = _REMEDIATIONS.get(feature_id)
    return "\n".join(lines) if lines else _DEFAULT_REMEDIATION


def _hits_block(hits: tuple[Hit, ...]) -> str:
    if not hits:
        return "_No direct hits captured._"
    rows = [f"- `{hit.file}:{hit.line}`  `{hit.snippet}`" for hit in hits[:MAX_ADVICE_HITS]]
    return "\n".join(["**Top occurrences:**", *rows])


def _priority(usage: FeatureUsage) -> tuple[int, int, str]:
    return (-SEVERITY_RANK[usage.severity], -usage.count, usage.id)


def render_advice(result: ScanResult) -> str:
    """Render advice with the most severe, most used features first."""
    summary = result.summary
    lines = [
        "# Baseline Flightdeck: developer advice",
        "",
        f"**Coverage:** {summary.achieved}% (budget {summary.coverage_budget}%)",
        f"**Violations:** {len(summary.violations)} | **Warnings:** {len(summary.warnings)}",
        "",
        "## Quick wins",
        "- Wrap modern CSS in `@supports(...)` to soften risk",
        "- Guard new APIs with feature checks for progressive enhancement",
        "- Point `analyticsSource` or `browserslistQuery` at your real audience",
        f"- Use `{CONFIG_FILE_NAME}` overrides for truly optional features",
        "",
    ]

    for usage in sorted(result.features.values(), key=_priority):
        doc = f" ([docs]({usage.doc_link}))" if usage.doc_link else ""
        icon = SEVERITY_ICON_MAP[usage.severity]
        lines.extend(
            [
                f"### **{usage.id}**: {usage.status.upper()} | coverage {usage.coverage}%{doc}",
                f"Severity: {icon} {usage.severity}",
                "",
                remediation(usage.id),
                "",
                _hits_block(usage.hits),
                "",
            ]
        )

    lines.extend(
        [
            "---",
            "**Config levers:**",
            f"- `{CONFIG_FILE_NAME} > coverageBudget`",
            f"- `{CONFIG_FILE_NAME} > treatNewlyAsViolation`",
            f"- `{CONFIG_FILE_NAME} > overrides[feature].severity|minCoverage`",
            f"- `{CONFIG_FILE_NAME} > ignore`",
        ]
    )
    return "\n".join(lines)
