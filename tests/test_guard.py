from __future__ import annotations

import pytest

from flightdeck.guard import is_progressive


@pytest.mark.parametrize(
    "context",
    [
        "if ('clipboard' in navigator) {\n  navigator.clipboard.writeText(t);\n}",
        'if ("startViewTransition" in document) { document.startViewTransition(go); }',
        "try {\n  navigator.share(data);\n} catch (err) {\n  fallback();\n}",
        "try { navigator.share(data); } catch { fallback(); }",
    ],
)
def test_guarded_contexts(context: str) -> None:
    assert is_progressive(context) is True


@pytest.mark.parametrize(
    "context",
    [
        "navigator.clipboard.writeText(t);",
        "if (document.startViewTransition) {\n  document.startViewTransition(go);\n}",
        "const entries = Object.keys(navigator);",
        "try {\n  navigator.share(data);",
    ],
)
def test_unguarded_contexts(context: str) -> None:
    assert is_progressive(context) is False
