from __future__ import annotations

from pathlib import Path

import pytest

from flightdeck.collect import SourceFile
from flightdeck.exceptions import ParseFailure
from flightdeck.extract import extract_file
from flightdeck.extract.markup import extract_markup
from flightdeck.extract.script import extract_script, grammar_for
from flightdeck.extract.style import extract_style, has_supports_wrapper
from flightdeck.model import SourceKind

SCRIPT_ALIASES = {
    "navigator.clipboard": "clipboard-api",
    "navigator.share": "web-share",
    "document.startViewTransition": "view-transitions",
    "HTMLDialogElement": "dialog-element",
}
STYLE_ALIASES = {
    ":has": "selector-has",
    ":popover-open": "popover-attribute",
    "popover": "popover-attribute",
    "dialog": "dialog-element",
}
MARKUP_ALIASES = {
    "dialog": "dialog-element",
    "popover": "popover-attribute",
    "popovertarget": "popover-attribute",
}


def test_grammar_for_suffix() -> None:
    assert grammar_for(Path("a.js")) == "tsx"
    assert grammar_for(Path("a.jsx")) == "tsx"
    assert grammar_for(Path("a.mjs")) == "tsx"
    assert grammar_for(Path("a.ts")) == "typescript"
    assert grammar_for(Path("a.mts")) == "typescript"
    assert grammar_for(Path("a.tsx")) == "tsx"


def test_script_member_and_identifier_hits() -> None:
    text = (
        "navigator.clipboard.writeText('x');\n"
        "if (el instanceof HTMLDialogElement) {\n"
        "  el.showModal();\n"
        "}\n"
    )

    occurrences = extract_script(text, SCRIPT_ALIASES, Path("app.js"))

    assert [(o.token, o.line, o.column) for o in occurrences] == [
        ("navigator.clipboard", 1, 0),
        ("HTMLDialogElement", 2, 18),
    ]
    assert occurrences[0].snippet == "navigator.clipboard.writeText('x');"
    assert occurrences[1].snippet == "if (el instanceof HTMLDialogElement) {"


def test_script_nested_member_uses_inner_base() -> None:
    text = "window.document.startViewTransition(() => {});\n"

    occurrences = extract_script(
        text, {"window.startViewTransition": "view-transitions"}, Path("a.js")
    )

    assert [o.token for o in occurrences] == ["window.startViewTransition"]


def test_script_column_counts_characters_not_bytes() -> None:
    text = 'const s = "é"; navigator.share({});\n'

    occurrences = extract_script(text, SCRIPT_ALIASES, Path("a.js"))

    assert [(o.token, o.line, o.column) for o in occurrences] == [("navigator.share", 1, 15)]


def test_script_context_window_spans_neighbouring_lines() -> None:
    text = "\n".join(
        [
            "one();",
            "try {",
            "  navigator.share(data);",
            "} catch (err) {}",
            "two();",
            "three();",
        ]
    )

    (occurrence,) = extract_script(text, SCRIPT_ALIASES, Path("a.js"))

    assert occurrence.line == 3
    assert occurrence.context.splitlines() == [
        "one();",
        "try {",
        "  navigator.share(data);",
        "} catch (err) {}",
        "two();",
    ]


def test_typescript_sources_parse_with_typescript_grammar() -> None:
    text = "const go = (x: number): void => { document.startViewTransition(); };\n"

    occurrences = extract_script(text, SCRIPT_ALIASES, Path("a.ts"))

    assert [o.token for o in occurrences] == ["document.startViewTransition"]


def test_typed_plain_javascript_is_accepted() -> None:
    text = "function f(x: number) { return navigator.clipboard }\n"

    occurrences = extract_script(text, SCRIPT_ALIASES, Path("a.js"))

    assert [(o.token, o.line, o.column) for o in occurrences] == [("navigator.clipboard", 1, 31)]


def test_jsx_in_plain_javascript_is_accepted() -> None:
    text = "const App = () => <button onClick={() => navigator.share({})}>Go</button>;\n"

    occurrences = extract_script(text, SCRIPT_ALIASES, Path("app.jsx"))

    assert [o.token for o in occurrences] == ["navigator.share"]


def test_script_syntax_error_raises_parse_failure() -> None:
    with pytest.raises(ParseFailure) as excinfo:
        extract_script("const = ;\n", SCRIPT_ALIASES, Path("broken.js"))
    assert "syntax error" in excinfo.value.reason


def test_style_pseudo_class_and_selector_tokens() -> None:
    text = ".card:has(button){outline:1px solid #ddd;}\ndialog[open] { color: red; }\n"

    occurrences = extract_style(text, STYLE_ALIASES, Path("a.css"))

    assert [(o.token, o.line, o.column, o.snippet) for o in occurrences] == [
        (":has", 1, 0, ".card:has(button)"),
        ("dialog", 2, 0, "dialog[open]"),
    ]


def test_style_declaration_token() -> None:
    text = ".menu {\n  display: popover;\n}\n"

    occurrences = extract_style(text, STYLE_ALIASES, Path("a.css"))

    assert [(o.token, o.line, o.snippet) for o in occurrences] == [
        ("popover", 2, "display: popover")
    ]


def test_style_unknown_pseudo_class_is_ignored() -> None:
    assert extract_style("a:hover { color: red; }\n", STYLE_ALIASES, Path("a.css")) == []


def test_style_without_recoverable_rules_raises_parse_failure() -> None:
    with pytest.raises(ParseFailure) as excinfo:
        extract_style("%%%\n", STYLE_ALIASES, Path("broken.css"))
    assert excinfo.value.reason.startswith("syntax error at")


@pytest.mark.parametrize(
    "text",
    [
        "@media (width >= 600px) { .a:has(b) { color: red } }\n",
        "@media (400px <= width <= 700px) { .a:has(b) { color: red } }\n",
        "@import url(\"x.css\") layer(base);\n.a:has(b) { color: red }\n",
    ],
)
def test_style_recovers_rules_around_unknown_syntax(text: str) -> None:
    occurrences = extract_style(text, STYLE_ALIASES, Path("modern.css"))

    assert [o.token for o in occurrences] == [":has"]


def test_has_supports_wrapper() -> None:
    assert has_supports_wrapper("@supports (display: grid) { a { color: red; } }")
    assert has_supports_wrapper("@supports(display: grid) {}")
    assert not has_supports_wrapper(".a { color: red; }")


def test_markup_tag_and_attribute_hits() -> None:
    text = '<dialog open>Hi</dialog>\n<button popovertarget="menu">Open</button>\n'

    occurrences = extract_markup(text, MARKUP_ALIASES, Path("index.html"))

    assert [(o.token, o.line, o.column) for o in occurrences] == [
        ("dialog", 1, 0),
        ("popovertarget", 2, 8),
    ]
    assert occurrences[1].snippet == '<button popovertarget="menu">Open</button>'


def test_markup_is_case_insensitive_and_tolerant() -> None:
    text = "<DIALOG>\n<div POPOVER>menu</div>\n<p>unclosed\n"

    tokens = [o.token for o in extract_markup(text, MARKUP_ALIASES, Path("a.html"))]

    assert "dialog" in tokens
    assert "popover" in tokens


def _source(path: Path, kind: SourceKind) -> SourceFile:
    return SourceFile(path=path, display_path=path.as_posix(), kind=kind)


def test_extract_file_reports_invalid_utf8(tmp_path: Path) -> None:
    path = tmp_path / "bad.js"
    path.write_bytes(b"const x = '\xff\xfe';\n")

    extraction = extract_file(_source(path, SourceKind.SCRIPT), SCRIPT_ALIASES)

    assert extraction.occurrences == ()
    assert extraction.diagnostic is not None
    assert extraction.diagnostic.kind == "parse-failure"
    assert extraction.diagnostic.file == path.as_posix()


def test_extract_file_reports_syntax_errors(tmp_path: Path) -> None:
    path = tmp_path / "broken.js"
    path.write_text("function (\n", encoding="utf-8")

    extraction = extract_file(_source(path, SourceKind.SCRIPT), SCRIPT_ALIASES)

    assert extraction.diagnostic is not None
    assert extraction.diagnostic.message.startswith("syntax error")


def test_extract_file_flags_supports_wrapped_stylesheets(tmp_path: Path) -> None:
    path = tmp_path / "a.css"
    path.write_text(
        "@supports (display: grid) {\n  .card:has(img) { color: red; }\n}\n", encoding="utf-8"
    )

    extraction = extract_file(_source(path, SourceKind.STYLE), STYLE_ALIASES)

    assert extraction.diagnostic is None
    assert extraction.supports_wrapped is True
    assert [o.token for o in extraction.occurrences] == [":has"]
