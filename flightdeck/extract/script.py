"""Script extractor: member accesses and identifiers in JS/TS sources."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path

from ..constants import GUARD_CONTEXT_LINES
from ..exceptions import ParseFailure
from ..model import Occurrence
from ..util.text import line_window, source_line
from ._treesitter import Node, ParsedSource, first_syntax_error, parse, walk

# Plain JS is read with the tsx grammar so type annotations and JSX both parse.
_GRAMMAR_BY_SUFFIX: dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
}


def grammar_for(path: Path) -> str:
    return _GRAMMAR_BY_SUFFIX.get(path.suffix.lower(), "tsx")


def member_key(source: ParsedSource, node: Node) -> str:
    """Build the ``base.property`` lookup key of a member expression.

    The base is the object's identifier, or for one level of nesting the
    inner object's identifier (``a.b.c`` gives ``a.c``); otherwise empty.
    """
    obj = node.child_by_field_name("object")
    prop = node.child_by_field_name("property")
    base = ""
    if obj is not None:
        if obj.type == "identifier":
            base = source.node_text(obj)
        elif obj.type == "member_expression":
            inner = obj.child_by_field_name("object")
            if inner is not None and inner.type == "identifier":
                base = source.node_text(inner)
    return f"{base}.{source.node_text(prop)}"


def _identifier(source: ParsedSource, node: Node) -> str:
    return source.node_text(node)


_HANDLERS: dict[str, Callable[[ParsedSource, Node], str]] = {
    "member_expression": member_key,
    "identifier": _identifier,
}


def extract_script(text: str, aliases: Mapping[str, str], path: Path) -> list[Occurrence]:
    """Emit an occurrence for every member access or identifier that is an alias key."""
    source = parse(text, grammar_for(path))
    error = first_syntax_error(source.root)
    if error is not None:
        line, column = source.position(error)
        raise ParseFailure(path.as_posix(), f"syntax error at {line}:{column}")

    occurrences: list[Occurrence] = []
    for node in walk(source.root):
        handler = _HANDLERS.get(node.type)
        if handler is None:
            continue
        token = handler(source, node)
        if token not in aliases:
            continue
        line, column = source.position(node)
        occurrences.append(
            Occurrence(
                token=token,
                line=line,
                column=column,
                snippet=source_line(source.lines, line),
                context=line_window(source.lines, line, GUARD_CONTEXT_LINES),
            )
        )
    return occurrences
