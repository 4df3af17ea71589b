"""Markup extractor: element and attribute names in HTML sources."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from ..model import Occurrence
from ..util.text import source_line
from ._treesitter import Node, ParsedSource, parse, walk


def _tag(source: ParsedSource, node: Node, aliases: Mapping[str, str]) -> list[Occurrence]:
    occurrences: list[Occurrence] = []
    tag_line, tag_column = source.position(node)

    for child in node.children:
        if child.type == "tag_name":
            name = source.node_text(child).lower()
            if name in aliases:
                occurrences.append(
                    Occurrence(
                        token=name,
                        line=tag_line,
                        column=tag_column,
                        snippet=source_line(source.lines, tag_line),
                    )
                )
        elif child.type == "attribute":
            name_node = next(
                (part for part in child.children if part.type == "attribute_name"), None
            )
            if name_node is None:
                continue
            name = source.node_text(name_node).lower()
            if name not in aliases:
                continue
            line, column = source.position(child)
            occurrences.append(
                Occurrence(
                    token=name,
                    line=line,
                    column=column,
                    snippet=source_line(source.lines, line),
                )
            )
    return occurrences


_HANDLERS = {
    "start_tag": _tag,
    "self_closing_tag": _tag,
}


def extract_markup(text: str, aliases: Mapping[str, str], path: Path) -> list[Occurrence]:
    """Emit occurrences for alias tag names and attribute names.

    HTML parsing is error tolerant; malformed markup still yields whatever
    elements the parser recovered.
    """
    _ = path
    source = parse(text, "html")
    occurrences: list[Occurrence] = []
    for node in walk(source.root):
        handler = _HANDLERS.get(node.type)
        if handler is not None:
            occurrences.extend(handler(source, node, aliases))
    return occurrences
