"""Style extractor: selectors and declarations in CSS sources."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from pathlib import Path
import re

from ..constants import STYLE_DECLARATION_TOKENS, STYLE_SELECTOR_TOKENS
from ..exceptions import ParseFailure
from ..model import Occurrence
from ..util.text import normalize_whitespace
from ._treesitter import Node, ParsedSource, first_syntax_error, parse, walk

LOGGER = logging.getLogger(__name__)

_SUPPORTS_RE = re.compile(r"@supports\s*\(")


def has_supports_wrapper(text: str) -> bool:
    """Whether the stylesheet feature-queries anything with ``@supports(``."""
    return _SUPPORTS_RE.search(text) is not None


def pseudo_class_names(source: ParsedSource, selectors: Node) -> list[str]:
    """Return ``:name`` for every pseudo-class in a selector list, in order."""
    names: list[str] = []
    for node in walk(selectors):
        if node.type != "pseudo_class_selector":
            continue
        children = node.children
        for index, child in enumerate(children[:-1]):
            if child.type == ":":
                names.append(f":{source.node_text(children[index + 1])}")
                break
    return names


def _selector_node(rule: Node) -> Node | None:
    for child in rule.children:
        if child.type == "selectors":
            return child
    return None


def _rule_set(source: ParsedSource, node: Node, aliases: Mapping[str, str]) -> list[Occurrence]:
    selectors = _selector_node(node)
    if selectors is None:
        return []
    selector_text = normalize_whitespace(source.node_text(selectors))
    line, column = source.position(node)

    tokens: list[str] = []
    for name in pseudo_class_names(source, selectors):
        if name in aliases and name not in tokens:
            tokens.append(name)
    for token in STYLE_SELECTOR_TOKENS:
        if token in selector_text and token in aliases:
            tokens.append(token)

    return [
        Occurrence(token=token, line=line, column=column, snippet=selector_text)
        for token in tokens
    ]


def _declaration(
    source: ParsedSource, node: Node, aliases: Mapping[str, str]
) -> list[Occurrence]:
    prop_node = None
    colon = None
    end = node.end_byte
    for child in node.children:
        if child.type == "property_name" and prop_node is None:
            prop_node = child
        elif child.type == ":" and colon is None:
            colon = child
        elif child.type == ";":
            end = child.start_byte
    if prop_node is None:
        return []

    prop = source.node_text(prop_node).strip()
    value = ""
    if colon is not None:
        value = normalize_whitespace(source.byte_slice(colon.end_byte, end))
    line, column = source.position(node)
    return [
        Occurrence(token=token, line=line, column=column, snippet=f"{prop}: {value}")
        for token in STYLE_DECLARATION_TOKENS
        if token in aliases and (token in prop or token in value)
    ]


_HANDLERS = {
    "rule_set": _rule_set,
    "declaration": _declaration,
}

# Nodes that show the parser recovered real stylesheet structure.
_STATEMENT_TYPES = frozenset(
    {
        "rule_set",
        "declaration",
        "import_statement",
        "media_statement",
        "supports_statement",
        "keyframes_statement",
        "charset_statement",
        "namespace_statement",
        "at_rule",
    }
)


def extract_style(text: str, aliases: Mapping[str, str], path: Path) -> list[Occurrence]:
    """Emit occurrences for pseudo-classes, selector tokens and declaration tokens.

    Syntax the grammar does not know (range media queries, ``layer()`` on
    imports) leaves ERROR nodes behind; rules and declarations recovered
    around them are still extracted. Only a stylesheet with no recovered
    statement at all is a parse failure.
    """
    source = parse(text, "css")
    occurrences: list[Occurrence] = []
    recovered = False
    for node in walk(source.root):
        recovered = recovered or node.type in _STATEMENT_TYPES
        handler = _HANDLERS.get(node.type)
        if handler is not None:
            occurrences.extend(handler(source, node, aliases))

    error = first_syntax_error(source.root)
    if error is not None:
        line, column = source.position(error)
        if not recovered:
            raise ParseFailure(path.as_posix(), f"syntax error at {line}:{column}")
        LOGGER.debug("recovered from syntax error in %s at %d:%d", path, line, column)
    return occurrences
