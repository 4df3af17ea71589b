"""Tree-sitter grammar loading and position helpers shared by extractors."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from functools import lru_cache
import importlib
from typing import Any

import tree_sitter

Node = Any

# grammar name -> (module, language function)
_GRAMMARS: dict[str, tuple[str, str]] = {
    "typescript": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),
    "css": ("tree_sitter_css", "language"),
    "html": ("tree_sitter_html", "language"),
}


@lru_cache(maxsize=None)
def get_language(grammar: str) -> tree_sitter.Language:
    """Load a tree-sitter language by grammar name."""
    module_name, func_name = _GRAMMARS[grammar]
    module = importlib.import_module(module_name)
    return tree_sitter.Language(getattr(module, func_name)())


@dataclass
class ParsedSource:
    """A parsed file with line tables for byte-to-character positions."""

    text: str
    root: Node
    data: bytes = b""
    lines: list[str] = field(default_factory=list)
    _byte_lines: list[bytes] = field(default_factory=list, repr=False)

    def position(self, node: Node) -> tuple[int, int]:
        """Return (1-based line, 0-based character column) of a node start."""
        row, byte_col = node.start_point[0], node.start_point[1]
        if row >= len(self._byte_lines):
            return row + 1, byte_col
        prefix = self._byte_lines[row][:byte_col]
        return row + 1, len(prefix.decode("utf-8", errors="replace"))

    def node_text(self, node: Node | None) -> str:
        if node is None or node.text is None:
            return ""
        return node.text.decode("utf-8", errors="replace")

    def byte_slice(self, start: int, end: int) -> str:
        return self.data[start:end].decode("utf-8", errors="replace")


def parse(text: str, grammar: str) -> ParsedSource:
    data = text.encode("utf-8")
    parser = tree_sitter.Parser(get_language(grammar))
    tree = parser.parse(data)
    return ParsedSource(
        text=text,
        root=tree.root_node,
        data=data,
        lines=text.split("\n"),
        _byte_lines=data.split(b"\n"),
    )


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def first_syntax_error(root: Node) -> Node | None:
    """Return the first ERROR or missing node, if the tree has any."""
    if not root.has_error:
        return None
    for node in walk(root):
        if node.type == "ERROR" or node.is_missing:
            return node
    return root
