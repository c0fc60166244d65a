"""tree-sitter parsing of JavaScript and TypeScript sources."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from pathlib import PurePath
from typing import TYPE_CHECKING

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Parser

from .errors import SourceParseError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tree_sitter import Node, Tree

JAVASCRIPT = "javascript"
TYPESCRIPT = "typescript"
TSX = "tsx"

LANGUAGE_BY_SUFFIX: dict[str, str] = {
    ".js": JAVASCRIPT,
    ".jsx": JAVASCRIPT,
    ".mjs": JAVASCRIPT,
    ".cjs": JAVASCRIPT,
    ".ts": TYPESCRIPT,
    ".mts": TYPESCRIPT,
    ".cts": TYPESCRIPT,
    ".tsx": TSX,
}


@functools.cache
def _language(name: str) -> Language:
    if name == JAVASCRIPT:
        return Language(tree_sitter_javascript.language())
    if name == TYPESCRIPT:
        return Language(tree_sitter_typescript.language_typescript())
    if name == TSX:
        return Language(tree_sitter_typescript.language_tsx())
    msg = f"unsupported language: {name}"
    raise SourceParseError(msg)


def language_for(filename: str | None) -> str:
    """Pick the grammar for ``filename``; unknown or missing names parse as JavaScript."""
    if not filename:
        return JAVASCRIPT
    return LANGUAGE_BY_SUFFIX.get(PurePath(filename).suffix.lower(), JAVASCRIPT)


@dataclass(frozen=True, slots=True)
class ParsedSource:
    """A syntax tree together with the exact bytes it was parsed from."""

    source: bytes
    tree: Tree
    language: str
    filename: str | None = None

    @property
    def root(self) -> Node:
        return self.tree.root_node


def parse_source(
    source: str | bytes,
    *,
    filename: str | None = None,
    language: str | None = None,
) -> ParsedSource:
    if isinstance(source, str):
        data = source.encode("utf-8")
    else:
        data = bytes(source)
        try:
            data.decode("utf-8")
        except UnicodeDecodeError as err:
            msg = f"{filename or 'source'} is not valid UTF-8: {err}"
            raise SourceParseError(msg) from err
    lang = language or language_for(filename)
    tree = Parser(_language(lang)).parse(data)
    return ParsedSource(source=data, tree=tree, language=lang, filename=filename)


def iter_nodes(root: Node, node_type: str) -> Iterator[Node]:
    """Yield every node of ``node_type`` under ``root`` in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == node_type:
            yield node
        stack.extend(reversed(node.children))


__all__ = ["LANGUAGE_BY_SUFFIX", "ParsedSource", "iter_nodes", "language_for", "parse_source"]
