"""Locate the docblock attached to a registration call and read its annotations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .docblock import is_docblock, parse_docblock

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tree_sitter import Node

    from .rules import AnnotationTable

COMMENT = "comment"
EXPORT_STATEMENT = "export_statement"
# A call inside one of these belongs to its body, never to the statement around it.
FUNCTION_BOUNDARIES = frozenset(
    {
        "arrow_function",
        "function",
        "function_expression",
        "function_declaration",
        "generator_function",
        "generator_function_declaration",
        "method_definition",
        "class_body",
    }
)


def enclosing_statement(node: Node) -> Node | None:
    """Return the nearest ancestor statement or declaration of ``node``.

    Returns ``None`` when a function or class body is reached first.
    """
    current = node.parent
    while current is not None:
        if current.type in FUNCTION_BOUNDARIES:
            return None
        if current.type.endswith(("statement", "declaration")):
            # comments sit before ``export``, not before the exported declaration
            if current.parent is not None and current.parent.type == EXPORT_STATEMENT:
                return current.parent
            return current
        current = current.parent
    return None


def leading_comments(node: Node) -> list[Node]:
    """Return the comments directly before ``node``, nearest last."""
    comments: list[Node] = []
    sibling = node.prev_sibling
    while sibling is not None and sibling.type == COMMENT:
        comments.append(sibling)
        sibling = sibling.prev_sibling
    comments.reverse()
    return comments


def candidate_anchors(call: Node) -> Iterator[Node]:
    """Yield the nodes whose leading comments may annotate ``call``, in priority order.

    The wrapping statement comes first, then the call itself, then the call's
    grandparent.
    """
    seen: set[tuple[int, int]] = set()
    grandparent = call.parent.parent if call.parent is not None else None
    for anchor in (enclosing_statement(call), call, grandparent):
        if anchor is None:
            continue
        key = (anchor.start_byte, anchor.end_byte)
        if key in seen:
            continue
        seen.add(key)
        yield anchor


def find_docblock(call: Node) -> Node | None:
    """Return the closest docblock comment attached to ``call``."""
    for anchor in candidate_anchors(call):
        docblocks = [c for c in leading_comments(anchor) if is_docblock(_comment_text(c))]
        if docblocks:
            return docblocks[-1]
    return None


def resolve(call: Node) -> AnnotationTable | None:
    """Return the annotation table for ``call``, or ``None`` without gating information.

    Raises :class:`~js_sanitizer.errors.DocblockSyntaxError` when the attached
    docblock is malformed.
    """
    comment = find_docblock(call)
    if comment is None:
        return None
    table = parse_docblock(_comment_text(comment))
    return table or None


def _comment_text(node: Node) -> str:
    text = node.text
    return text.decode("utf-8") if text is not None else ""


__all__ = ["candidate_anchors", "enclosing_statement", "find_docblock", "leading_comments", "resolve"]
