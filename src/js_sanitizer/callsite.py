"""Classification and rewriting of test registration callees."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .constants import BASE_NAMES, FACTORY_MODIFIERS, SKIP_MODIFIER

if TYPE_CHECKING:
    from tree_sitter import Node

IDENTIFIER = "identifier"
MEMBER_EXPRESSION = "member_expression"
SUBSCRIPT_EXPRESSION = "subscript_expression"
STRING = "string"


@dataclass(frozen=True, slots=True)
class CallSite:
    """A gate-able registration call: ``base(...)`` or ``base.modifier(...)``."""

    base_name: str
    modifier: str | None = None

    @property
    def is_factory(self) -> bool:
        """``True`` for ``base.each(...)``, whose result is called with the test name."""
        return self.modifier in FACTORY_MODIFIERS

    @property
    def is_skipped(self) -> bool:
        return self.modifier == SKIP_MODIFIER


@dataclass(frozen=True, slots=True)
class TextEdit:
    start: int
    end: int
    replacement: str


def _text(node: Node | None) -> str | None:
    if node is None or node.text is None:
        return None
    return node.text.decode("utf-8")


def _string_value(node: Node) -> str | None:
    """Return the contents of a string literal node."""
    raw = _text(node)
    if raw is None or len(raw) < 2 or raw[0] not in "'\"" or raw[-1] != raw[0]:
        return None
    return raw[1:-1]


def _shape(callee: Node) -> CallSite | None:
    if callee.type == IDENTIFIER:
        name = _text(callee)
        return CallSite(name) if name in BASE_NAMES else None

    if callee.type == MEMBER_EXPRESSION:
        obj = callee.child_by_field_name("object")
        prop = callee.child_by_field_name("property")
    elif callee.type == SUBSCRIPT_EXPRESSION:
        obj = callee.child_by_field_name("object")
        prop = callee.child_by_field_name("index")
    else:
        return None

    if obj is None or prop is None or obj.type != IDENTIFIER:
        return None
    name = _text(obj)
    if name not in BASE_NAMES:
        return None
    if callee.type == MEMBER_EXPRESSION:
        return CallSite(name, _text(prop))
    # computed access only counts with a literal key: test["only"], not test[mode]
    if prop.type != STRING:
        return None
    return CallSite(name, _string_value(prop))


def classify(callee: Node) -> CallSite | None:
    """Classify ``callee``; ``None`` for non-registration or already skipped calls."""
    site = _shape(callee)
    if site is None or site.is_skipped:
        return None
    return site


def rewrite(callee: Node, site: CallSite) -> TextEdit:
    """Replace the whole callee with ``<base>.skip``, whatever its modifier.

    Factory modifiers are kept after ``skip`` (``test.each`` becomes
    ``test.skip.each``) so the call still returns a registration function.
    """
    replacement = f"{site.base_name}.{SKIP_MODIFIER}"
    if site.is_factory:
        replacement = f"{replacement}.{site.modifier}"
    return TextEdit(callee.start_byte, callee.end_byte, replacement)


def apply_edits(source: bytes, edits: list[TextEdit]) -> bytes:
    """Apply non-overlapping byte-range edits to ``source``."""
    out = source
    for edit in sorted(edits, key=lambda e: e.start, reverse=True):
        out = out[: edit.start] + edit.replacement.encode("utf-8") + out[edit.end :]
    return out


def registered_name(call: Node) -> str | None:
    """Return the first argument of ``call`` when it is a plain string literal."""
    args = call.child_by_field_name("arguments")
    if args is None:
        return None
    first = next((n for n in args.named_children if n.type != "comment"), None)
    if first is None or first.type != STRING:
        return None
    return _string_value(first)


__all__ = ["CallSite", "TextEdit", "apply_edits", "classify", "registered_name", "rewrite"]
