"""Docblock pragma extraction.

A docblock is a block comment that opens with ``/**``. Each line of its body
may carry one pragma, ``@name value``; the value runs to the end of the line.

    /**
     * Runs only where the native addon builds.
     * @enabledOnOS linux, darwin
     * @skipForNodeRange min=16, max=18
     */
"""

from __future__ import annotations

import re

from .errors import DocblockSyntaxError

_PRAGMA = re.compile(r"^@([^\s@]+)(?:\s+(.*?))?\s*$")
_LEADING_STARS = re.compile(r"^\s*\*+")


def is_docblock(text: str) -> bool:
    return text.startswith("/**") and not text.startswith("/**/")


def extract_body(text: str) -> str:
    """Return the text between the comment delimiters.

    Raises :class:`DocblockSyntaxError` when ``text`` is not a closed block comment.
    """
    text = text.strip()
    if len(text) < len("/**/") or not text.startswith("/*") or not text.endswith("*/"):
        msg = f"unterminated or malformed block comment: {text[:40]!r}"
        raise DocblockSyntaxError(msg)
    return text[2:-2]


def unterminated_comment(source: bytes) -> int | None:
    """Return the offset of a trailing ``/*`` that is never closed, if any."""
    start = source.rfind(b"/*")
    if start == -1 or source.find(b"*/", start + 2) != -1:
        return None
    return start


def parse_pragmas(body: str) -> dict[str, str]:
    """Map lower-cased pragma names to values. Repeated names keep the last value."""
    pragmas: dict[str, str] = {}
    for raw_line in body.splitlines():
        line = _LEADING_STARS.sub("", raw_line, count=1).strip()
        match = _PRAGMA.match(line)
        if match is None:
            continue
        pragmas[match.group(1).lower()] = match.group(2) or ""
    return pragmas


def parse_docblock(text: str) -> dict[str, str]:
    return parse_pragmas(extract_body(text))


__all__ = ["extract_body", "is_docblock", "parse_docblock", "parse_pragmas", "unterminated_comment"]
