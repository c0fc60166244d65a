"""Parsers for annotation values.

Three shapes are understood, all case-insensitive and whitespace tolerant:

- list: ``"win32, darwin"``
- version list: ``"18, v20, 20.11.1"`` (only the major component counts)
- range: ``"min=16, max=18"`` (inclusive; a missing bound is unbounded)

None of these functions raise. Tokens that cannot be read are dropped.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

_DIGITS = re.compile(r"\d+")


@dataclass(frozen=True, slots=True)
class VersionRange:
    low: float = -math.inf
    high: float = math.inf

    def __contains__(self, major: object) -> bool:
        if not isinstance(major, int) or isinstance(major, bool):
            return False
        return self.low <= major <= self.high


def first_int(token: str | None) -> int | None:
    """Return the first run of digits in ``token`` as an int."""
    if not token:
        return None
    match = _DIGITS.search(token)
    return int(match.group()) if match else None


def parse_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [token for token in (part.strip().lower() for part in value.split(",")) if token]


def parse_version_list(value: str | None) -> list[int]:
    versions: list[int] = []
    for token in parse_list(value):
        major = first_int(token)
        if major is not None:
            versions.append(major)
    return versions


def parse_key_values(value: str | None) -> dict[str, str]:
    """Collect ``key=value`` pairs; pairs without ``=`` or a key are dropped."""
    pairs: dict[str, str] = {}
    if not value:
        return pairs
    for part in value.split(","):
        key, sep, raw = part.partition("=")
        key = key.strip().lower()
        if not sep or not key:
            continue
        pairs[key] = raw.strip().lower()
    return pairs


def parse_range(value: str | None) -> VersionRange:
    pairs = parse_key_values(value)
    low = first_int(pairs.get("min"))
    high = first_int(pairs.get("max"))
    return VersionRange(
        low=-math.inf if low is None else low,
        high=math.inf if high is None else high,
    )


__all__ = [
    "VersionRange",
    "first_int",
    "parse_key_values",
    "parse_list",
    "parse_range",
    "parse_version_list",
]
