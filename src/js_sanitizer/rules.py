"""Tag rule catalog and its evaluation against an environment snapshot.

The catalog is ordered. Evaluation walks it front to back and stops at the
first rule whose annotation is present and whose predicate says "skip".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .grammar import parse_list, parse_range, parse_version_list

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from .environment import EnvironmentSnapshot

type AnnotationTable = dict[str, str]


@dataclass(frozen=True, slots=True)
class TagRule:
    name: str
    evaluate: Callable[[str, EnvironmentSnapshot], bool]

    @property
    def key(self) -> str:
        """Lookup key in an annotation table."""
        return self.name.lower()

    def describe(self, raw: str) -> str:
        return f"@{self.name} {raw}"


@dataclass(frozen=True, slots=True)
class GateDecision:
    skip: bool
    reason: str | None = None
    rule: str | None = None


NO_SKIP = GateDecision(skip=False)


def _skip_on_browser(raw: str, env: EnvironmentSnapshot) -> bool:
    return env.browser is not None and env.browser in parse_list(raw)


def _enabled_on_browser(raw: str, env: EnvironmentSnapshot) -> bool:
    return env.browser is None or env.browser not in parse_list(raw)


def _skip_on_os(raw: str, env: EnvironmentSnapshot) -> bool:
    return env.os in parse_list(raw)


def _enabled_on_os(raw: str, env: EnvironmentSnapshot) -> bool:
    return env.os not in parse_list(raw)


# An unknown Node version never triggers a skip, in either direction.
def _skip_on_node_version(raw: str, env: EnvironmentSnapshot) -> bool:
    return env.node_major is not None and env.node_major in parse_version_list(raw)


def _enabled_on_node_version(raw: str, env: EnvironmentSnapshot) -> bool:
    return env.node_major is not None and env.node_major not in parse_version_list(raw)


def _skip_for_node_range(raw: str, env: EnvironmentSnapshot) -> bool:
    return env.node_major is not None and env.node_major in parse_range(raw)


def _enabled_for_node_range(raw: str, env: EnvironmentSnapshot) -> bool:
    return env.node_major is not None and env.node_major not in parse_range(raw)


CATALOG: tuple[TagRule, ...] = (
    TagRule("skipOnBrowser", _skip_on_browser),
    TagRule("enabledOnBrowser", _enabled_on_browser),
    TagRule("skipOnOS", _skip_on_os),
    TagRule("enabledOnOS", _enabled_on_os),
    TagRule("skipOnNodeVersion", _skip_on_node_version),
    TagRule("enabledOnNodeVersion", _enabled_on_node_version),
    TagRule("skipForNodeRange", _skip_for_node_range),
    TagRule("enabledForNodeRange", _enabled_for_node_range),
)


def evaluate_table(
    table: Mapping[str, str],
    env: EnvironmentSnapshot,
    catalog: Sequence[TagRule] = CATALOG,
) -> GateDecision:
    """Return the decision of the first matching rule, or ``NO_SKIP``.

    A rule whose annotation is absent or blank is not considered at all.
    """
    for rule in catalog:
        raw = table.get(rule.key)
        if raw is None or not raw.strip():
            continue
        if rule.evaluate(raw, env):
            return GateDecision(skip=True, reason=rule.describe(raw), rule=rule.name)
    return NO_SKIP


def rule_names(catalog: Sequence[TagRule] = CATALOG) -> list[str]:
    return [rule.name for rule in catalog]


__all__ = ["CATALOG", "NO_SKIP", "AnnotationTable", "GateDecision", "TagRule", "evaluate_table", "rule_names"]
