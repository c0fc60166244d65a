from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from js_sanitizer.rules import CATALOG, NO_SKIP, GateDecision, evaluate_table, rule_names

if TYPE_CHECKING:
    from collections.abc import Callable

    from js_sanitizer.environment import EnvironmentSnapshot

pytestmark = pytest.mark.small


def test_catalog_order_is_fixed() -> None:
    assert rule_names() == [
        "skipOnBrowser",
        "enabledOnBrowser",
        "skipOnOS",
        "enabledOnOS",
        "skipOnNodeVersion",
        "enabledOnNodeVersion",
        "skipForNodeRange",
        "enabledForNodeRange",
    ]
    assert len(CATALOG) == 8


def test_empty_table_never_skips(snapshot: Callable[..., EnvironmentSnapshot]) -> None:
    assert evaluate_table({}, snapshot()) == NO_SKIP


@pytest.mark.parametrize(
    ("table", "expected"),
    [
        ({"skiponos": "win32, linux"}, True),
        ({"skiponos": "win32"}, False),
        ({"enabledonos": "darwin"}, True),
        ({"enabledonos": "Linux"}, False),
        ({"skiponnodeversion": "18, v20"}, True),
        ({"skiponnodeversion": "18"}, False),
        ({"enabledonnodeversion": "22"}, True),
        ({"enabledonnodeversion": "20.11.1"}, False),
        ({"skipfornoderange": "min=18,max=20"}, True),
        ({"skipfornoderange": "min=21"}, False),
        ({"enabledfornoderange": "max=18"}, True),
        ({"enabledfornoderange": "min=14"}, False),
    ],
)
def test_single_rules_on_linux_node_20(
    snapshot: Callable[..., EnvironmentSnapshot], table: dict[str, str], *, expected: bool
) -> None:
    assert evaluate_table(table, snapshot()).skip is expected


@pytest.mark.parametrize(("major", "skipped"), [(15, False), (16, True), (17, True), (18, True), (19, False)])
def test_skip_for_node_range_is_inclusive(
    snapshot: Callable[..., EnvironmentSnapshot], major: int, *, skipped: bool
) -> None:
    decision = evaluate_table({"skipfornoderange": "min=16,max=18"}, snapshot(node_major=major))
    assert decision.skip is skipped


@pytest.mark.parametrize(("major", "skipped"), [(10, True), (13, True), (14, False), (30, False)])
def test_enabled_for_node_range_without_max(
    snapshot: Callable[..., EnvironmentSnapshot], major: int, *, skipped: bool
) -> None:
    decision = evaluate_table({"enabledfornoderange": "min=14"}, snapshot(node_major=major))
    assert decision.skip is skipped


@pytest.mark.parametrize(
    "table",
    [
        {"skiponnodeversion": "20"},
        {"enabledonnodeversion": "20"},
        {"skipfornoderange": "min=0"},
        {"enabledfornoderange": "min=14, max=16"},
    ],
)
def test_unknown_node_version_never_skips(snapshot: Callable[..., EnvironmentSnapshot], table: dict[str, str]) -> None:
    assert evaluate_table(table, snapshot(node_major=None)) == NO_SKIP


def test_enabled_on_browser_skips_when_browser_unknown(snapshot: Callable[..., EnvironmentSnapshot]) -> None:
    decision = evaluate_table({"enabledonbrowser": "Firefox"}, snapshot(browser=None))
    assert decision == GateDecision(skip=True, reason="@enabledOnBrowser Firefox", rule="enabledOnBrowser")


def test_skip_on_browser_needs_a_known_browser(snapshot: Callable[..., EnvironmentSnapshot]) -> None:
    assert not evaluate_table({"skiponbrowser": "firefox"}, snapshot(browser=None)).skip
    assert evaluate_table({"skiponbrowser": "Firefox, safari"}, snapshot(browser="firefox")).skip


def test_override_browser_name_is_matched_like_any_other(snapshot: Callable[..., EnvironmentSnapshot]) -> None:
    assert evaluate_table({"skiponbrowser": "foo"}, snapshot(browser="foo")).skip


def test_first_matching_rule_in_catalog_order_wins(snapshot: Callable[..., EnvironmentSnapshot]) -> None:
    table = {"enabledonnodeversion": "18", "skiponos": "linux"}
    decision = evaluate_table(table, snapshot())
    assert decision.rule == "skipOnOS"
    assert decision.reason == "@skipOnOS linux"


def test_non_matching_earlier_rule_falls_through(snapshot: Callable[..., EnvironmentSnapshot]) -> None:
    table = {"skiponos": "win32", "enabledonnodeversion": "18"}
    decision = evaluate_table(table, snapshot())
    assert decision.rule == "enabledOnNodeVersion"
    assert decision.reason == "@enabledOnNodeVersion 18"


def test_blank_annotation_value_is_not_considered(snapshot: Callable[..., EnvironmentSnapshot]) -> None:
    # enabledOnOS with an empty list would otherwise skip everywhere
    assert evaluate_table({"enabledonos": "  "}, snapshot()) == NO_SKIP


def test_unknown_annotations_are_ignored(snapshot: Callable[..., EnvironmentSnapshot]) -> None:
    assert evaluate_table({"jest-environment": "node", "see": "docs"}, snapshot()) == NO_SKIP
