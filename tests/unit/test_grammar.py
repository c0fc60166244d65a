from __future__ import annotations

import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from js_sanitizer.grammar import (
    VersionRange,
    first_int,
    parse_key_values,
    parse_list,
    parse_range,
    parse_version_list,
)

pytestmark = pytest.mark.small


def test_parse_list_trims_lowercases_and_drops_empty_tokens() -> None:
    assert parse_list(" Win32 ,DARWIN,, linux ,") == ["win32", "darwin", "linux"]


@pytest.mark.parametrize("value", [None, "", " , ,"])
def test_parse_list_empty_inputs(value: str | None) -> None:
    assert parse_list(value) == []


def test_parse_version_list_keeps_major_component_only() -> None:
    assert parse_version_list("18, v20, 20.11.1, lts, 22-nightly") == [18, 20, 20, 22]


def test_first_int_takes_first_digit_run() -> None:
    assert first_int("node-v18.2") == 18
    assert first_int("latest") is None
    assert first_int(None) is None


def test_parse_key_values_ignores_pairs_without_equals_or_key() -> None:
    assert parse_key_values(" MIN = 16 , junk, =4, max=18 ") == {"min": "16", "max": "18"}


def test_parse_range_is_inclusive_on_both_ends() -> None:
    window = parse_range("min=16,max=18")
    assert [v for v in range(14, 21) if v in window] == [16, 17, 18]


def test_parse_range_missing_bounds_are_unbounded() -> None:
    assert parse_range("min=14") == VersionRange(low=14, high=math.inf)
    assert parse_range("max=v12.3") == VersionRange(low=-math.inf, high=12)
    assert parse_range("") == VersionRange()
    assert parse_range("min=abc, max=") == VersionRange()


def test_version_range_rejects_non_integers() -> None:
    window = VersionRange()
    assert None not in window
    assert "18" not in window
    assert True not in window


@given(st.text(alphabet=st.characters(min_codepoint=32, max_codepoint=126), max_size=60))
def test_parsers_never_raise(value: str) -> None:
    tokens = parse_list(value)
    assert all(t and t == t.strip() and t == t.lower() for t in tokens)
    assert all(isinstance(v, int) for v in parse_version_list(value))
    window = parse_range(value)
    assert isinstance(window, VersionRange)


@given(
    low=st.integers(min_value=0, max_value=40),
    span=st.integers(min_value=0, max_value=10),
    probe=st.integers(min_value=0, max_value=60),
)
def test_range_membership_matches_bounds(low: int, span: int, probe: int) -> None:
    high = low + span
    window = parse_range(f"min={low}, max={high}")
    assert (probe in window) == (low <= probe <= high)
