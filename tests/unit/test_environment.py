from __future__ import annotations

import subprocess

import pytest

from js_sanitizer import environment
from js_sanitizer.environment import (
    EnvironmentSnapshot,
    capture,
    classify_user_agent,
    parse_major,
)

pytestmark = pytest.mark.small

FIREFOX_UA = "Mozilla/5.0 (X11; Linux x86_64; rv:126.0) Gecko/20100101 Firefox/126.0"
EDGE_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/125.0.0.0 Safari/537.36 Edg/125.0.0.0"
)
CHROME_UA = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/125.0.0.0 Safari/537.36"
)
SAFARI_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_5) AppleWebKit/605.1.15 (KHTML, like Gecko) "
    "Version/17.5 Safari/605.1.15"
)


@pytest.mark.parametrize(
    ("version", "expected"),
    [("v20.11.1", 20), ("18", 18), ("22.0.0-nightly", 22), ("", None), (None, None), ("unknown", None)],
)
def test_parse_major(version: str | None, expected: int | None) -> None:
    assert parse_major(version) == expected


@pytest.mark.parametrize(
    ("user_agent", "expected"),
    [
        (FIREFOX_UA, "firefox"),
        (EDGE_UA, "edge"),
        (CHROME_UA, "chrome"),
        (SAFARI_UA, "safari"),
        ("Mozilla/5.0 Chromium Safari/537.36", None),
        ("curl/8.5.0", None),
        ("", None),
        (None, None),
    ],
)
def test_classify_user_agent_precedence(user_agent: str | None, expected: str | None) -> None:
    assert classify_user_agent(user_agent) == expected


def test_capture_normalises_platform_and_version() -> None:
    snap = capture({}, platform="Linux", node_version="v20.11.1")
    assert snap == EnvironmentSnapshot(os="linux", node_major=20, browser=None)


def test_browser_override_is_accepted_verbatim() -> None:
    env = {"JS_SANITIZER_BROWSER": "  Foo ", "JS_SANITIZER_USER_AGENT": FIREFOX_UA}
    assert capture(env, platform="linux", node_version="20").browser == "foo"


def test_blank_override_falls_back_to_user_agent() -> None:
    env = {"JS_SANITIZER_BROWSER": "   ", "JS_SANITIZER_USER_AGENT": CHROME_UA}
    assert capture(env, platform="linux", node_version="20").browser == "chrome"


def test_node_version_from_environment_variable() -> None:
    snap = capture({"JS_SANITIZER_NODE_VERSION": "18.19.0"}, platform="darwin")
    assert snap.node_major == 18
    assert snap.os == "darwin"


def test_missing_node_yields_unknown_major(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(environment.shutil, "which", lambda _name: None)
    assert capture({}, platform="linux").node_major is None


def test_node_probe_uses_node_executable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(environment.shutil, "which", lambda _name: "/usr/bin/node")
    calls: list[list[str]] = []

    def fake_run(argv: list[str], **_: object) -> subprocess.CompletedProcess[str]:
        calls.append(argv)
        return subprocess.CompletedProcess(argv, 0, stdout="v21.7.3\n", stderr="")

    monkeypatch.setattr(environment.subprocess, "run", fake_run)
    assert capture({}, platform="linux").node_major == 21
    assert calls == [["/usr/bin/node", "--version"]]


def test_node_probe_failure_is_not_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(environment.shutil, "which", lambda _name: "/usr/bin/node")

    def broken_run(argv: list[str], **_: object) -> subprocess.CompletedProcess[str]:
        raise subprocess.TimeoutExpired(argv, 5.0)

    monkeypatch.setattr(environment.subprocess, "run", broken_run)
    assert capture({}, platform="linux").node_major is None


def test_process_snapshot_is_captured_once(monkeypatch: pytest.MonkeyPatch) -> None:
    environment.process_snapshot.cache_clear()
    calls: list[int] = []

    def fake_capture() -> EnvironmentSnapshot:
        calls.append(1)
        return EnvironmentSnapshot(os="linux", node_major=20, browser=None)

    monkeypatch.setattr(environment, "capture", fake_capture)
    try:
        first = environment.process_snapshot()
        second = environment.process_snapshot()
    finally:
        environment.process_snapshot.cache_clear()
    assert first is second
    assert calls == [1]
