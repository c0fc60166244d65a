from __future__ import annotations

import importlib
from dataclasses import replace
from typing import TYPE_CHECKING

import pytest

from js_sanitizer.audit import AuditLog
from js_sanitizer.environment import EnvironmentSnapshot
from js_sanitizer.syntax import parse_source
from js_sanitizer.transform import GateTransformer, TransformResult

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

LINUX_NODE_20 = EnvironmentSnapshot(os="linux", node_major=20, browser=None)
CLI_SNAPSHOT = EnvironmentSnapshot(os="linux", node_major=20, browser="firefox")


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user config and JS_SANITIZER_* variables out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for var in (
        "JS_SANITIZER_BROWSER",
        "JS_SANITIZER_USER_AGENT",
        "JS_SANITIZER_NODE_VERSION",
        "JS_SANITIZER_CONFIG_PATH",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def snapshot() -> Callable[..., EnvironmentSnapshot]:
    """Build a snapshot, defaulting to linux / Node 20 / no browser."""

    def _make(**changes: object) -> EnvironmentSnapshot:
        return replace(LINUX_NODE_20, **changes)

    return _make


@pytest.fixture
def console_lines() -> list[str]:
    return []


@pytest.fixture
def audit(tmp_path: Path, console_lines: list[str]) -> AuditLog:
    return AuditLog(path=tmp_path / "sanitize-tests.log", console=console_lines.append)


@pytest.fixture
def gate(audit: AuditLog) -> Callable[..., TransformResult]:
    """Transform a snippet against ``env`` (default linux / Node 20)."""

    def _gate(
        source: str,
        env: EnvironmentSnapshot = LINUX_NODE_20,
        *,
        filename: str | None = "sample.test.js",
    ) -> TransformResult:
        return GateTransformer(env, audit).transform(parse_source(source, filename=filename))

    return _gate


@pytest.fixture
def cli_snapshot(monkeypatch: pytest.MonkeyPatch) -> EnvironmentSnapshot:
    """Pin the process-wide snapshot read by the CLI commands."""
    for module in ("js_sanitizer.cli.run", "js_sanitizer.cli.env"):
        monkeypatch.setattr(importlib.import_module(module), "process_snapshot", lambda: CLI_SNAPSHOT)
    return CLI_SNAPSHOT
