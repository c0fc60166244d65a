"""Runtime environment snapshot used by every gating decision in a run."""

from __future__ import annotations

import functools
import os
import re
import shutil
import subprocess
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .constants import ENV_BROWSER, ENV_NODE_VERSION, ENV_USER_AGENT, Browser
from .logging_utils import StructuredLogEvent, get_logger, log_event

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = get_logger(__name__)

_DIGITS = re.compile(r"\d+")
NODE_VERSION_TIMEOUT = 5.0


@dataclass(frozen=True, slots=True)
class EnvironmentSnapshot:
    """Operating system, Node major version and browser for one run.

    ``node_major`` is ``None`` when the version is unknown; version predicates
    never fire in that case.
    """

    os: str
    node_major: int | None
    browser: str | None

    def as_dict(self) -> dict[str, object]:
        return {"os": self.os, "node_major": self.node_major, "browser": self.browser}


def parse_major(version: str | None) -> int | None:
    """Return the first integer in ``version`` (``"v20.11.1"`` -> 20)."""
    if not version:
        return None
    match = _DIGITS.search(version)
    return int(match.group()) if match else None


def classify_user_agent(user_agent: str | None) -> str | None:
    """Classify a user-agent string; ``None`` when it names no known browser."""
    if not user_agent:
        return None
    if "Firefox" in user_agent:
        return Browser.FIREFOX.value
    if "Edg" in user_agent:
        return Browser.EDGE.value
    if "Chrome" in user_agent:
        return Browser.CHROME.value
    if "Safari" in user_agent and "Chromium" not in user_agent:
        return Browser.SAFARI.value
    return None


def detect_browser(environ: Mapping[str, str]) -> str | None:
    override = environ.get(ENV_BROWSER, "").strip().lower()
    if override:
        return override
    return classify_user_agent(environ.get(ENV_USER_AGENT))


def query_node_version() -> str | None:
    """Ask the ``node`` executable on ``PATH`` for its version."""
    node = shutil.which("node")
    if node is None:
        return None
    try:
        completed = subprocess.run(  # noqa: S603 - resolved executable, fixed argv
            [node, "--version"],
            capture_output=True,
            text=True,
            timeout=NODE_VERSION_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as err:
        log_event(
            logger,
            StructuredLogEvent(
                name="environment.node_probe_failed",
                message="could not query node version",
                context={"node": node, "error": str(err)},
            ),
        )
        return None
    if completed.returncode != 0:
        return None
    return completed.stdout.strip() or None


def capture(
    environ: Mapping[str, str] | None = None,
    *,
    platform: str | None = None,
    node_version: str | None = None,
) -> EnvironmentSnapshot:
    """Capture the environment snapshot.

    ``node_version`` resolves from the argument, then ``JS_SANITIZER_NODE_VERSION``,
    then ``node --version``.
    """
    env = os.environ if environ is None else environ
    if node_version is None:
        node_version = env.get(ENV_NODE_VERSION) or query_node_version()
    snapshot = EnvironmentSnapshot(
        os=(platform if platform is not None else sys.platform).lower(),
        node_major=parse_major(node_version),
        browser=detect_browser(env),
    )
    log_event(
        logger,
        StructuredLogEvent(
            name="environment.captured",
            message="captured environment snapshot",
            context=snapshot.as_dict(),
        ),
    )
    return snapshot


@functools.cache
def process_snapshot() -> EnvironmentSnapshot:
    """Return the snapshot for this process, capturing it on first use."""
    return capture()
