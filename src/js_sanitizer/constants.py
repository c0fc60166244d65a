"""Project-wide constants and enums."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class SummaryFormat(StrEnum):
    """Valid summary formats for a run."""

    HUMAN = "human"
    JSON = "json"
    NONE = "none"


class WriteMode(StrEnum):
    """What to do with a rewritten file."""

    WRITE = "write"
    STDOUT = "stdout"
    CHECK = "check"


class Browser(StrEnum):
    """Browsers recognised from a user-agent string."""

    FIREFOX = "firefox"
    EDGE = "edge"
    CHROME = "chrome"
    SAFARI = "safari"


# Registration call names that can be gated. ``describe`` registers a group.
TEST_BASE_NAMES: Final[frozenset[str]] = frozenset({"test", "it"})
GROUP_BASE_NAMES: Final[frozenset[str]] = frozenset({"describe"})
BASE_NAMES: Final[frozenset[str]] = TEST_BASE_NAMES | GROUP_BASE_NAMES
SKIP_MODIFIER: Final = "skip"
# Modifiers that return the registration function: ``test.each(table)(name, fn)``.
FACTORY_MODIFIERS: Final[frozenset[str]] = frozenset({"each"})

# Environment variables consumed by the snapshot and config layers.
ENV_BROWSER: Final = "JS_SANITIZER_BROWSER"
ENV_USER_AGENT: Final = "JS_SANITIZER_USER_AGENT"
ENV_NODE_VERSION: Final = "JS_SANITIZER_NODE_VERSION"
ENV_CONFIG_PATH: Final = "JS_SANITIZER_CONFIG_PATH"

DEFAULT_LOG_FILE: Final = "sanitize-tests.log"
UNNAMED_TEST: Final = "(unnamed)"
UNKNOWN_FILE: Final = "(unknown file)"

CONFIG_INCLUDE: Final = "include"
CONFIG_EXCLUDE: Final = "exclude"
CONFIG_EXTENSIONS: Final = "extensions"
CONFIG_LOG_FILE: Final = "log_file"

# Exit codes
EXIT_CHECK = 1
EXIT_USAGE = 2
EXIT_CONFIG = 3
EXIT_PATH = 4
EXIT_INTERRUPT = 130
