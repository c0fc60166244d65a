"""Structured diagnostic logging helpers.

Diagnostic records go through :mod:`logging`; the human-readable audit trail of
skip decisions lives in :mod:`js_sanitizer.audit` and is not routed here.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

type LogValue = str | int | float | bool | list[LogValue] | dict[str, LogValue] | None


def _serialise_value(value: object) -> LogValue:
    """Convert ``value`` into a log-friendly representation."""
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (set, frozenset)):
        return sorted(str(_serialise_value(v)) for v in value)
    if isinstance(value, Mapping):
        return {str(k): _serialise_value(v) for k, v in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, str):
        return [_serialise_value(v) for v in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


@dataclass(frozen=True, slots=True)
class StructuredLogEvent:
    """A named log event with a context payload."""

    name: str
    message: str
    context: dict[str, object] = field(default_factory=dict)
    level: int = logging.DEBUG

    def serialised_context(self) -> dict[str, LogValue]:
        return {str(k): _serialise_value(v) for k, v in self.context.items()}


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``."""
    return logging.getLogger(name)


def log_event(logger: logging.Logger, event: StructuredLogEvent) -> None:
    """Emit ``event`` to ``logger`` with the event name and context as extras."""
    logger.log(event.level, event.message, extra={"event": event.name, "context": event.serialised_context()})


def configure_logging(level: int) -> None:
    """Configure root logging for CLI runs."""
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", force=True)


__all__ = ["StructuredLogEvent", "configure_logging", "get_logger", "log_event"]
