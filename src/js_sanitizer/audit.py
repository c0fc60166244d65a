"""Human-readable audit trail of skip decisions.

Every line goes to the console (stderr) and is appended, timestamped, to a log
file. Appends are best-effort: a log file that cannot be written never fails a
transform.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import click

from .logging_utils import StructuredLogEvent, get_logger, log_event

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

logger = get_logger(__name__)


def _stderr(message: str) -> None:
    click.echo(message, err=True)


def iso_timestamp(now: datetime | None = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def skip_message(base_name: str, name: str, filename: str, reason: str) -> str:
    return f'[SKIPPING] {base_name}("{name}") in {filename} due to {reason}'


def warn_message(filename: str, error: Exception) -> str:
    return f"[WARN] Failed to process comment in {filename}: {error}"


@dataclass(slots=True)
class AuditLog:
    """Append-only sink for skip and warning lines."""

    path: Path | None
    console: Callable[[str], None] = _stderr
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(UTC))
    lines: list[str] = field(default_factory=list)

    def record(self, message: str) -> None:
        self.lines.append(message)
        self.console(message)
        self._append(message)

    def skipped(self, base_name: str, name: str, filename: str, reason: str) -> None:
        self.record(skip_message(base_name, name, filename, reason))

    def warn(self, filename: str, error: Exception) -> None:
        self.record(warn_message(filename, error))

    def _append(self, message: str) -> None:
        if self.path is None:
            return
        line = f"[{iso_timestamp(self.clock())}] {message}\n"
        try:
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(line)
        except OSError as err:
            log_event(
                logger,
                StructuredLogEvent(
                    name="audit.append_failed",
                    message="could not append to audit log",
                    context={"path": self.path, "error": str(err)},
                    level=logging.DEBUG,
                ),
            )


__all__ = ["AuditLog", "iso_timestamp", "skip_message", "warn_message"]
