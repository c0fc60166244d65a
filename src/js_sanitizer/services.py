"""Application service that gates a set of files with one environment snapshot."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .audit import AuditLog
from .constants import WriteMode
from .discovery import discover_files
from .environment import EnvironmentSnapshot, process_snapshot
from .errors import SourceParseError
from .logging_utils import StructuredLogEvent, get_logger, log_event
from .syntax import parse_source
from .transform import GateTransformer, SkipRecord

if TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class FileOutcome:
    path: Path
    changed: bool
    skipped: tuple[SkipRecord, ...] = ()
    warnings: tuple[str, ...] = ()
    error: str | None = None


@dataclass(slots=True)
class RunReport:
    base: Path
    snapshot: EnvironmentSnapshot
    mode: WriteMode
    files: list[FileOutcome] = field(default_factory=list)

    @property
    def changed_files(self) -> list[FileOutcome]:
        return [f for f in self.files if f.changed]

    @property
    def failed_files(self) -> list[FileOutcome]:
        return [f for f in self.files if f.error is not None]

    @property
    def skipped_count(self) -> int:
        return sum(len(f.skipped) for f in self.files)


@dataclass(frozen=True, slots=True)
class SanitizeOptions:
    mode: WriteMode = WriteMode.WRITE


@dataclass(slots=True)
class SanitizeExecutor:
    """Discover files, gate each one and write or report the result.

    The snapshot is resolved once per executor, so every file in a run is
    judged against the same environment.
    """

    audit: AuditLog
    snapshot: EnvironmentSnapshot = field(default_factory=process_snapshot)
    sink: Callable[[str], None] = print

    def execute(self, *, paths: list[Path], cfg: dict[str, Any], options: SanitizeOptions) -> RunReport:
        base, files = discover_files(paths, cfg)
        report = RunReport(base=base, snapshot=self.snapshot, mode=options.mode)
        transformer = GateTransformer(self.snapshot, self.audit)
        log_event(
            logger,
            StructuredLogEvent(
                name="executor.started",
                message="gating files",
                context={"base": base, "files": len(files), "mode": options.mode.value},
                level=logging.INFO,
            ),
        )
        for path in files:
            report.files.append(self._process(path, base, transformer, options))
        return report

    def _process(
        self,
        path: Path,
        base: Path,
        transformer: GateTransformer,
        options: SanitizeOptions,
    ) -> FileOutcome:
        display = _display_name(path, base)
        try:
            parsed = parse_source(path.read_bytes(), filename=display)
        except (OSError, SourceParseError) as err:
            log_event(
                logger,
                StructuredLogEvent(
                    name="executor.read_failed",
                    message=f"could not read {display}",
                    context={"path": path, "error": str(err)},
                    level=logging.WARNING,
                ),
            )
            return FileOutcome(path=path, changed=False, error=str(err))

        result = transformer.transform(parsed)
        if result.changed and options.mode is WriteMode.WRITE:
            path.write_bytes(result.source)
        elif options.mode is WriteMode.STDOUT:
            self.sink(result.code)
        return FileOutcome(
            path=path,
            changed=result.changed,
            skipped=tuple(result.skipped),
            warnings=tuple(result.warnings),
        )


def _display_name(path: Path, base: Path) -> str:
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return path.as_posix()


__all__ = ["FileOutcome", "RunReport", "SanitizeExecutor", "SanitizeOptions"]
