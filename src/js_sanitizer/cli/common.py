"""Shared CLI helpers."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from js_sanitizer.constants import EXIT_INTERRUPT, EXIT_PATH, SummaryFormat, WriteMode
from js_sanitizer.errors import PathNotFoundError
from js_sanitizer.services import SanitizeExecutor, SanitizeOptions

if TYPE_CHECKING:
    from pathlib import Path

    from js_sanitizer.services import RunReport


@dataclass(frozen=True, slots=True)
class RunParams:
    paths: tuple[Path, ...]
    mode: WriteMode
    summary: SummaryFormat
    config_path: Path | None
    ignore_defaults: bool
    log_file: Path | None
    no_log_file: bool


def exit_on_broken_pipe() -> None:
    """Silence the BrokenPipeError traceback when stdout is closed early."""
    try:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    except (OSError, ValueError):
        pass
    raise SystemExit(0)


def _execute_with_handling(
    *,
    executor: SanitizeExecutor,
    params: RunParams,
    cfg: dict[str, Any],
) -> RunReport:
    try:
        return executor.execute(
            paths=list(params.paths),
            cfg=cfg,
            options=SanitizeOptions(mode=params.mode),
        )
    except PathNotFoundError as e:
        print(e, file=sys.stderr)
        raise SystemExit(EXIT_PATH) from e
    except KeyboardInterrupt as e:
        print("\nInterrupted by user.", file=sys.stderr)
        raise SystemExit(EXIT_INTERRUPT) from e
