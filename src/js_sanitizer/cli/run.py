"""CLI command implementation for the ``js-sanitizer run`` workflow."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from js_sanitizer.audit import AuditLog
from js_sanitizer.config import read_config, resolve_log_path
from js_sanitizer.constants import EXIT_CHECK, EXIT_CONFIG, EXIT_PATH, EXIT_USAGE, SummaryFormat, WriteMode
from js_sanitizer.discovery import find_common_ancestor
from js_sanitizer.environment import process_snapshot
from js_sanitizer.errors import ConfigLoadError, PathNotFoundError
from js_sanitizer.services import SanitizeExecutor
from js_sanitizer.summary import build_summary, human_summary

from .common import RunParams, _execute_with_handling, exit_on_broken_pipe


@click.command()
@click.option("--check", "mode", flag_value=WriteMode.CHECK.value, help="Report only; exit 1 if files would change")
@click.option("--stdout", "mode", flag_value=WriteMode.STDOUT.value, help="Print rewritten sources instead of writing")
@click.option(
    "--write",
    "mode",
    flag_value=WriteMode.WRITE.value,
    default=True,
    help="Rewrite files in place (default)",
)
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Explicit config file path")
@click.option("--ignore-defaults", "-I", is_flag=True, help="Ignore built-in default patterns")
@click.option("--log-file", type=click.Path(path_type=Path, dir_okay=False), help="Audit log file path")
@click.option("--no-log-file", is_flag=True, help="Do not append to an audit log file")
@click.option(
    "--summary",
    type=click.Choice([s.value for s in SummaryFormat], case_sensitive=False),
    default=SummaryFormat.HUMAN.value,
    help="Summary format to display",
)
@click.argument("paths", nargs=-1, type=click.Path(path_type=Path))
def run(
    *,
    mode: str,
    config_path: Path | None,
    ignore_defaults: bool,
    log_file: Path | None,
    no_log_file: bool,
    summary: str,
    paths: tuple[Path, ...],
) -> None:
    """Gate test registrations under PATHS according to their docblock annotations."""
    if log_file is not None and no_log_file:
        print("--log-file and --no-log-file cannot be used together", file=sys.stderr)
        raise SystemExit(EXIT_USAGE)

    params = RunParams(
        paths=paths or (Path(),),
        mode=WriteMode(mode),
        summary=SummaryFormat(summary.lower()),
        config_path=config_path,
        ignore_defaults=ignore_defaults,
        log_file=log_file,
        no_log_file=no_log_file,
    )

    cwd = Path.cwd()
    try:
        base = find_common_ancestor(list(params.paths))
    except PathNotFoundError as err:
        print(err, file=sys.stderr)
        raise SystemExit(EXIT_PATH) from err

    try:
        cfg = read_config(
            base_path=base,
            ignore_defaults=params.ignore_defaults,
            explicit_config=params.config_path,
        )
    except ConfigLoadError as err:
        print(err, file=sys.stderr)
        raise SystemExit(EXIT_CONFIG) from err

    log_path = None if params.no_log_file else resolve_log_path(cfg, cwd=cwd, override=params.log_file)
    executor = SanitizeExecutor(audit=AuditLog(path=log_path), snapshot=process_snapshot())
    report = _execute_with_handling(executor=executor, params=params, cfg=cfg)

    try:
        if params.summary is SummaryFormat.HUMAN:
            click.echo(human_summary(report), nl=False, err=params.mode is WriteMode.STDOUT)
        elif params.summary is SummaryFormat.JSON:
            print(json.dumps(build_summary(report), sort_keys=True, indent=2))
    except BrokenPipeError:
        exit_on_broken_pipe()

    if params.mode is WriteMode.CHECK and report.changed_files:
        raise SystemExit(EXIT_CHECK)
