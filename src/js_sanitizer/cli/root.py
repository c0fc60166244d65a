"""Top-level Click group wiring together all js-sanitizer commands."""

from __future__ import annotations

import logging
import sys

import click

from js_sanitizer import __version__
from js_sanitizer.logging_utils import configure_logging

from .common import exit_on_broken_pipe

# Threshold for -vv to map to DEBUG
VERBOSE_DEBUG_THRESHOLD = 2
DEFAULT_COMMAND = "run"

CLI_CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "ignore_unknown_options": True,
    "allow_extra_args": True,
}


class _DefaultRunGroup(click.Group):
    """Click group that falls back to ``run`` when the first argument is not a command."""

    def resolve_command(
        self,
        ctx: click.Context,
        args: list[str],
    ) -> tuple[str | None, click.Command | None, list[str]]:
        if args and args[0] not in self.commands:
            args = [DEFAULT_COMMAND, *args]
        return super().resolve_command(ctx, args)


@click.group(cls=_DefaultRunGroup, invoke_without_command=True, context_settings=CLI_CONTEXT_SETTINGS)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (use -vv for debug)")
@click.option(
    "--log-level",
    type=click.Choice(["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"], case_sensitive=False),
    help="Set log level explicitly",
)
@click.version_option(__version__, "-V", "--version")
@click.pass_context
def cli(ctx: click.Context, verbose: int, log_level: str | None) -> None:
    """Disable JS/TS tests whose docblock annotations do not fit this environment.

    If no COMMAND is given, this behaves like: js-sanitizer run [PATHS...]
    """
    if log_level:
        level = getattr(logging, log_level.upper())
    elif verbose >= VERBOSE_DEBUG_THRESHOLD:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    configure_logging(level)

    if ctx.invoked_subcommand is None:
        command = cli.get_command(ctx, DEFAULT_COMMAND)
        if command is not None:
            command.main(args=list(ctx.args), prog_name=f"{ctx.command_path} {DEFAULT_COMMAND}", standalone_mode=False)


from .env import env  # noqa: E402
from .init import init  # noqa: E402
from .run import run  # noqa: E402
from .version import version  # noqa: E402

cli.add_command(run)
cli.add_command(env)
cli.add_command(init)
cli.add_command(version)


def main(argv: list[str] | None = None) -> None:
    """Console entry point."""
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        cli.main(args=argv, prog_name="js-sanitizer")
    except BrokenPipeError:
        exit_on_broken_pipe()
