"""CLI command reporting the installed js-sanitizer version."""

from __future__ import annotations

import click

from js_sanitizer import __version__


@click.command()
def version() -> None:
    """Print version and exit."""
    print(__version__)
