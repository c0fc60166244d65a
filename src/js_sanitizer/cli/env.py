"""CLI command printing the environment snapshot gating decisions are made against."""

from __future__ import annotations

import json

import click

from js_sanitizer.constants import SummaryFormat
from js_sanitizer.environment import process_snapshot
from js_sanitizer.rules import rule_names
from js_sanitizer.summary import environment_table


@click.command(name="env")
@click.option(
    "--format",
    "fmt",
    type=click.Choice([SummaryFormat.HUMAN.value, SummaryFormat.JSON.value], case_sensitive=False),
    default=SummaryFormat.HUMAN.value,
    help="Output format",
)
def env(fmt: str) -> None:
    """Show the detected OS, Node major version and browser."""
    snapshot = process_snapshot()
    if SummaryFormat(fmt.lower()) is SummaryFormat.JSON:
        print(json.dumps({**snapshot.as_dict(), "annotations": rule_names()}, sort_keys=True, indent=2))
        return
    print(environment_table(snapshot, rule_names()), end="")
