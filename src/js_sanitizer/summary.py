"""Human and machine-readable summaries of a run."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from .environment import EnvironmentSnapshot
    from .services import RunReport


def _display(value: object) -> str:
    return "unknown" if value is None else str(value)


def build_summary(report: RunReport) -> dict[str, Any]:
    """Build a JSON-serialisable summary of ``report``."""
    return {
        "root": str(report.base),
        "mode": report.mode.value,
        "environment": report.snapshot.as_dict(),
        "totals": {
            "files": len(report.files),
            "changed": len(report.changed_files),
            "skipped": report.skipped_count,
            "errors": len(report.failed_files),
        },
        "files": [
            {
                "path": outcome.path.relative_to(report.base).as_posix(),
                "changed": outcome.changed,
                "skipped": [record.as_dict() for record in outcome.skipped],
                "warnings": list(outcome.warnings),
                **({"error": outcome.error} if outcome.error is not None else {}),
            }
            for outcome in report.files
        ],
    }


def human_summary(report: RunReport, *, width: int | None = None) -> str:
    """Render skipped calls as a table followed by totals."""
    console = Console(file=io.StringIO(), record=True, width=width, force_terminal=False)
    if report.skipped_count:
        table = Table(title="Gated tests", show_edge=False, pad_edge=False)
        table.add_column("File", style="cyan", no_wrap=True)
        table.add_column("Line", justify="right")
        table.add_column("Call")
        table.add_column("Reason")
        for outcome in report.files:
            rel = outcome.path.relative_to(report.base).as_posix()
            for record in outcome.skipped:
                call = record.as_dict()["call"]
                table.add_row(escape(rel), str(record.line), escape(f'{call}("{record.name}")'), escape(record.reason))
        console.print(table)
    for outcome in report.failed_files:
        console.print(f"[red]error[/red] {escape(str(outcome.path))}: {escape(outcome.error or '')}", highlight=False)
    console.print(
        f"{len(report.files)} file(s) scanned, {len(report.changed_files)} changed, "
        f"{report.skipped_count} call(s) gated",
        highlight=False,
    )
    return console.export_text()


def environment_table(snapshot: EnvironmentSnapshot, rules: list[str]) -> str:
    """Render the environment snapshot and the supported annotations."""
    console = Console(file=io.StringIO(), record=True, force_terminal=False)
    table = Table(show_header=False, show_edge=False, box=None, pad_edge=False)
    table.add_column(style="cyan", no_wrap=True)
    table.add_column()
    table.add_row("os", snapshot.os)
    table.add_row("node", _display(snapshot.node_major))
    table.add_row("browser", _display(snapshot.browser))
    table.add_row("annotations", ", ".join(f"@{name}" for name in rules))
    console.print(table)
    return console.export_text()


__all__ = ["build_summary", "environment_table", "human_summary"]
