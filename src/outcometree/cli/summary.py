"""CLI command: outcometree summary -- status counts and problems of a report."""

from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path

import click

from outcometree.cli.render import EXIT_BAD_REPORT
from outcometree.model import OutcomeStatus
from outcometree.report import load_report
from outcometree.runner import warning_summary


@click.command()
@click.argument("report", type=click.Path(exists=True, dir_okay=False))
def summary(report: str) -> None:
    """Summarise the outcome tree stored in REPORT.

    Exits with status 1 when the root outcome is an ERROR.
    """
    try:
        node = load_report(Path(report))
    except (ValueError, KeyError) as exc:
        click.echo(f"Report error: {exc}", err=True)
        sys.exit(EXIT_BAD_REPORT)

    nodes = list(node.iter_tree())
    counts = Counter(n.status for n in nodes)

    click.echo(f"Outcome: {node.kind.value} '{node.name}' {node.status.value}")
    click.echo(f"Duration: {node.duration_secs:.3f}s")
    click.echo(f"Nodes: {len(nodes)}")
    click.echo()

    click.echo("Status counts:")
    for status in OutcomeStatus:
        if counts[status]:
            click.echo(f"  {status.value}: {counts[status]}")

    problems = warning_summary(node)
    if problems:
        click.echo()
        click.echo("Problems:")
        for line in problems:
            click.echo(line)

    if node.status is OutcomeStatus.ERROR:
        sys.exit(1)
