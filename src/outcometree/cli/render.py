"""CLI command: outcometree render -- print a saved outcome tree."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from outcometree.render import RenderOptions
from outcometree.render import render as render_outcome
from outcometree.report import load_report

EXIT_BAD_REPORT = 2


@click.command()
@click.argument("report", type=click.Path(exists=True, dir_okay=False))
@click.option("--child-depth", type=int, default=1, show_default=True,
              help="Levels of child outcomes to list.")
@click.option("--detail-depth", type=int, default=4, show_default=True,
              help="Nesting depth shown for detail payloads.")
@click.option("--error-depth", type=int, default=4, show_default=True,
              help="Nesting depth shown for error data.")
@click.option("--no-color", is_flag=True, default=False, help="Disable ANSI styling.")
def render(
    report: str,
    child_depth: int,
    detail_depth: int,
    error_depth: int,
    no_color: bool,
) -> None:
    """Render the outcome tree stored in REPORT."""
    try:
        node = load_report(Path(report))
    except (ValueError, KeyError) as exc:
        click.echo(f"Report error: {exc}", err=True)
        sys.exit(EXIT_BAD_REPORT)

    options = RenderOptions(
        child_depth=child_depth,
        detail_depth=detail_depth,
        error_depth=error_depth,
        color=not no_color,
    )
    click.echo(render_outcome(node, options), nl=False)
