"""Outcometree CLI entry point: Click group with subcommands."""

import click

from outcometree import __version__


@click.group()
@click.version_option(version=__version__, prog_name="outcometree")
def cli() -> None:
    """Outcometree - inspect saved outcome reports."""


# Import and register subcommands
from outcometree.cli.render import render  # noqa: E402
from outcometree.cli.summary import summary  # noqa: E402

cli.add_command(render)
cli.add_command(summary)
