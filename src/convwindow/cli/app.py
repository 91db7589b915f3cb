"""Main CLI entry point."""

from __future__ import annotations

import click

from convwindow import __version__


@click.group()
@click.version_option(version=__version__, prog_name="convwindow")
def cli() -> None:
    """convwindow: keep conversation transcripts inside a bounded window."""
    pass


# Register sub-commands
from convwindow.cli.compact import compact  # noqa: E402
from convwindow.cli.scores import scores  # noqa: E402

cli.add_command(compact)
cli.add_command(scores)
