"""Show eviction scores for a transcript."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from convwindow.cli.transcript import load_state
from convwindow.window.scoring import score_messages


@click.command()
@click.argument("transcript", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--limit", "-n", type=int, default=None, help="Only show the first N messages")
def scores(transcript: Path, limit: int | None) -> None:
    """List eviction scores for every message in TRANSCRIPT."""
    console = Console()
    state = load_state(transcript)

    if not state.messages:
        console.print("[dim]Transcript is empty.[/dim]")
        return

    table = Table(title=f"Eviction scores ({len(state.messages)} messages)")
    table.add_column("#", justify="right")
    table.add_column("Role", style="green")
    table.add_column("Score", justify="right", style="cyan")
    table.add_column("Content")

    rows = list(zip(state.messages, score_messages(state.messages)))
    for index, (message, score) in enumerate(rows[:limit]):
        content = message.content if isinstance(message.content, str) else str(message.content)
        marker = " [dim](summary)[/dim]" if message.is_summary else ""
        table.add_row(
            str(index),
            message.role.value + marker,
            f"{score:.3f}",
            escape(content[:60] + "..." if len(content) > 60 else content),
        )

    console.print(table)
