"""Run one window compaction cycle over a transcript file."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from convwindow.cli.transcript import load_state
from convwindow.utils.logging import setup_logging
from convwindow.window.manager import WindowManager
from convwindow.window.summarizer import LLMSummarizer, NullSummarizer


@click.command()
@click.argument("transcript", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--max-window", "-w", type=int, default=None, help="Override the configured window cap")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write the compacted state here")
@click.option("--offline", is_flag=True, help="Skip the LLM and insert a placeholder summary")
def compact(transcript: Path, max_window: int | None, output: Path | None, offline: bool) -> None:
    """Compact TRANSCRIPT down to the window cap.

    Example: convwindow compact thread.json --offline -o thread.compacted.json
    """
    setup_logging()
    console = Console()

    state = load_state(transcript)
    summarizer = NullSummarizer() if offline else LLMSummarizer()
    try:
        manager = WindowManager(summarizer=summarizer, max_window=max_window)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--max-window") from e

    outcome = asyncio.run(manager.perform_summarization(state))

    if not outcome.summarized:
        console.print(f"[dim]Window within cap ({outcome.before}/{manager.max_window}), nothing to do.[/dim]")
    else:
        table = Table(title=f"Thread {state.thread_id}")
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Messages", f"{outcome.before} → {outcome.after}")
        table.add_row("Evicted", str(outcome.batch_size))
        table.add_row("Observations", str(len(outcome.observations)))
        if outcome.force_trimmed:
            table.add_row("Force-trimmed", f"[yellow]{outcome.force_trimmed}[/yellow]")
        if outcome.error:
            table.add_row("Summarizer error", f"[red]{outcome.error}[/red]")
        console.print(table)

    if output:
        output.write_text(json.dumps(state.to_dict(), indent=2, ensure_ascii=False))
        console.print(f"[green]✓[/green] Wrote {output}")
