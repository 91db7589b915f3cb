"""Transcript file loading shared by CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import click

from convwindow.window.errors import InvalidMessageError
from convwindow.window.types import ThreadState


def load_state(path: Path) -> ThreadState:
    """Load a thread state JSON file, or a bare JSON list of messages."""
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path} is not valid JSON: {e}") from e

    if isinstance(data, list):
        data = {"messages": data}
    if not isinstance(data, dict):
        raise click.ClickException(f"{path} must contain a JSON object or list")

    try:
        state = ThreadState.from_dict(data)
    except InvalidMessageError as e:
        raise click.ClickException(str(e)) from e
    state.metadata.setdefault("thread_id", path.stem)
    return state
