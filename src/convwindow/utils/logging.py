"""Logging setup for convwindow."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

NOISY_LOGGERS = ("httpx", "httpcore", "anthropic")


def setup_logging(level: str | None = None) -> None:
    """Configure root logger with Rich handler.

    ``level`` defaults to the configured ``log_level``. Calling this again
    only adjusts the level.
    """
    if level is None:
        from convwindow.config.settings import get_settings

        level = get_settings().log_level

    root = logging.getLogger()
    resolved = getattr(logging, level.upper(), logging.INFO)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        root.addHandler(handler)
    root.setLevel(resolved)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"convwindow.{name}")
