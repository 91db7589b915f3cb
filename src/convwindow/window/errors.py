"""Errors raised by the window manager."""

from __future__ import annotations


class WindowError(Exception):
    """Base class for window errors."""


class InvalidStateError(WindowError):
    """The caller passed a thread state the manager cannot work with."""


class InvalidMessageError(WindowError):
    """A message failed validation at the boundary (e.g. unknown role)."""
