"""convwindow: bounded conversation windows with observational summaries."""

__version__ = "0.1.0"
