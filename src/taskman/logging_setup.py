"""Logging configuration for taskman."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False) -> None:
    """Send taskman diagnostics to stderr.

    Only warnings are shown unless ``verbose`` is set, in which case debug
    records from the store are shown too. Call once, before the first
    command runs.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setLevel(level)
    root.addHandler(handler)

    logging.captureWarnings(True)
