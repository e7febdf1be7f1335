"""Logging configuration."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

# Noisy third-party loggers kept at WARNING unless verbose
QUIET_LOGGERS = ["boto3", "botocore", "urllib3", "s3transfer"]


def setup_logging(level: str = "INFO", verbose: bool = False) -> None:
    """Configure root logging with a Rich handler on stderr.

    Args:
        level: Log level name (e.g., "INFO", "DEBUG")
        verbose: Show file paths and let AWS SDK debug output through
    """
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)
