"""
logging_utils.py

Logging helpers shared by the SDK and the CLI.

    • setup_logger()  — library loggers (transport, client) use the standard
                        logging module with one consistent stderr handler.
    • log_verbose()   — high‑level progress lines for the CLI's --verbose
                        flag, printed through Typer.
    • debug_logging() — raises the library loggers to DEBUG for one CLI
                        invocation and restores them afterwards.

Library log output goes to stderr so that `--json` output on stdout stays
machine‑readable.
"""

import logging
import os
import sys
from contextlib import contextmanager
from typing import Dict, Iterator

import typer

DEFAULT_LEVEL = os.getenv("VOYAGE_LOG_LEVEL", "WARNING")


def setup_logger(name: str, level: str = DEFAULT_LEVEL) -> logging.Logger:
    """Create a logger with consistent formatting (idempotent per name)."""
    logger = logging.getLogger(name)

    # Don't add handlers if they already exist
    if logger.handlers:
        return logger

    log_level = getattr(logging, level.upper(), logging.WARNING)
    logger.setLevel(log_level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def set_level(level: str) -> Dict[str, int]:
    """
    Change the level of every voyagekit logger created so far.

    Returns the previous level of each logger, for restore_levels().
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)
    previous = {}
    for name, logger in logging.root.manager.loggerDict.items():
        if name.startswith("voyagekit") and isinstance(logger, logging.Logger):
            previous[name] = logger.level
            logger.setLevel(log_level)
    return previous


def restore_levels(previous: Dict[str, int]) -> None:
    for name, level in previous.items():
        logging.getLogger(name).setLevel(level)


@contextmanager
def debug_logging(enabled: bool) -> Iterator[None]:
    """Run the block with voyagekit loggers at DEBUG when `enabled`."""
    if not enabled:
        yield
        return
    previous = set_level("DEBUG")
    try:
        yield
    finally:
        restore_levels(previous)


def log_verbose(message: str, verbose: bool) -> None:
    """
    Print a high‑level progress message when verbose mode is enabled.

    Parameters
    ----------
    message : str
        Short, plain‑English description of what the CLI is doing
        (e.g., "Sending rerank request...").
    verbose : bool
        When False this function does nothing.

    Notes
    -----
    Output goes to stderr so it never mixes with --json results.
    """
    if verbose:
        typer.echo(message, err=True)
