"""Logging setup for the command line entry point."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "QEASY_LOG_LEVEL"
# httpx logs every request URL at INFO, and Keepa URLs carry the API key.
QUIET_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, level: int | str | None = None, force: bool = False) -> None:
    """Configure the root logger for CLI use.

    ``level`` falls back to ``QEASY_LOG_LEVEL`` and then INFO. Log records go
    to stderr so that JSON written to stdout stays machine readable.
    """

    resolved = level if level is not None else os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
