"""
Logging setup.

All modules log through loguru's shared `logger`; the CLI calls
configure_logging() once so diagnostics go to stderr while command
output stays on stdout.
"""

from __future__ import annotations

import sys

from loguru import logger

from catalogflat.config import LOG_LEVEL


def configure_logging(level: str | None = None) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or LOG_LEVEL).upper(),
        format="{time:HH:mm:ss} | {level: <7} | {message}",
    )
