"""Logging setup for mergeflow.

Workflows log progress through ordinary module loggers.  The CLI routes
records below WARNING to stdout as plain progress lines and everything at
WARNING or above to stderr; the MCP server keeps stdout free for the
protocol and logs to stderr only.
"""

from __future__ import annotations

import logging
import sys

_PACKAGE_LOGGER = "mergeflow"
_DETAILED_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class _BelowLevel(logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def configure_logging(level: str = "INFO", split_streams: bool = True) -> logging.Logger:
    """Attach handlers to the package logger and return it.

    With ``split_streams`` progress (DEBUG/INFO) is written to stdout without
    decoration and warnings/errors to stderr prefixed with their level.
    Otherwise all records go to stderr in the detailed format.
    """
    logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    if not split_streams:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_DETAILED_FORMAT))
        logger.addHandler(handler)
        return logger

    progress = logging.StreamHandler(sys.stdout)
    progress.setFormatter(logging.Formatter("%(message)s"))
    progress.addFilter(_BelowLevel(logging.WARNING))
    logger.addHandler(progress)

    problems = logging.StreamHandler(sys.stderr)
    problems.setLevel(logging.WARNING)
    problems.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(problems)
    return logger
