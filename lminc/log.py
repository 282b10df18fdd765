"""
Logging setup for the lmc command line.

Library modules only create module loggers (``logging.getLogger(__name__)``);
handlers are installed here, once, by the CLI.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

__all__ = ['LOGGER_NAME', 'setup_logging']

LOGGER_NAME = "lminc"

FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: int = logging.WARNING,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure and return the package logger.

    Console messages go through a RichHandler on stderr at ``level``, so they
    never mix with program output on stdout. When ``log_file`` is given,
    everything (DEBUG+) is also written there.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger
    logger.setLevel(logging.DEBUG if log_file else level)

    # ── File handler: captures everything (DEBUG+) ──
    if log_file:
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(fh)

    # ── Console handler: only what was asked for ──
    ch = RichHandler(
        level=level,
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logger.addHandler(ch)

    return logger
