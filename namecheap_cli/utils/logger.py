"""
Logging for the namecheap CLI

Diagnostics are colored and written to stderr so they never mix with
command output on stdout. An optional log file receives everything.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import colorlog


ROOT_LOGGER = "namecheap_cli"

CONSOLE_FORMAT = "%(log_color)s%(levelname)-8s%(reset)s %(blue)s[%(name)s]%(reset)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def _console_handler(level: int) -> logging.Handler:
    handler = colorlog.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(colorlog.ColoredFormatter(CONSOLE_FORMAT, log_colors=LEVEL_COLORS))
    return handler


def _file_handler(log_file: Path) -> logging.Handler:
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logger(
    name: str = ROOT_LOGGER,
    level: str = "WARNING",
    log_file: Optional[Path] = None,
    console: bool = True
) -> logging.Logger:
    """
    Install the CLI's handlers on a logger.

    Called once per invocation from main(). Calling it again replaces
    the handlers instead of stacking them.

    Args:
        name: Logger to configure, the package root by default
        level: Threshold for stderr output (DEBUG ... CRITICAL)
        log_file: File that receives every record, DEBUG included
        console: Write records at or above ``level`` to stderr

    Returns:
        The configured logger
    """
    threshold = getattr(logging, level.upper())
    logger = logging.getLogger(name)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = []
    if console:
        handlers.append(_console_handler(threshold))
    if log_file:
        handlers.append(_file_handler(log_file))

    for handler in handlers:
        logger.addHandler(handler)

    # The file handler filters nothing, so the logger must let DEBUG through
    logger.setLevel(logging.DEBUG if log_file else threshold)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Module logger; children of the package root share its handlers."""
    return logging.getLogger(name)
