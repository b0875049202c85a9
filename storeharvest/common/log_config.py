"""
Logging setup for the scrape and export scripts.

All package loggers hang off the "storeharvest" logger. Log records go to
stderr; stdout carries the scrape summary and export messages.
"""

import logging
import sys

LOGGER_NAME = "storeharvest"
LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Attach a stderr handler to the package logger.

    Safe to call more than once: the previous handler is replaced.

    Args:
        verbose: Log DEBUG (stream events, unit fallbacks)
        quiet: Log only warnings and errors (verbose wins if both are set)
    """
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(level)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
