"""Logging configuration for the MASIC results merger."""

import logging
import sys
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "masic_merger"

LOG_FILE_FORMAT = "%(asctime)s\t%(levelname)s\t%(message)s"
LOG_FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _console_level(verbose: int) -> int:
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(verbose: int = 0, log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure console logging and, optionally, a log file.

    Console messages follow the verbosity level.  The log file records every
    message at INFO or above (DEBUG with -vv), whatever the console level, so
    a run can be reviewed after the fact.  Calling this again replaces the
    previous log file.

    Args:
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG)
        log_file: Path of a tab-delimited log file to append to

    Returns:
        The package logger
    """
    console_level = _console_level(verbose)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    logging.basicConfig(
        level=console_level,
        format="%(levelname)s: %(message)s",
        handlers=[console_handler],
    )

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
        logger.removeHandler(handler)
        handler.close()

    if log_file is None:
        logger.setLevel(console_level)
        return logger

    file_level = min(console_level, logging.INFO)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT, datefmt=LOG_FILE_DATE_FORMAT))
    logger.addHandler(file_handler)
    logger.setLevel(file_level)

    logger.info(f"Logging to {log_file}")
    return logger
