"""
Logging setup.

The package logger "tsec_scraper" gets a rich console handler (INFO, DEBUG
when DEBUG=1) and, unless LOG_TO_FILE=0, a per-run file under the logs
directory that always records DEBUG, including full upload payloads.
Module loggers propagate to it.

Usage:
    from tsec_scraper.logger import get_logger
    logger = get_logger(__name__)
    logger.info("Found 12 ward button(s)")
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler

from .config import get_config

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER = "tsec_scraper"


def setup_logger(
    name: str = ROOT_LOGGER,
    log_dir: Optional[Path] = None,
    debug: Optional[bool] = None,
    log_to_file: Optional[bool] = None,
) -> logging.Logger:
    """
    Attach console (and file) handlers to a logger.

    Only the package logger is normally set up this way; module loggers
    below it have no handlers of their own and propagate to it.

    Args:
        name: Logger name
        log_dir: Log file directory (default: config.logs_dir)
        debug: Console level DEBUG instead of INFO (default: config.debug)
        log_to_file: Also write the run log file (default: config.log_to_file)

    Returns:
        The configured logger; already-configured loggers are returned as is
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    config = get_config()
    debug = config.debug if debug is None else debug
    log_dir = config.logs_dir if log_dir is None else Path(log_dir)
    log_to_file = config.log_to_file if log_to_file is None else log_to_file

    # Handlers do the filtering
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    console_handler = RichHandler(rich_tracebacks=True, show_path=False)
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.addHandler(console_handler)

    if log_to_file:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"tsec_{datetime.now():%Y%m%d_%H%M%S}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Logger for `name`, placed under the package logger.

    Names outside the package ("VoterListExtractor") are prefixed with
    "tsec_scraper." so every record reaches the one set of handlers.
    """
    setup_logger(ROOT_LOGGER)
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
