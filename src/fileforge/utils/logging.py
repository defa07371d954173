"""Contains logging related utility functions.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

DEFAULT_PREFIX = "fileforge"

# Libraries that log every HTTP connection or image plugin probe.
NOISY_LOGGERS = ("urllib3", "requests", "PIL")

_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
_DEBUG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure(log_level: int, log_path: Path | None = None, prefix: str = DEFAULT_PREFIX) -> logging.Logger:
    """Configure the fileforge logger for a command-line run.

    Console output goes to stderr; stdout is left to the command's result (the
    saved path or the result location). Below DEBUG the HTTP and imaging
    libraries are limited to warnings, so `--verbose` is the only way to see
    their per-request lines. At DEBUG the logger name is added to each record
    to tell poller progress apart from transport logs.

    Args:
        log_level: The desired verbosity level.
        log_path: Optional file that receives the same records.
        prefix: The name of the logger to configure.
    """
    logger = logging.getLogger(prefix)

    # Reset to a known state so repeated runs in one process do not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    for filter in list(logger.filters):
        logger.removeFilter(filter)

    logger.setLevel(log_level)
    logger.propagate = False

    debug = log_level <= logging.DEBUG
    formatter = logging.Formatter(_DEBUG_FORMAT if debug else _FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    third_party_level = logging.DEBUG if debug else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    return logger
