from __future__ import annotations

"""
Logging Handler Factories.

Tags the handlers created by this package so that reconfiguration only
removes its own handlers and leaves library or test handlers alone.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

_HANDLER_TAG_ATTR: str = "_plantocode_handler"


def tag_handler(handler: logging.Handler) -> logging.Handler:
    """Mark `handler` as owned by this package and return it."""
    setattr(handler, _HANDLER_TAG_ATTR, True)
    return handler


def is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def create_rotating_file_handler(
        log_file: str,
        level_int: int,
        formatter: logging.Formatter,
        max_bytes: int,
        backup_count: int,
) -> Optional[RotatingFileHandler]:
    """
    Build a RotatingFileHandler, or None if the file cannot be opened.

    Args:
        log_file: Target path for the log file.
        level_int: Numeric logging level.
        formatter: Formatter for file records.
        max_bytes: Rollover threshold in bytes.
        backup_count: Number of archived files to keep.
    """
    try:
        parent = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(parent, exist_ok=True)
        fh = RotatingFileHandler(
            log_file,
            maxBytes=int(max_bytes),
            backupCount=int(backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Cannot open log file '{log_file}': {e}\n")
        return None

    fh.setLevel(level_int)
    fh.setFormatter(formatter)
    tag_handler(fh)
    return fh
