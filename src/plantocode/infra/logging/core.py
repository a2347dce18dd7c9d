from __future__ import annotations

"""
Logging Core Orchestrator.

Configures the root logger once per process. Records flow through a
QueueHandler to a QueueListener thread so that file writes never block
the caller.
"""

import atexit
import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from plantocode.infra.logging.config import _LEVEL_MAP, LoggingConfig
from plantocode.infra.logging.handlers import (
    create_rotating_file_handler,
    is_our_handler,
    tag_handler,
)

_CONFIGURED_FLAG_ATTR: str = "_plantocode_configured"
_QUEUE_LISTENER_ATTR: str = "_plantocode_queue_listener"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Configure the root logger idempotently using non-blocking I/O.

    Later calls are no-ops unless `force` is set, in which case the
    handlers installed by a previous call are replaced.

    Args:
        cfg: Logging settings.
        force: Rebuild the handlers even if already configured.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()

    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    try:
        level_int = parse_level(cfg.level)
        root.setLevel(level_int)

        shutdown_logging()

        handlers_list: List[logging.Handler] = []

        if cfg.console:
            sh = logging.StreamHandler(sys.stderr)
            sh.setLevel(level_int)
            sh.setFormatter(logging.Formatter(cfg.console_fmt))
            handlers_list.append(tag_handler(sh))

        if cfg.log_file:
            fh = create_rotating_file_handler(
                cfg.log_file,
                level_int,
                logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt),
                cfg.max_bytes,
                cfg.backup_count,
            )
            if fh:
                handlers_list.append(fh)

        if not handlers_list:
            return root

        log_queue: "queue.Queue[logging.LogRecord]" = queue.Queue(-1)
        queue_handler = tag_handler(QueueHandler(log_queue))

        listener = QueueListener(log_queue, *handlers_list, respect_handler_level=True)
        listener.start()

        root.addHandler(queue_handler)
        setattr(root, _QUEUE_LISTENER_ATTR, listener)
        setattr(root, _CONFIGURED_FLAG_ATTR, True)

        atexit.register(_stop_listener, listener)
        return root

    except Exception as e:
        # Emergency console so diagnostics are never lost entirely
        _remove_our_handlers(root)
        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(logging.Formatter("CRITICAL FALLBACK | %(levelname)s | %(message)s"))
        root.addHandler(tag_handler(sh))
        root.warning(f"Logging setup failed ({e}). Switched to emergency console.")
        return root


def shutdown_logging() -> None:
    """Flush and detach every handler installed by `configure_logging`."""
    root = logging.getLogger()
    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if listener is not None:
        _stop_listener(listener)
        setattr(root, _QUEUE_LISTENER_ATTR, None)
    _remove_our_handlers(root)
    setattr(root, _CONFIGURED_FLAG_ATTR, False)


def get_logger(name: str) -> logging.Logger:
    """Acquire a named logger (usually `__name__`)."""
    return logging.getLogger(name)


def parse_level(level: Optional[str]) -> int:
    """Convert a level name to its numeric constant, INFO when unknown."""
    if not level:
        return logging.INFO
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.INFO)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _remove_our_handlers(root: logging.Logger) -> None:
    for h in list(root.handlers):
        if is_our_handler(h):
            root.removeHandler(h)
            h.close()


def _stop_listener(listener: QueueListener) -> None:
    # stop() fails on a listener whose thread was already joined
    if getattr(listener, "_thread", None) is not None:
        listener.stop()
