"""Structured logging setup.

Library modules call `structlog.get_logger()` and log snake_case events with
key/value context. The CLI calls `configure_logging` once; structlog renders
each event and hands it to the stdlib `docrag` logger, whose handler writes to
stderr so logs never mix with answers printed on stdout.
"""

from __future__ import annotations

import logging

import structlog

LOGGER_NAME = "docrag"


def configure_logging(verbose: int = 0, json_logs: bool = False) -> None:
    """
    Configure structlog (through stdlib logging) for the process.

    Args:
        verbose: 0 = warnings only, 1 = info, 2+ = debug.
        json_logs: Render JSON lines instead of the console format.
    """
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger(LOGGER_NAME)
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
