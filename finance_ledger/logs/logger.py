"""
Diagnostic Logging

DESIGN DECISION: Diagnostic logs go to stderr through structlog on top
of the standard logging module. Command output goes to stdout (or the
stats file) and never mixes with log lines.

This is operational logging only. The ledger entries themselves are the
record of what a user did; nothing here is an audit trail.
"""

import logging
import sys
from typing import Optional, TextIO

import structlog


def configure_logging(
    level: str = "WARNING",
    json_output: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure stdlib logging and structlog for the whole process.

    Args:
        level: Level name ("DEBUG", "INFO", ...). Unknown names fall back to WARNING.
        json_output: Render JSON lines instead of human-readable console lines.
        stream: Where log lines go. Defaults to stderr.
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.WARNING

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        stream=stream or sys.stderr,
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Named structlog logger."""
    return structlog.get_logger(name)
