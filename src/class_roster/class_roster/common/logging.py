"""Structured logging configuration using structlog.

JSON output for production, human-readable console output for development.
Modules log through get_logger() instead of print().
"""

from __future__ import annotations

import logging
import sys

import structlog


def setup_logging(json_output: bool = False, log_level: str = "INFO", *, cache_loggers: bool = True) -> None:
    """Configure structlog processors and output format.

    Args:
        json_output: If True, output JSON (production). If False, console format (dev).
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        cache_loggers: Freeze loggers (and their output stream) on first use.
            Disabled under test so captured stdout can change between tests.
    """
    numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=cache_loggers,
    )

    # Flask/werkzeug still log through stdlib logging.
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger for the calling module (resolved lazily on first use)."""
    return structlog.get_logger(name)
