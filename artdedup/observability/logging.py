"""Structured logging configuration for the similarity engine.

Every entry carries the ID of the duplicate check that emitted it, so all
per-candidate scoring events of one check can be grouped together.

Usage:
    import structlog
    from artdedup.observability.logging import configure_logging

    # Configure at application startup
    configure_logging(level="INFO")

    logger = structlog.get_logger()
    logger.info("duplicate_check_complete", candidates=12)

    # {"event": "duplicate_check_complete", "candidates": 12,
    #  "check_id": "abc-123", "level": "info", ...}
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, WrappedLogger

from artdedup.observability.context import get_check_id


def add_check_id_processor(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that adds check_id to log entries.

    Uses "none" when no duplicate check is in progress.
    """
    check_id = get_check_id()
    event_dict["check_id"] = check_id if check_id else "none"
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the engine.

    Args:
        level: Logging level name; unknown names fall back to INFO.
        json_output: JSON lines when True, coloured console output otherwise.
        add_timestamp: Add an ISO timestamp to each entry.

    Example:
        # Import pipeline feeding a log aggregator
        configure_logging(level="INFO", json_output=True)

        # Tuning weights locally, per-candidate scores visible
        configure_logging(level="DEBUG", json_output=False)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_check_id_processor,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    # Scoring output goes to stdout, logs stay on stderr
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
