"""
Centralized logging configuration for the CoinScope engine.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the package should use this
configuration to ensure consistent formatting and structured logging.
"""
import logging
import sys
from collections.abc import Sequence
from typing import Any, Optional, TextIO

import orjson
import structlog
from structlog.types import FilteringBoundLogger

from ..config.defaults import LoggingParams


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    quiet_loggers: Sequence[str] = LoggingParams.quiet_loggers,
    stream: Optional[TextIO] = None,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the dashboard engine.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON lines with structured tracebacks;
            otherwise human-readable console output
        include_timestamp: Include an ISO timestamp in log output
        include_caller: Include caller information (filename, line number)
        quiet_loggers: Stdlib loggers raised to WARNING, e.g. the HTTP client
        stream: Output stream, stdout by default
        extra_processors: Additional structlog processors to include
    """
    # Convert string level to logging constant
    log_level = getattr(logging, level.upper())
    stream = stream or sys.stdout

    # Configure standard library logging
    logging.basicConfig(
        level=log_level,
        stream=stream,
        format="%(message)s"  # structlog will handle formatting
    )
    for name in quiet_loggers:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    # Build processor chain
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    # JSON keeps tracebacks as data; the console renderer formats them itself
    if format_json:
        processors.append(structlog.processors.dict_tracebacks)
    processors.append(structlog.processors.UnicodeDecoder())

    # Add timestamp if requested
    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    # Add caller information if requested
    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    # Add any extra processors
    if extra_processors:
        processors.extend(extra_processors)

    # Add final formatting processor; colors only on a terminal
    if format_json:
        processors.append(structlog.processors.JSONRenderer(serializer=_orjson_dumps))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))

    # Configure structlog
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging_from_config(params: LoggingParams) -> None:
    """Configure logging from the `logging` section of the configuration."""
    configure_logging(
        level=params.level,
        format_json=params.format_json,
        include_caller=params.include_caller,
        quiet_loggers=params.quiet_loggers,
    )


def _orjson_dumps(event_dict: dict[str, Any], **kwargs: Any) -> str:
    return orjson.dumps(event_dict, default=str).decode("utf-8")


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_cache_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for snapshot cache state changes.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for the snapshot cache
    """
    return get_logger(name).bind(subsystem="snapshot_cache")


def get_view_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for dashboard state changes.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for dashboard state
    """
    return get_logger(name).bind(subsystem="dashboard_state")


def log_fetch_outcome(
    logger: FilteringBoundLogger,
    request_class: str,
    key: str,
    generation: int,
    outcome: str,
    stale: bool = False,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a resolved fetch with standardized format.

    Args:
        logger: Structlog logger instance
        request_class: Kind of request ("segment", "comparison")
        key: What was fetched (segment key, joined asset ids)
        generation: Generation token captured when the request was issued
        outcome: "loaded" or "failed"
        stale: True when the response was discarded as superseded
        context: Additional context data
    """
    bound_logger = logger.bind(
        request_class=request_class,
        key=key,
        generation=generation,
        outcome=outcome,
        stale=stale,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if stale:
        bound_logger.info("Discarded superseded response")
    elif outcome == "failed":
        bound_logger.warning("Fetch failed")
    else:
        bound_logger.info("Fetch applied")
