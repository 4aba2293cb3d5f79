"""
Centralized logging configuration for the analytics pipeline.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the package should use this
configuration to ensure consistent formatting and structured logging.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    # Convert string level to logging constant
    log_level = getattr(logging, level.upper())

    # Configure standard library logging
    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    # Build processor chain
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    # Add final formatting processor
    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_pipeline_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound to the analytics pipeline subsystem.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for pipeline decisions
    """
    return get_logger(name).bind(subsystem="analytics")


def log_filter_decision(
    logger: FilteringBoundLogger,
    filter_name: str,
    applied: bool,
    value: Any,
    reason: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log whether a window or dimension filter was applied.

    Args:
        logger: Structlog logger instance
        filter_name: Name of the filter (period, agent, campaign_type)
        applied: Whether the filter restricted the collections
        value: Requested filter value
        reason: Why the filter was or was not applied
        context: Additional context data
    """
    bound_logger = logger.bind(
        filter_name=filter_name,
        filter_result="APPLIED" if applied else "PASS_THROUGH",
        filter_value=value,
        reason=reason,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if applied:
        bound_logger.debug("Filter applied")
    else:
        bound_logger.info("Filter passed through")


def log_report_summary(
    logger: FilteringBoundLogger,
    period: str,
    counts: dict[str, int],
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log the size of a computed report.

    Args:
        logger: Structlog logger instance
        period: Effective period code
        counts: Record counts that entered the report
        context: Additional context data
    """
    bound_logger = logger.bind(period=period, **counts)

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Analytics report computed")
