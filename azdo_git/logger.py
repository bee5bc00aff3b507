"""Logging configuration for azdo-git.

Supports two logging formats:
- JSON logging (production): Structured logs for log aggregation systems
- Console logging (development): Human-readable logs with stacktraces

Configure via AZDO_LOG_FORMAT_JSON environment variable (default: True).
"""

import logging
import sys

import structlog

from azdo_git.config import Settings, settings


def setup_logging(
    log_level: str | None = None, config: Settings = settings
) -> structlog.stdlib.BoundLogger:
    """Configure structlog for the whole process.

    Args:
        log_level: Overrides the configured log level
        config: Settings to read the log level and format from

    Returns:
        Configured logger for azdo_git
    """
    level = logging.getLevelNamesMapping()[(log_level or config.log_level).upper()]

    renderer: structlog.typing.Processor
    if config.log_format_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
    return structlog.get_logger("azdo_git")
