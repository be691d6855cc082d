"""
Centralized structlog configuration for the feed publisher.

Logs are JSON lines on stderr with ISO timestamps and environment
context so cron/worker output can be aggregated alongside other services.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

from .config import settings


def _normalize_log_level(level: str | None, environment: str) -> int:
    env = environment.lower()
    if level:
        normalized = level.strip().upper()
    else:
        normalized = "INFO" if env == "production" else "DEBUG"
    return logging._nameToLevel.get(normalized, logging.INFO)


def configure_logging(stream: TextIO | None = None) -> None:
    """Configure structlog with JSON output on stderr.

    stdout is reserved for the status lines the CLI and the manual
    trigger capture.
    """
    resolved_level = _normalize_log_level(settings.log_level, settings.environment)
    logging.basicConfig(level=resolved_level)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.EventRenamer("message"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolved_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
    )


configure_logging()

logger = structlog.get_logger("gameday-publisher").bind(
    service="gameday-publisher",
    environment=settings.environment,
)
