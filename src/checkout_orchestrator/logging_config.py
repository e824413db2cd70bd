"""Structured logging configuration using structlog."""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from checkout_orchestrator.config import settings


def add_checkout_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Expose the orchestrator's checkout ID as ``correlation_id``."""
    checkout_id = event_dict.get("checkout_id")
    if checkout_id and "correlation_id" not in event_dict:
        event_dict["correlation_id"] = checkout_id
    return event_dict


def configure_logging(
    log_level: str | None = None,
    format_as_json: bool | None = None,
    include_correlation_id: bool = True,
) -> None:
    """
    Configure structured logging for the host application.

    The library itself never calls this; hosts call it once at startup.

    Args:
        log_level: Logging level; defaults to ``settings.log_level``
        format_as_json: JSON output; defaults to True outside development
        include_correlation_id: Copy each checkout ID into ``correlation_id``
    """
    if log_level is None:
        log_level = "DEBUG" if settings.debug else settings.log_level
    if format_as_json is None:
        format_as_json = settings.environment != "development"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if include_correlation_id:
        processors.append(add_checkout_id)

    if format_as_json:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for ``name`` (typically ``__name__``)."""
    return structlog.get_logger(name)
