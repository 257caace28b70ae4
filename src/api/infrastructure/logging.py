"""Structlog configuration for the Bulwark API.

Every event carries ``service="bulwark-api"`` and any request-scoped values
bound through ``structlog.contextvars``, so scope decisions logged by the
probes can be correlated with the tenant that triggered them.
"""

import logging
import os
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

SERVICE_NAME = "bulwark-api"


def add_service_name(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def resolve_log_level(log_level: str) -> int:
    """Map a level name to its numeric value; unknown names mean INFO."""
    level = logging.getLevelName(log_level.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def wants_colors() -> bool:
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    return force_color or sys.stdout.isatty()


def build_processors(use_colors: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if use_colors:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.extend(
            [
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ]
        )
    return processors


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structlog for the service.

    Colored console output is used in a TTY or when FORCE_COLOR is set;
    otherwise events are rendered as JSON lines.
    """
    structlog.configure(
        processors=build_processors(wants_colors()),
        wrapper_class=structlog.make_filtering_bound_logger(
            resolve_log_level(log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
