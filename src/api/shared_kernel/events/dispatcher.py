"""Domain event dispatcher port and its structlog-backed default."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Protocol, runtime_checkable

import structlog


def serialize_event(event: Any) -> dict[str, Any]:
    """Convert a dataclass domain event to a JSON-serializable dictionary.

    Returns:
        The event fields plus a ``__type__`` key naming the event class.
    """
    if not is_dataclass(event) or isinstance(event, type):
        raise TypeError(f"Domain events must be dataclass instances, got {event!r}")

    data = asdict(event)
    data["__type__"] = type(event).__name__

    for key, value in data.items():
        if isinstance(value, datetime):
            data[key] = value.isoformat()
        elif isinstance(value, Enum):
            data[key] = value.value

    return data


@runtime_checkable
class DomainEventDispatcher(Protocol):
    """Publishes committed domain events to interested parties."""

    async def dispatch(self, events: Sequence[Any]) -> None:
        """Publish ``events`` in the order they were produced."""
        ...


class LoggingEventDispatcher:
    """Dispatcher that records every domain event as a structured log line."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    async def dispatch(self, events: Sequence[Any]) -> None:
        for event in events:
            payload = serialize_event(event)
            event_type = payload.pop("__type__")
            self._logger.info("domain_event", event_type=event_type, **payload)
