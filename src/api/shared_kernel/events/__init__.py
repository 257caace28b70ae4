"""Domain event dispatch for the shared kernel.

Write operations return the events they produced. Application services pass
them to a :class:`DomainEventDispatcher` once the transaction has committed.
"""

from shared_kernel.events.dispatcher import (
    DomainEventDispatcher,
    LoggingEventDispatcher,
    serialize_event,
)

__all__ = [
    "DomainEventDispatcher",
    "LoggingEventDispatcher",
    "serialize_event",
]
