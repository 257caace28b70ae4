"""Shared infrastructure dependencies.

Provides only infrastructure-level resources. Does NOT import from bounded
contexts to maintain DDD boundaries.
"""

from functools import lru_cache

from shared_kernel.events import DomainEventDispatcher, LoggingEventDispatcher


@lru_cache
def get_event_dispatcher() -> DomainEventDispatcher:
    """Get the application-wide domain event dispatcher (singleton)."""
    return LoggingEventDispatcher()
