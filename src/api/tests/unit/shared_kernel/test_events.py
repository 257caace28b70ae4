"""Unit tests for domain event serialization and dispatch."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from unittest.mock import MagicMock

import pytest
import structlog

from shared_kernel.events import (
    DomainEventDispatcher,
    LoggingEventDispatcher,
    serialize_event,
)


class Colour(StrEnum):
    RED = "red"


@dataclass(frozen=True)
class SomethingHappened:
    thing_id: str
    colour: Colour
    occurred_at: datetime


EVENT = SomethingHappened(
    thing_id="T-1",
    colour=Colour.RED,
    occurred_at=datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC),
)


class TestSerializeEvent:
    def test_serializes_fields_with_type_name(self):
        assert serialize_event(EVENT) == {
            "__type__": "SomethingHappened",
            "thing_id": "T-1",
            "colour": "red",
            "occurred_at": "2026-01-02T03:04:05+00:00",
        }

    def test_rejects_non_dataclass_events(self):
        with pytest.raises(TypeError):
            serialize_event({"thing_id": "T-1"})

    def test_rejects_dataclass_types(self):
        with pytest.raises(TypeError):
            serialize_event(SomethingHappened)


class TestLoggingEventDispatcher:
    def test_satisfies_dispatcher_protocol(self):
        assert isinstance(LoggingEventDispatcher(), DomainEventDispatcher)

    @pytest.mark.asyncio
    async def test_logs_each_event_in_order(self):
        logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        dispatcher = LoggingEventDispatcher(logger=logger)
        second = SomethingHappened("T-2", Colour.RED, EVENT.occurred_at)

        await dispatcher.dispatch([EVENT, second])

        assert logger.info.call_count == 2
        first_call, second_call = logger.info.call_args_list
        assert first_call.args == ("domain_event",)
        assert first_call.kwargs["event_type"] == "SomethingHappened"
        assert first_call.kwargs["thing_id"] == "T-1"
        assert second_call.kwargs["thing_id"] == "T-2"

    @pytest.mark.asyncio
    async def test_no_events_logs_nothing(self):
        logger = MagicMock(spec=structlog.stdlib.BoundLogger)

        await LoggingEventDispatcher(logger=logger).dispatch([])

        logger.info.assert_not_called()
