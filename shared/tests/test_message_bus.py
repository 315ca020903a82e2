from dataclasses import dataclass

import pytest

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class SomethingHappened(DomainEvent):
    value: int


@dataclass
class DoSomething:
    value: int


def test_events_reach_every_handler_even_when_one_fails():
    bus = MessageBus()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.register_event_handler(SomethingHappened, broken)
    bus.register_event_handler(SomethingHappened, lambda event: received.append(event.value))

    failures = bus.publish_events([SomethingHappened(value=1), SomethingHappened(value=2)])

    assert received == [1, 2]
    assert failures == 2


def test_command_handler_result_and_errors_propagate():
    bus = MessageBus()
    bus.register_command_handler(DoSomething, lambda command: command.value * 2)

    assert bus.handle_command(DoSomething(21)) == 42

    with pytest.raises(ValueError):
        bus.register_command_handler(DoSomething, lambda command: None)


def test_unknown_command_is_rejected():
    with pytest.raises(ValueError):
        MessageBus().handle_command(DoSomething(1))


def test_event_type_and_envelope():
    event = SomethingHappened(value=3)

    assert event.event_type == "SomethingHappened"
    assert event.to_dict()["event_type"] == "SomethingHappened"
