from dataclasses import dataclass

import pytest

from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork
from shared.domain.base import Aggregate, DomainEvent


@dataclass(kw_only=True)
class Renamed(DomainEvent):
    name: str


@dataclass(eq=False, kw_only=True)
class Thing(Aggregate):
    name: str = ""

    def rename(self, name):
        self.name = name
        self.add_event(Renamed(aggregate_id=self.id, name=name))


@pytest.fixture
def published():
    received = []
    bus = MessageBus()
    bus.register_event_handler(Renamed, lambda event: received.append(event.name))
    return bus, received


@pytest.mark.django_db
def test_events_published_only_after_commit(published, django_capture_on_commit_callbacks):
    bus, received = published
    thing = Thing()

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with DjangoUnitOfWork(bus) as uow:
            thing.rename("first")
            uow.collect_events(thing)
            assert received == []

    assert len(callbacks) == 1
    assert received == ["first"]
    assert thing.events == []


@pytest.mark.django_db
def test_events_dropped_on_rollback(published, django_capture_on_commit_callbacks):
    bus, received = published
    thing = Thing()

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(RuntimeError):
            with DjangoUnitOfWork(bus) as uow:
                thing.rename("lost")
                uow.collect_events(thing)
                raise RuntimeError("boom")

    assert callbacks == []
    assert received == []


@pytest.mark.django_db
def test_publish_failure_is_contained(django_capture_on_commit_callbacks):
    class BrokenBus(MessageBus):
        def publish_events(self, events):
            raise RuntimeError("bus down")

    bus = BrokenBus()
    thing = Thing()

    with django_capture_on_commit_callbacks(execute=True):
        with DjangoUnitOfWork(bus) as uow:
            thing.rename("x")
            uow.collect_events(thing)
