"""
Base Domain Classes

Building blocks reused by every bounded context:
- Entity: identity-based equality
- ValueObject: immutable, compared by value
- Aggregate: consistency boundary that records domain events
- DomainEvent: something that happened, published after commit
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import UUID, uuid4


def utcnow() -> datetime:
    """Aware UTC timestamp; every domain timestamp comes from here"""
    return datetime.now(timezone.utc)


@dataclass(kw_only=True)
class Entity(ABC):
    """
    Base class for entities

    Two entities are equal when their IDs are equal, whatever
    the state of their other attributes.
    """
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def touch(self, moment: datetime | None = None):
        """Refresh updated_at after a state change"""
        self.updated_at = moment or utcnow()


@dataclass(frozen=True)
class ValueObject(ABC):
    """Immutable object without identity"""
    pass


@dataclass(eq=False, kw_only=True)
class Aggregate(Entity):
    """
    Base class for aggregate roots

    Collects domain events while business methods run. The unit of work
    drains them and publishes them once the transaction has committed.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False, compare=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        """Copy of the pending events"""
        return list(self._events)


@dataclass(kw_only=True)
class DomainEvent:
    """
    Base class for domain events

    Subclasses add their own payload fields; the envelope fields
    below are keyword-only so subclasses can declare required fields.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utcnow)
    aggregate_id: UUID | None = None

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """Envelope for logging and serialization"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.event_type,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id else None,
        }
