"""
Unit of Work

Wraps a database transaction and publishes the domain events collected
from aggregates only after that transaction has committed.
"""

from typing import List, Optional
import logging

from django.db import transaction

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork:
    """
    Transaction boundary for one command

    Usage:
        with DjangoUnitOfWork(bus) as uow:
            booking = repository.get_by_number(number)
            booking.confirm_payment(...)
            repository.save_transition(booking, expected_status)
            uow.collect_events(booking)
        # events reach the bus once the outer transaction commits

    Leaving the block with an exception rolls the transaction back and
    drops the collected events; nothing is published.
    """

    def __init__(self, message_bus: Optional[MessageBus] = None):
        self._bus = message_bus
        self._pending: List[DomainEvent] = []
        self._atomic = None

    def __enter__(self):
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self._schedule_publication()
            else:
                self._discard()
        finally:
            atomic, self._atomic = self._atomic, None
            if atomic is not None:
                atomic.__exit__(exc_type, exc_val, exc_tb)

    def collect_events(self, aggregate):
        """Move pending events from an aggregate into this unit of work"""
        drained = aggregate.events
        if not drained:
            return
        aggregate.clear_events()
        self._pending.extend(drained)
        logger.debug(f"{aggregate.__class__.__name__} {aggregate.id}: {len(drained)} events pending")

    def _schedule_publication(self):
        events, self._pending = self._pending, []
        if not events or self._bus is None:
            return
        logger.debug(f"Publishing {len(events)} events on commit")
        transaction.on_commit(lambda: self._publish(events))

    def _discard(self):
        if self._pending:
            logger.warning(f"Transaction rolled back, dropping {len(self._pending)} events")
        self._pending = []

    def _publish(self, events: List[DomainEvent]):
        try:
            self._bus.publish_events(events)
        except Exception as e:
            # The state change is already durable; publishing is best-effort.
            logger.error(f"Error publishing events: {e}", exc_info=True)
