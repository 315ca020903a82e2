"""Booking service: the entry point callers use for every booking operation."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from apps.bookings.application.command_handlers import (
    CancelBookingCommand,
    CreateBookingCommand,
    ExpireBookingCommand,
    ExpireOverdueBookingsCommand,
    MarkBookingPaidCommand,
    UpdateBookingMetadataCommand,
    UpdateBookingQuantitiesCommand,
)
from apps.bookings.domain.entities import Booking
from shared.domain.exceptions import StaleBookingError, StateTransitionError

logger = logging.getLogger(__name__)


class BookingService:
    """
    Facade over the booking commands and read queries

    Writes go through the message bus so each command runs in its own
    unit of work; reads go straight to the repository.
    """

    def __init__(self, message_bus, booking_repo):
        self.message_bus = message_bus
        self.booking_repo = booking_repo

    # ===== Commands =====

    def create_booking(self, data: CreateBookingCommand | None = None, **fields) -> Booking:
        command = data if data is not None else CreateBookingCommand(**fields)
        return self.message_bus.handle_command(command)

    def mark_as_paid(self, booking_number: str, payment_method: str = '', transaction_id: str = '') -> Booking:
        return self.message_bus.handle_command(
            MarkBookingPaidCommand(booking_number, payment_method, transaction_id)
        )

    def cancel_booking(self, booking_number: str, reason: str = '') -> Booking:
        return self.message_bus.handle_command(CancelBookingCommand(booking_number, reason))

    def expire_booking(self, booking_number: str) -> Booking:
        return self.message_bus.handle_command(ExpireBookingCommand(booking_number))

    def update_booking_quantities(self, booking_number: str, **quantities) -> Booking:
        return self.message_bus.handle_command(UpdateBookingQuantitiesCommand(booking_number, **quantities))

    def update_booking_metadata(self, booking_number: str, metadata: Dict[str, Any]) -> Booking:
        return self.message_bus.handle_command(UpdateBookingMetadataCommand(booking_number, metadata))

    def expire_overdue_bookings(self, now: Optional[datetime] = None) -> List[str]:
        return self.message_bus.handle_command(ExpireOverdueBookingsCommand(now))

    # ===== Queries =====

    def get_booking(self, booking_number: str) -> Booking:
        """Read a booking, expiring it first if its hold window has elapsed"""
        booking = self.booking_repo.get_by_number(booking_number)
        if not booking.is_expired():
            return booking

        try:
            return self.expire_booking(booking_number)
        except (StaleBookingError, StateTransitionError):
            logger.info(f"Booking {booking_number} changed while expiring lazily; reloading")
            return self.booking_repo.get_by_number(booking_number)

    def list_guest_bookings(self, guest_id) -> List[Booking]:
        return self.booking_repo.list_for_guest(guest_id)

    def get_statistics(self) -> Dict[str, Any]:
        return self.booking_repo.statistics()
