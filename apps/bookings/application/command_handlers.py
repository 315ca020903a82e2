"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- CreateBookingCommand: Create a new PENDING booking
- MarkBookingPaidCommand: Record a reported payment
- CancelBookingCommand: Cancel a booking
- ExpireBookingCommand: Expire an unpaid booking
- ExpireOverdueBookingsCommand: Expire every booking past its hold window
- UpdateBookingQuantitiesCommand: Change quantities and reprice (PENDING only)
- UpdateBookingMetadataCommand: Merge free-form metadata
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional
import logging

from django.conf import settings

from apps.bookings.domain.dates import (
    auto_calculate_dates,
    calculate_duration_in_days,
    calculate_end_date,
    now as utcnow,
    validate_date_range,
    validate_future_date,
    validate_minimum_duration,
)
from apps.bookings.domain.entities import Booking
from apps.bookings.domain.enums import BookingStatus, ItemType
from apps.bookings.domain.policy import (
    CreateBookingData,
    calculate_expiration_date,
    resolve_quantities,
    validate_booking_data,
)
from apps.bookings.domain.snapshot import PackageSnapshot, build_snapshot, validate_snapshot
from apps.pricing.engine import Quantities, calculate_price
from apps.pricing.validation import validate_pricing_breakdown
from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import StaleBookingError, StateTransitionError, ValidationError
from shared.domain.value_objects import DateRange

logger = logging.getLogger(__name__)


def _bookings_setting(name: str, default: Any) -> Any:
    value = getattr(settings, 'BOOKINGS', {}).get(name)
    return default if value in (None, '') else value


# ===== Commands =====

@dataclass
class CreateBookingCommand(CreateBookingData):
    """
    Command to create a new booking

    This is the primary entry point for creating bookings.
    """


@dataclass
class MarkBookingPaidCommand:
    """Command to record a payment reported by the payment provider"""
    booking_number: str
    payment_method: str = ''
    transaction_id: str = ''


@dataclass
class CancelBookingCommand:
    booking_number: str
    reason: str = ''


@dataclass
class ExpireBookingCommand:
    booking_number: str


@dataclass
class ExpireOverdueBookingsCommand:
    """Command run by the expiration sweep"""
    now: Optional[datetime] = None


@dataclass
class UpdateBookingQuantitiesCommand:
    """Fields left as None keep their current value"""
    booking_number: str
    number_of_persons: Optional[int] = None
    number_of_units: Optional[int] = None
    number_of_days: Optional[int] = None
    discount_percent: Optional[Decimal] = None


@dataclass
class UpdateBookingMetadataCommand:
    booking_number: str
    metadata: Dict[str, Any] = field(default_factory=dict)


# ===== Command Handlers =====

class BookingCommandHandler:
    """Shared wiring: repository plus the bus events are published to"""

    def __init__(self, booking_repo, message_bus=None):
        self.booking_repo = booking_repo
        self.message_bus = message_bus

    def _transition(self, booking_number: str, action: Callable[[Booking], Any]) -> Booking:
        """
        Load, apply ``action``, then persist with a conditional update

        The UPDATE only matches while the row still has the status read
        here; a concurrent change raises StaleBookingError.
        """
        with DjangoUnitOfWork(self.message_bus) as uow:
            booking = self.booking_repo.get_by_number(booking_number, lock=True)
            expected_status = booking.status
            if action(booking) is False:
                return booking
            self.booking_repo.save_transition(booking, expected_status)
            uow.collect_events(booking)
        return booking


class CreateBookingHandler(BookingCommandHandler):
    """
    Handler for CreateBooking command

    Flow: guest check -> request validation -> catalog lookup -> snapshot
    -> dates -> pricing -> atomic insert with conflict detection.
    """

    def __init__(self, booking_repo, catalog, guests, message_bus=None):
        super().__init__(booking_repo, message_bus)
        self.catalog = catalog
        self.guests = guests

    def handle(self, command: CreateBookingCommand) -> Booking:
        logger.info(
            f"Creating booking for {command.item_type} {command.item_id}, "
            f"guest {command.guest_id}"
        )

        validate_booking_data(command)

        guest = self.guests.get_contact(command.guest_id)
        if guest.is_expired:
            raise ValidationError('Guest session has expired', field='guest_id')

        item_type = ItemType(command.item_type)
        entry = self.catalog.get_entry(item_type, command.item_id)

        moment = utcnow()
        snapshot = build_snapshot(
            entry,
            locale=self._resolve_locale(command.locale or guest.locale or entry.locale),
            captured_at=moment,
        )
        validate_snapshot(snapshot)

        quantities = resolve_quantities(item_type, command)
        dates, quantities = self._resolve_dates(item_type, snapshot, command, quantities)

        pricing = calculate_price(
            snapshot,
            quantities,
            discount_percent=command.discount_percent,
            include_deposit=True,
        )
        validate_pricing_breakdown(pricing)

        expires_at = calculate_expiration_date(moment, int(_bookings_setting('HOLD_HOURS', 24)))

        with DjangoUnitOfWork(self.message_bus) as uow:
            booking = Booking.create(
                booking_number=self.booking_repo.next_booking_number(moment),
                guest_id=guest.id,
                snapshot=snapshot,
                quantities=quantities,
                pricing=pricing,
                dates=dates,
                locale=snapshot.locale,
                expires_at=expires_at,
                metadata=dict(command.metadata or {}),
            )
            self.booking_repo.add(booking)
            uow.collect_events(booking)

        logger.info(
            f"Booking created successfully: {booking.booking_number} "
            f"(ID: {booking.id}, total {pricing.final_total} {snapshot.currency})"
        )
        return booking

    @staticmethod
    def _resolve_locale(locale: Optional[str]) -> str:
        supported = _bookings_setting('SUPPORTED_LOCALES', ['en'])
        if locale in supported:
            return locale
        return _bookings_setting('DEFAULT_LOCALE', 'en')

    @staticmethod
    def _resolve_dates(item_type, snapshot, command, quantities: Quantities):
        """
        Build the booking's DateRange, if any

        Cars derive the end from number_of_days, packages from their
        duration; an explicit end date always wins. A start date with
        nothing to derive an end from books that single day.

        A dated car is billed for the days in its range; a number_of_days
        that disagrees with the range is rejected.
        """
        days = quantities.number_of_days
        if isinstance(snapshot, PackageSnapshot):
            days = snapshot.duration_days

        start_date, end_date = auto_calculate_dates(command.start_date, command.end_date, days)
        if start_date is None and end_date is None:
            return None, quantities

        if start_date is not None and end_date is None:
            end_date = calculate_end_date(start_date, 1)

        validate_date_range(start_date, end_date)
        validate_future_date(start_date)
        validate_minimum_duration(start_date, end_date, 1)

        if item_type == ItemType.CAR:
            range_days = calculate_duration_in_days(start_date, end_date)
            if quantities.number_of_days and quantities.number_of_days != range_days:
                raise ValidationError(
                    f'Number of days ({quantities.number_of_days}) does not match '
                    f'the date range ({range_days} day(s))',
                    field='number_of_days',
                )
            quantities = Quantities(number_of_days=range_days)
        return DateRange(start_date, end_date), quantities


class MarkBookingPaidHandler(BookingCommandHandler):
    """Handler for recording a payment (PENDING -> CONFIRMED)"""

    def handle(self, command: MarkBookingPaidCommand) -> Booking:
        logger.info(f"Marking booking {command.booking_number} as paid")
        booking = self._transition(
            command.booking_number,
            lambda b: b.confirm_payment(command.payment_method, command.transaction_id),
        )
        logger.info(f"Booking {booking.booking_number} confirmed successfully")
        return booking


class CancelBookingHandler(BookingCommandHandler):
    """Handler for cancelling booking"""

    def handle(self, command: CancelBookingCommand) -> Booking:
        logger.info(f"Cancelling booking {command.booking_number}, reason: {command.reason}")
        booking = self._transition(command.booking_number, lambda b: b.cancel(command.reason))
        logger.info(f"Booking {booking.booking_number} cancelled successfully")
        return booking


class ExpireBookingHandler(BookingCommandHandler):

    def handle(self, command: ExpireBookingCommand) -> Booking:
        booking = self._transition(command.booking_number, lambda b: b.expire())
        logger.info(f"Booking {booking.booking_number} expired")
        return booking


class ExpireOverdueBookingsHandler(BookingCommandHandler):
    """
    Expire every PENDING booking whose hold window has elapsed

    Each booking is expired in its own transaction; one that was paid or
    cancelled in the meantime is skipped.
    """

    def handle(self, command: ExpireOverdueBookingsCommand) -> List[str]:
        moment = command.now or utcnow()
        expired = []
        for booking_number in self.booking_repo.list_overdue_numbers(moment):
            try:
                self._transition(booking_number, lambda b: b.expire(moment))
            except (StaleBookingError, StateTransitionError) as e:
                logger.info(f"Skipping expiration of {booking_number}: {e}")
                continue
            expired.append(booking_number)

        if expired:
            logger.info(f"Expired {len(expired)} overdue bookings")
        return expired


class UpdateBookingQuantitiesHandler(BookingCommandHandler):
    """Reprice a PENDING booking from its own snapshot"""

    def handle(self, command: UpdateBookingQuantitiesCommand) -> Booking:
        with DjangoUnitOfWork(self.message_bus) as uow:
            booking = self.booking_repo.get_by_number(command.booking_number, lock=True)
            expected_status = booking.status
            if expected_status != BookingStatus.PENDING:
                raise ValidationError(
                    f'Cannot change quantities of a {expected_status.value} booking',
                    field='status',
                )

            current = booking.quantities
            requested = Quantities(
                number_of_persons=_pick(command.number_of_persons, current.number_of_persons),
                number_of_units=_pick(command.number_of_units, current.number_of_units),
                number_of_days=_pick(command.number_of_days, current.number_of_days),
            )
            validate_booking_data(CreateBookingData(
                guest_id=booking.guest_id,
                item_type=booking.item_type.value,
                item_id=booking.item_id,
                number_of_persons=requested.number_of_persons,
                number_of_units=requested.number_of_units,
                number_of_days=requested.number_of_days,
            ))
            quantities = resolve_quantities(booking.item_type, requested)
            if (
                booking.dates is not None
                and booking.item_type == ItemType.CAR
                and quantities.number_of_days != current.number_of_days
            ):
                raise ValidationError(
                    'Number of days of a dated car booking follows its date range',
                    field='number_of_days',
                )

            discount = _pick(command.discount_percent, booking.pricing.discount_percent)
            pricing = calculate_price(
                booking.snapshot,
                quantities,
                discount_percent=discount,
                include_deposit=booking.pricing.deposit is not None,
            )
            validate_pricing_breakdown(pricing)

            booking.apply_pricing(pricing, quantities)
            self.booking_repo.save_pricing(booking, expected_status)
            uow.collect_events(booking)

        logger.info(f"Booking {booking.booking_number} repriced: {pricing.final_total}")
        return booking


class UpdateBookingMetadataHandler(BookingCommandHandler):

    def handle(self, command: UpdateBookingMetadataCommand) -> Booking:
        with DjangoUnitOfWork(self.message_bus) as uow:
            booking = self.booking_repo.get_by_number(command.booking_number, lock=True)
            expected_status = booking.status
            booking.update_metadata(command.metadata)
            self.booking_repo.save_metadata(booking, expected_status)
            uow.collect_events(booking)
        return booking


def _pick(value, fallback):
    return fallback if value is None else value
