"""
Booking Domain Entities

Core business entities for the booking domain:
- Booking: Main aggregate representing a reservation of a catalog item

Status rules live in state.py and payment.py; this aggregate applies them
and records the matching domain events.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from apps.bookings.domain import payment, state
from apps.bookings.domain.dates import now as utcnow
from apps.bookings.domain.enums import BookingStatus, ItemType, PaymentStatus
from apps.bookings.domain.events import (
    BookingCancelled,
    BookingCreated,
    BookingExpired,
    PaymentConfirmed,
)
from apps.bookings.domain.snapshot import Snapshot
from apps.pricing.engine import PricingBreakdown, Quantities
from shared.domain.base import Aggregate
from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import DateRange


@dataclass(eq=False, kw_only=True)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Represents a guest's reservation of a package, activity or car.

    Key invariants:
    - Snapshot and pricing are frozen once the booking leaves PENDING
    - Status changes follow the state machine (PENDING -> CONFIRMED, ...)
    - Only PENDING/CONFIRMED bookings block the item's dates
    """

    # Booking identification
    booking_number: str  # Human-readable booking number (e.g., BKG-20250101-0001)

    # References
    guest_id: UUID

    # Priced item data captured at creation
    snapshot: Snapshot
    quantities: Quantities = field(default_factory=Quantities)
    pricing: PricingBreakdown

    dates: Optional[DateRange] = None
    locale: str = ''

    # Status tracking
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    expires_at: Optional[datetime] = None

    # Payment details
    payment_method: str = ''
    transaction_id: str = ''
    paid_at: Optional[datetime] = None

    # Cancellation / expiration details
    cancellation_reason: str = ''
    cancelled_at: Optional[datetime] = None
    expired_at: Optional[datetime] = None

    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, **kwargs) -> 'Booking':
        """
        Create a new PENDING booking

        Events: BookingCreated
        """
        booking = cls(**kwargs)
        booking.add_event(BookingCreated(
            aggregate_id=booking.id,
            **booking._event_fields(),
            start_date=booking.dates.start_date if booking.dates else None,
            end_date=booking.dates.end_date if booking.dates else None,
            final_total=booking.pricing.final_total,
            currency=booking.snapshot.currency,
            expires_at=booking.expires_at,
        ))
        return booking

    @property
    def item_type(self) -> ItemType:
        return self.snapshot.item_type

    @property
    def item_id(self) -> str:
        return self.snapshot.item_id

    def _event_fields(self) -> Dict[str, Any]:
        return {
            'booking_number': self.booking_number,
            'guest_id': self.guest_id,
            'item_type': self.item_type.value,
            'item_title': self.snapshot.title,
        }

    def confirm_payment(self, payment_method: str = '', transaction_id: str = '', moment: Optional[datetime] = None):
        """
        Record a reported payment (PENDING -> CONFIRMED)

        Events: PaymentConfirmed
        """
        moment = moment or utcnow()
        payment.validate_can_pay(self.status, self.payment_status, self.is_expired(moment))
        state.validate_transition(self.status, payment.STATUS_AFTER_PAYMENT)

        self.status = payment.STATUS_AFTER_PAYMENT
        self.payment_status = payment.PAYMENT_STATUS_AFTER_PAYMENT
        self.payment_method = payment_method or ''
        self.transaction_id = transaction_id or ''
        self.paid_at = moment
        self.expires_at = None
        self.touch(moment)

        self.add_event(PaymentConfirmed(
            aggregate_id=self.id,
            **self._event_fields(),
            amount=self.pricing.final_total,
            currency=self.snapshot.currency,
            payment_status=self.payment_status.value,
            payment_method=self.payment_method,
            transaction_id=self.transaction_id,
            paid_at=self.paid_at,
        ))

    def cancel(self, reason: str = '', moment: Optional[datetime] = None):
        """
        Cancel booking (PENDING/CONFIRMED -> CANCELLED)

        A paid booking is marked refunded.
        Events: BookingCancelled
        """
        if self.status == BookingStatus.CANCELLED:
            raise ValidationError('Booking is already cancelled', field='status')
        state.validate_transition(self.status, BookingStatus.CANCELLED)

        moment = moment or utcnow()
        previous_status = self.status
        refund_due = payment.can_refund(self.payment_status)

        self.status = BookingStatus.CANCELLED
        self.payment_status = payment.payment_status_after_cancellation(self.payment_status)
        self.cancellation_reason = reason or ''
        self.cancelled_at = moment
        self.touch(moment)

        self.add_event(BookingCancelled(
            aggregate_id=self.id,
            **self._event_fields(),
            previous_status=previous_status.value,
            payment_status=self.payment_status.value,
            reason=self.cancellation_reason,
            refund_due=refund_due,
        ))

    def expire(self, moment: Optional[datetime] = None) -> bool:
        """
        Expire booking (PENDING -> EXPIRED)

        Returns False when the booking was already expired.
        Events: BookingExpired
        """
        if self.status == BookingStatus.EXPIRED:
            return False
        state.validate_transition(self.status, BookingStatus.EXPIRED)

        moment = moment or utcnow()
        self.status = BookingStatus.EXPIRED
        self.expired_at = moment
        self.touch(moment)

        self.add_event(BookingExpired(
            aggregate_id=self.id,
            **self._event_fields(),
            expired_at=moment,
        ))
        return True

    def is_expired(self, moment: Optional[datetime] = None) -> bool:
        """PENDING booking whose hold window has elapsed"""
        if self.status != BookingStatus.PENDING or not self.expires_at:
            return False
        return (moment or utcnow()) > self.expires_at

    def can_be_cancelled(self) -> bool:
        return state.can_cancel(self.status)

    def apply_pricing(self, pricing: PricingBreakdown, quantities: Optional[Quantities] = None):
        """Replace quantities and pricing; allowed only while PENDING"""
        if self.status != BookingStatus.PENDING:
            raise ValidationError(
                f'Pricing is frozen once a booking is {self.status.value}',
                field='pricing',
            )
        self.pricing = pricing
        if quantities is not None:
            self.quantities = quantities
        self.touch()

    def update_metadata(self, metadata: Dict[str, Any]):
        if not state.can_modify(self.status):
            raise ValidationError(
                f'Cannot modify booking in status "{self.status.value}"',
                field='status',
            )
        self.metadata = {**self.metadata, **metadata}
        self.touch()

    @property
    def blocks_dates(self) -> bool:
        """Only PENDING and CONFIRMED bookings hold the item's dates"""
        return self.status in (BookingStatus.PENDING, BookingStatus.CONFIRMED)

    def __str__(self):
        return f"Booking {self.booking_number} ({self.status.value})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, booking_number={self.booking_number}, "
            f"status={self.status.value}, dates={self.dates})"
        )
