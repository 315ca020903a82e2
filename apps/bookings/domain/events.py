"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class BookingEvent(DomainEvent):
    """Fields every booking event carries for downstream handlers"""
    booking_number: str
    guest_id: UUID
    item_type: str
    item_title: str

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            'booking_number': self.booking_number,
            'guest_id': str(self.guest_id),
            'item_type': self.item_type,
            'item_title': self.item_title,
        })
        return data


@dataclass(kw_only=True)
class BookingCreated(BookingEvent):
    """
    Event: A new booking was created (PENDING)

    Triggers:
    - Send booking confirmation with payment instructions to the guest
    """
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    final_total: Decimal
    currency: str
    expires_at: Optional[datetime] = None


@dataclass(kw_only=True)
class PaymentConfirmed(BookingEvent):
    """
    Event: Payment recorded (PENDING -> CONFIRMED)

    Triggers:
    - Send payment receipt to the guest
    """
    amount: Decimal
    currency: str
    payment_status: str
    payment_method: str = ''
    transaction_id: str = ''
    paid_at: Optional[datetime] = None


@dataclass(kw_only=True)
class BookingCancelled(BookingEvent):
    """
    Event: Booking cancelled (PENDING/CONFIRMED -> CANCELLED)

    Triggers:
    - Send cancellation notice, mentioning the refund when one is due
    """
    previous_status: str
    payment_status: str
    reason: str = ''
    refund_due: bool = False


@dataclass(kw_only=True)
class BookingExpired(BookingEvent):
    """
    Event: Hold window elapsed without payment (PENDING -> EXPIRED)

    Triggers:
    - Send expiration notice to the guest
    """
    expired_at: Optional[datetime] = None
