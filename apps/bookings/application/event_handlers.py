"""
Booking Event Handlers

Translate committed booking events into NotificationEvents. Handlers run
after the transaction commits; any error here is contained by the
message bus and never reaches the booking operation.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict

from apps.bookings.domain.events import (
    BookingCancelled,
    BookingCreated,
    BookingEvent,
    BookingExpired,
    PaymentConfirmed,
)
from apps.notifications.types import NotificationEvent, NotificationType, Recipient

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = {
    BookingCreated: NotificationType.BOOKING_CONFIRMATION,
    PaymentConfirmed: NotificationType.PAYMENT_CONFIRMATION,
    BookingCancelled: NotificationType.BOOKING_CANCELLATION,
    BookingExpired: NotificationType.BOOKING_EXPIRATION,
}


def _json_value(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def notification_data(event: BookingEvent) -> Dict[str, Any]:
    """Event payload as JSON-ready notification data"""
    data = {key: _json_value(value) for key, value in event.to_dict().items()}

    if isinstance(event, BookingCreated):
        data.update({
            'status': 'pending',
            'start_date': _json_value(event.start_date),
            'end_date': _json_value(event.end_date),
            'final_total': _json_value(event.final_total),
            'currency': event.currency,
            'expires_at': _json_value(event.expires_at),
        })
    elif isinstance(event, PaymentConfirmed):
        data.update({
            'status': 'confirmed',
            'payment_status': event.payment_status,
            'amount': _json_value(event.amount),
            'currency': event.currency,
            'payment_method': event.payment_method,
            'paid_at': _json_value(event.paid_at),
        })
    elif isinstance(event, BookingCancelled):
        data.update({
            'status': 'cancelled',
            'previous_status': event.previous_status,
            'payment_status': event.payment_status,
            'reason': event.reason,
            'refund_due': event.refund_due,
        })
    elif isinstance(event, BookingExpired):
        data.update({
            'status': 'expired',
            'expired_at': _json_value(event.expired_at),
        })
    return data


class BookingNotificationHandler:
    """
    Event handler: booking event -> NotificationEvent -> notifier

    ``guests`` resolves contact data, ``notifier`` hands the event to the
    delivery pipeline (by default a Celery task).
    """

    def __init__(self, guests, notifier):
        self.guests = guests
        self.notifier = notifier

    def __call__(self, event: BookingEvent):
        notification_type = NOTIFICATION_TYPES.get(type(event))
        if notification_type is None:
            return

        contact = self.guests.get_contact(event.guest_id)
        notification = NotificationEvent(
            type=notification_type,
            recipient=Recipient(
                email=contact.email,
                phone=contact.phone,
                name=contact.name or None,
                locale=contact.locale,
            ),
            data=notification_data(event),
            metadata={'event_id': str(event.event_id)},
        )
        logger.info(f"Queueing {notification_type.value} notification for {event.booking_number}")
        self.notifier.notify(notification)
