"""Plain-text message bodies per notification type."""

from typing import Any, Dict

from apps.notifications.types import Notification, NotificationType

SUBJECTS = {
    NotificationType.BOOKING_CONFIRMATION: 'Booking Confirmation',
    NotificationType.PAYMENT_CONFIRMATION: 'Payment Confirmation',
    NotificationType.BOOKING_CANCELLATION: 'Booking Cancellation',
    NotificationType.BOOKING_EXPIRATION: 'Booking Expired',
}

NOT_AVAILABLE = 'N/A'


def _value(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return NOT_AVAILABLE if value in (None, '') else str(value)


def _amount(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value in (None, ''):
        return NOT_AVAILABLE
    currency = data.get('currency') or ''
    return f"{value} {currency}".strip()


def build_subject(notification: Notification, prefix: str = '') -> str:
    subject = SUBJECTS.get(notification.type, 'Notification')
    return f"{prefix} {subject}".strip() if prefix else subject


def build_email_body(notification: Notification) -> str:
    data = notification.data
    lines = [f"Hello {notification.recipient.display_name},", ""]

    if notification.type == NotificationType.BOOKING_CONFIRMATION:
        lines += [
            "Your booking has been received and is awaiting payment.",
            "",
            f"Booking Number: {_value(data, 'booking_number')}",
            f"Item: {_value(data, 'item_title')}",
            f"Start Date: {_value(data, 'start_date')}",
            f"End Date: {_value(data, 'end_date')}",
            f"Total Amount: {_amount(data, 'final_total')}",
            f"Pay Before: {_value(data, 'expires_at')}",
        ]
    elif notification.type == NotificationType.PAYMENT_CONFIRMATION:
        lines += [
            "Your payment has been confirmed!",
            "",
            f"Booking Number: {_value(data, 'booking_number')}",
            f"Amount Paid: {_amount(data, 'amount')}",
            f"Payment Date: {_value(data, 'paid_at')}",
        ]
    elif notification.type == NotificationType.BOOKING_CANCELLATION:
        lines += [
            "Your booking has been cancelled.",
            "",
            f"Booking Number: {_value(data, 'booking_number')}",
        ]
        if data.get('reason'):
            lines.append(f"Reason: {data['reason']}")
        if data.get('refund_due'):
            lines.append("A refund of your payment has been initiated.")
    elif notification.type == NotificationType.BOOKING_EXPIRATION:
        lines += [
            "Your booking has expired.",
            "",
            f"Booking Number: {_value(data, 'booking_number')}",
            "Expiration Reason: Payment not received in time",
        ]
    else:
        lines.append("You have a new notification.")

    lines += ["", "Best regards,", "The Bookings Team"]
    return "\n".join(lines)


def build_sms_text(notification: Notification) -> str:
    number = _value(notification.data, 'booking_number')
    return f"{SUBJECTS.get(notification.type, 'Notification')}: {number}"
