"""
Notification policy

Business rules deciding whether a lifecycle event is worth notifying
about, through which channels, and how urgently.
"""

from typing import List, Optional

from apps.notifications.types import (
    ChannelName,
    Notification,
    NotificationEvent,
    NotificationPriority,
    NotificationType,
)

PRIORITIES = {
    NotificationType.BOOKING_CONFIRMATION: NotificationPriority.HIGH,
    NotificationType.PAYMENT_CONFIRMATION: NotificationPriority.HIGH,
    NotificationType.BOOKING_CANCELLATION: NotificationPriority.NORMAL,
    NotificationType.BOOKING_EXPIRATION: NotificationPriority.LOW,
}


def should_send(event: NotificationEvent) -> bool:
    """
    Each type requires its context:
    - confirmation / cancellation: a booking number and a recipient
    - payment confirmation: payment_status actually "paid"
    - expiration: status actually "expired"
    """
    data = event.data or {}
    if not data.get('booking_number'):
        return False

    try:
        notification_type = NotificationType(event.type)
    except ValueError:
        return False

    if notification_type in (NotificationType.BOOKING_CONFIRMATION, NotificationType.BOOKING_CANCELLATION):
        return event.recipient is not None
    if notification_type == NotificationType.PAYMENT_CONFIRMATION:
        return data.get('payment_status') == 'paid'
    if notification_type == NotificationType.BOOKING_EXPIRATION:
        return data.get('status') == 'expired'
    return False


def get_channels(event: NotificationEvent) -> List[ChannelName]:
    """Channels the recipient has contact data for; e-mail when none qualifies."""
    recipient = event.recipient
    channels = []
    if recipient is not None and recipient.email:
        channels.append(ChannelName.EMAIL)
    if recipient is not None and recipient.phone:
        channels.append(ChannelName.SMS)
    return channels or [ChannelName.EMAIL]


def get_priority(notification_type: NotificationType) -> NotificationPriority:
    return PRIORITIES.get(notification_type, NotificationPriority.NORMAL)


def process_event(event: NotificationEvent) -> Optional[Notification]:
    """Notification ready to send, or None when the policy drops the event"""
    if not should_send(event):
        return None

    channels = list(event.channels) if event.channels else get_channels(event)
    if not channels:
        return None

    return Notification(
        type=NotificationType(event.type),
        recipient=event.recipient,
        data=event.data,
        channels=channels,
        priority=get_priority(NotificationType(event.type)),
        metadata=event.metadata,
    )
