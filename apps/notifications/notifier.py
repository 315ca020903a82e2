"""Hands NotificationEvents to the Celery task without blocking the caller."""

import logging

from apps.notifications.types import NotificationEvent

logger = logging.getLogger(__name__)


class CeleryNotifier:

    def notify(self, event: NotificationEvent) -> None:
        from apps.notifications.tasks import send_notification_event

        try:
            send_notification_event.delay(event.to_dict())
        except Exception as e:
            logger.error(f"Failed to enqueue {event.type.value} notification: {e}", exc_info=True)
