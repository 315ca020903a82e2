import logging

from celery import shared_task
from django.apps import apps

from apps.notifications.types import NotificationEvent

logger = logging.getLogger(__name__)


@shared_task(name="notifications.send_notification_event")
def send_notification_event(payload):
    """Deliver a serialized NotificationEvent through the process dispatcher."""
    dispatcher = apps.get_app_config("notifications").dispatcher
    if dispatcher is None:
        logger.error("Notification dispatcher is not configured")
        return {"sent": False, "reason": "dispatcher_not_configured"}

    try:
        event = NotificationEvent.from_dict(payload)
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Invalid notification payload: {e}")
        return {"sent": False, "reason": "invalid_payload"}

    summary = dispatcher.send_event(event)
    if summary is None:
        return {"sent": False, "reason": "skipped"}
    return {"sent": summary.success_count > 0, **summary.to_dict()}
