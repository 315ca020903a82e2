from unittest.mock import patch

from django.apps import apps

from apps.notifications.notifier import CeleryNotifier
from apps.notifications.tasks import send_notification_event
from apps.notifications.types import NotificationEvent, NotificationType, Recipient


def payload(**data):
    data.setdefault("booking_number", "BKG-20250101-0001")
    return NotificationEvent(
        type=NotificationType.PAYMENT_CONFIRMATION,
        recipient=Recipient(email="guest@example.com", name="Alice"),
        data=data,
    ).to_dict()


def test_task_sends_through_configured_dispatcher(mailoutbox):
    result = send_notification_event(payload(payment_status="paid", amount="99.00", currency="EUR"))

    assert result["sent"] is True
    assert result["success"] == 1
    assert mailoutbox[0].subject.endswith("Payment Confirmation")
    assert "99.00 EUR" in mailoutbox[0].body


def test_task_reports_skipped_events(mailoutbox):
    result = send_notification_event(payload(payment_status="unpaid"))

    assert result == {"sent": False, "reason": "skipped"}
    assert mailoutbox == []


def test_task_rejects_malformed_payload():
    assert send_notification_event({"type": "unknown"}) == {"sent": False, "reason": "invalid_payload"}


def test_dispatcher_built_at_startup():
    dispatcher = apps.get_app_config("notifications").dispatcher

    assert dispatcher.channel_names() == ["email", "sms"]


def test_notifier_enqueues_serialized_event():
    event = NotificationEvent.from_dict(payload(payment_status="paid"))

    with patch("apps.notifications.tasks.send_notification_event.delay") as delay:
        CeleryNotifier().notify(event)

    delay.assert_called_once_with(event.to_dict())


def test_notifier_swallows_broker_errors():
    event = NotificationEvent.from_dict(payload(payment_status="paid"))

    with patch("apps.notifications.tasks.send_notification_event.delay", side_effect=ConnectionError("broker down")):
        CeleryNotifier().notify(event)
