from types import SimpleNamespace

import pytest

from apps.notifications.channels import BaseChannel, EmailChannel
from apps.notifications.dispatcher import NotificationDispatcher, build_dispatcher
from apps.notifications.types import (
    ChannelName,
    NotificationEvent,
    NotificationType,
    Recipient,
)


class RecordingChannel(BaseChannel):
    """In-memory channel recording what it was asked to send"""

    def __init__(self, name, fail=False, enabled=True):
        self.name = name
        self.fail = fail
        self.enabled = enabled
        self.sent = []

    def is_enabled(self):
        return self.enabled

    def get_supported_types(self):
        return frozenset(NotificationType)

    def validate_recipient(self, notification):
        return True

    def send(self, notification):
        if self.fail:
            raise ConnectionError(f"{self.name} unavailable")
        self.sent.append(notification)
        return self.success(f"{self.name}-1")


def booking_event(**recipient):
    return NotificationEvent(
        type=NotificationType.BOOKING_CONFIRMATION,
        recipient=Recipient(**recipient),
        data={"booking_number": "BKG-20250101-0001"},
    )


def test_register_channel_requires_base_channel():
    dispatcher = NotificationDispatcher()

    with pytest.raises(TypeError):
        dispatcher.register_channel(object())


def test_send_event_delivers_on_every_channel():
    email, sms = RecordingChannel("email"), RecordingChannel("sms")
    dispatcher = NotificationDispatcher([email, sms])

    summary = dispatcher.send_event(booking_event(email="guest@example.com", phone="+33612345678"))

    assert summary.all_succeeded
    assert summary.success_count == 2
    assert len(email.sent) == 1
    assert len(sms.sent) == 1


def test_channel_failure_is_isolated():
    email, sms = RecordingChannel("email"), RecordingChannel("sms", fail=True)
    dispatcher = NotificationDispatcher([email, sms])

    summary = dispatcher.send_event(booking_event(email="guest@example.com", phone="+33612345678"))

    assert summary.success_count == 1
    assert summary.failure_count == 1
    assert summary.results[1].error == "sms unavailable"
    assert len(email.sent) == 1


def test_missing_or_disabled_channel_counts_as_failure():
    dispatcher = NotificationDispatcher([RecordingChannel("email", enabled=False)])

    summary = dispatcher.send_event(booking_event(email="guest@example.com", phone="+33612345678"))

    assert summary.failure_count == 2
    assert not dispatcher.is_channel_available(ChannelName.EMAIL)
    assert not dispatcher.is_channel_available("sms")


def test_rejected_event_is_skipped():
    email = RecordingChannel("email")
    dispatcher = NotificationDispatcher([email])
    event = booking_event(email="guest@example.com")
    event.data = {}

    assert dispatcher.send_event(event) is None
    assert email.sent == []


def test_email_fallback_without_address_fails_quietly(mailoutbox):
    dispatcher = NotificationDispatcher([EmailChannel()])

    summary = dispatcher.send_event(booking_event())

    assert summary.failure_count == 1
    assert mailoutbox == []


def test_build_dispatcher_from_settings():
    django_settings = SimpleNamespace(
        DEFAULT_FROM_EMAIL="bookings@example.com",
        NOTIFICATIONS={
            "EMAIL_ENABLED": True,
            "SMS_ENABLED": True,
            "SMS_GATEWAY_URL": "https://sms.example.com/send",
            "SMS_TIMEOUT": "3",
            "SUBJECT_PREFIX": "[Bookings]",
        },
    )

    dispatcher = build_dispatcher(django_settings)

    assert dispatcher.channel_names() == ["email", "sms"]
    assert dispatcher.is_channel_available("sms")
    assert dispatcher.get_channel("sms").timeout == 3.0
    assert dispatcher.get_channel("email").subject_prefix == "[Bookings]"


def test_sms_unavailable_without_gateway():
    dispatcher = build_dispatcher(SimpleNamespace(NOTIFICATIONS={"SMS_ENABLED": True}))

    assert dispatcher.is_channel_available("email")
    assert not dispatcher.is_channel_available("sms")
