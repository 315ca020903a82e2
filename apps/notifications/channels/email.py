"""E-mail channel backed by Django's mail framework."""

import re
import uuid

import structlog
from django.conf import settings
from django.core.mail import send_mail

from apps.notifications.channels.base import BaseChannel
from apps.notifications.messages import build_email_body, build_subject
from apps.notifications.types import ChannelName, ChannelResult, Notification, NotificationType

logger = structlog.get_logger(__name__)

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


class EmailChannel(BaseChannel):
    name = ChannelName.EMAIL.value

    SUPPORTED_TYPES = frozenset(NotificationType)

    def __init__(self, enabled: bool = True, from_email: str = None, subject_prefix: str = ''):
        self.enabled = enabled
        self.from_email = from_email
        self.subject_prefix = subject_prefix

    def is_enabled(self) -> bool:
        return self.enabled

    def get_supported_types(self):
        return self.SUPPORTED_TYPES

    def validate_recipient(self, notification: Notification) -> bool:
        email = notification.recipient.email
        return bool(email and EMAIL_RE.match(email))

    def send(self, notification: Notification) -> ChannelResult:
        if not self.validate_recipient(notification):
            return self.failure('No valid email address')

        message_id = uuid.uuid4().hex
        try:
            send_mail(
                subject=build_subject(notification, self.subject_prefix),
                message=build_email_body(notification),
                from_email=self.from_email or settings.DEFAULT_FROM_EMAIL,
                recipient_list=[notification.recipient.email],
                fail_silently=False,
            )
        except Exception as e:
            logger.error(
                "email_send_failed",
                notification_type=notification.type.value,
                recipient_email=notification.recipient.email,
                error=str(e),
            )
            return self.failure(str(e))

        logger.info(
            "email_sent",
            notification_type=notification.type.value,
            recipient_email=notification.recipient.email,
            message_id=message_id,
        )
        return self.success(message_id)
