"""SMS channel posting to an HTTP gateway."""

import re

import requests
import structlog

from apps.notifications.channels.base import BaseChannel
from apps.notifications.messages import build_sms_text
from apps.notifications.types import ChannelName, ChannelResult, Notification, NotificationType

logger = structlog.get_logger(__name__)

PHONE_RE = re.compile(r'^\+?[1-9]\d{7,14}$')


def normalize_phone(phone: str) -> str:
    return re.sub(r'[\s\-()]', '', phone or '')


class SMSChannel(BaseChannel):
    """
    Sends short texts through the gateway at ``gateway_url``

    Disabled when no gateway is configured. Each request is bounded by
    ``timeout`` seconds; there is no retry.
    """

    name = ChannelName.SMS.value

    SUPPORTED_TYPES = frozenset({
        NotificationType.BOOKING_CONFIRMATION,
        NotificationType.PAYMENT_CONFIRMATION,
        NotificationType.BOOKING_CANCELLATION,
    })

    def __init__(
        self,
        gateway_url: str = '',
        token: str = '',
        sender: str = '',
        timeout: float = 10,
        enabled: bool = True,
    ):
        self.gateway_url = gateway_url
        self.token = token
        self.sender = sender
        self.timeout = timeout
        self.enabled = enabled

    def is_enabled(self) -> bool:
        return bool(self.enabled and self.gateway_url)

    def get_supported_types(self):
        return self.SUPPORTED_TYPES

    def validate_recipient(self, notification: Notification) -> bool:
        return bool(PHONE_RE.match(normalize_phone(notification.recipient.phone)))

    def send(self, notification: Notification) -> ChannelResult:
        if not self.is_enabled():
            return self.failure('SMS gateway is not configured')
        if not self.validate_recipient(notification):
            return self.failure('No valid phone number')

        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        payload = {
            "to": normalize_phone(notification.recipient.phone),
            "from": self.sender,
            "text": build_sms_text(notification),
        }

        try:
            response = requests.post(self.gateway_url, headers=headers, json=payload, timeout=self.timeout)
            response.raise_for_status()
            body = response.json() if response.content else {}
        except (requests.RequestException, ValueError) as e:
            logger.error(
                "sms_send_failed",
                notification_type=notification.type.value,
                recipient_phone=notification.recipient.phone,
                error=str(e),
            )
            return self.failure(str(e))

        message_id = (body.get("message_id") or body.get("id")) if isinstance(body, dict) else None
        logger.info(
            "sms_sent",
            notification_type=notification.type.value,
            recipient_phone=notification.recipient.phone,
            message_id=message_id,
        )
        return self.success(message_id)
