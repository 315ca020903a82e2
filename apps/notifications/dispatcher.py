"""
Notification dispatcher

Explicit registry of channels, built once at process start by
NotificationsConfig.ready() and passed to whoever sends notifications.
Delivery is best-effort: every channel failure is caught, logged and
counted in the DispatchSummary; nothing is raised to the caller.
"""

from typing import Dict, List, Mapping, Optional

import structlog

from apps.notifications import policy
from apps.notifications.channels import BaseChannel, EmailChannel, SMSChannel
from apps.notifications.types import ChannelResult, DispatchSummary, Notification, NotificationEvent

logger = structlog.get_logger(__name__)


class NotificationDispatcher:

    def __init__(self, channels: Optional[List[BaseChannel]] = None):
        self._channels: Dict[str, BaseChannel] = {}
        for channel in channels or []:
            self.register_channel(channel)

    def register_channel(self, channel: BaseChannel):
        if not isinstance(channel, BaseChannel):
            raise TypeError(f"{channel!r} is not a BaseChannel")
        self._channels[channel.name] = channel
        logger.debug("channel_registered", channel=channel.name, enabled=channel.is_enabled())

    def get_channel(self, name: str) -> Optional[BaseChannel]:
        return self._channels.get(str(getattr(name, 'value', name)))

    def channel_names(self) -> List[str]:
        return list(self._channels)

    def is_channel_available(self, name: str) -> bool:
        channel = self.get_channel(name)
        return channel is not None and channel.is_enabled()

    def send_event(self, event: NotificationEvent) -> Optional[DispatchSummary]:
        """Run the event through the policy and send what it produces"""
        try:
            notification = policy.process_event(event)
            if notification is None:
                logger.debug("notification_skipped", notification_type=str(getattr(event.type, 'value', event.type)))
                return None
            return self.send(notification)
        except Exception as e:
            logger.error(
                "notification_event_failed",
                notification_type=str(getattr(event.type, 'value', event.type)),
                error=str(e),
                exc_info=True,
            )
            return None

    def send(self, notification: Notification) -> DispatchSummary:
        summary = DispatchSummary()
        for channel_name in notification.channels:
            try:
                result = self.send_to_channel(notification, channel_name)
            except Exception as e:
                logger.error(
                    "notification_channel_failed",
                    channel=str(getattr(channel_name, 'value', channel_name)),
                    notification_type=notification.type.value,
                    error=str(e),
                )
                result = ChannelResult(
                    success=False,
                    channel=str(getattr(channel_name, 'value', channel_name)),
                    error=str(e),
                )
            summary.results.append(result)

        if summary.failure_count:
            logger.warning(
                "notification_partially_failed",
                notification_type=notification.type.value,
                success=summary.success_count,
                failures=summary.failure_count,
            )
        else:
            logger.info(
                "notification_sent",
                notification_type=notification.type.value,
                channels=[str(getattr(c, 'value', c)) for c in notification.channels],
            )
        return summary

    def send_to_channel(self, notification: Notification, channel_name: str) -> ChannelResult:
        """Raises RuntimeError when the channel is missing, disabled or rejects the notification"""
        name = str(getattr(channel_name, 'value', channel_name))
        channel = self.get_channel(name)
        if channel is None:
            raise RuntimeError(f"Channel {name} is not registered")
        if not channel.is_enabled():
            raise RuntimeError(f"Channel {name} is disabled")
        if not channel.validate(notification):
            raise RuntimeError(f"Notification validation failed for channel {name}")
        return channel.send(notification)


def build_dispatcher(django_settings) -> NotificationDispatcher:
    config: Mapping = getattr(django_settings, 'NOTIFICATIONS', {}) or {}
    return NotificationDispatcher([
        EmailChannel(
            enabled=bool(config.get('EMAIL_ENABLED', True)),
            from_email=getattr(django_settings, 'DEFAULT_FROM_EMAIL', None),
            subject_prefix=config.get('SUBJECT_PREFIX', ''),
        ),
        SMSChannel(
            gateway_url=config.get('SMS_GATEWAY_URL', ''),
            token=config.get('SMS_GATEWAY_TOKEN', ''),
            sender=config.get('SMS_SENDER', ''),
            timeout=float(config.get('SMS_TIMEOUT', 10)),
            enabled=bool(config.get('SMS_ENABLED', False)),
        ),
    ])
