"""Channel interface every delivery implementation follows."""

from abc import ABC, abstractmethod
from typing import FrozenSet, Optional

from apps.notifications.types import ChannelResult, Notification, NotificationType


class BaseChannel(ABC):
    """
    A delivery channel

    validate() runs the checks common to every channel (enabled, type
    supported, selected for this notification) and then the channel's own
    recipient check. send() is only called on notifications that passed.
    """

    name: str = ''

    def is_enabled(self) -> bool:
        return True

    @abstractmethod
    def get_supported_types(self) -> FrozenSet[NotificationType]:
        pass

    @abstractmethod
    def validate_recipient(self, notification: Notification) -> bool:
        pass

    @abstractmethod
    def send(self, notification: Notification) -> ChannelResult:
        pass

    def validate(self, notification: Notification) -> bool:
        if not self.is_enabled():
            return False
        if notification.type not in self.get_supported_types():
            return False
        if self.name not in notification.channels:
            return False
        return self.validate_recipient(notification)

    def success(self, message_id: Optional[str] = None) -> ChannelResult:
        return ChannelResult(success=True, channel=self.name, message_id=message_id)

    def failure(self, error: str) -> ChannelResult:
        return ChannelResult(success=False, channel=self.name, error=error)
