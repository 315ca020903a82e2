"""
Notification types

Upstream code only builds a NotificationEvent; the policy turns it into a
Notification (channels + priority) and the dispatcher delivers it.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class NotificationType(str, Enum):
    BOOKING_CONFIRMATION = 'booking_confirmation'
    PAYMENT_CONFIRMATION = 'payment_confirmation'
    BOOKING_CANCELLATION = 'booking_cancellation'
    BOOKING_EXPIRATION = 'booking_expiration'


class ChannelName(str, Enum):
    EMAIL = 'email'
    SMS = 'sms'


class NotificationPriority(str, Enum):
    LOW = 'low'
    NORMAL = 'normal'
    HIGH = 'high'


@dataclass(frozen=True)
class Recipient:
    email: Optional[str] = None
    phone: Optional[str] = None
    name: Optional[str] = None
    locale: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email or 'Guest'


@dataclass
class NotificationEvent:
    """What upstream services emit; channel selection is left to the policy"""
    type: NotificationType
    recipient: Recipient
    data: Dict[str, Any] = field(default_factory=dict)
    metadata: Optional[Dict[str, Any]] = None
    channels: Optional[List[ChannelName]] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form passed to the Celery task"""
        return {
            'type': NotificationType(self.type).value,
            'recipient': asdict(self.recipient),
            'data': dict(self.data),
            'metadata': self.metadata,
            'channels': [ChannelName(c).value for c in self.channels] if self.channels is not None else None,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'NotificationEvent':
        channels = payload.get('channels')
        return cls(
            type=NotificationType(payload['type']),
            recipient=Recipient(**(payload.get('recipient') or {})),
            data=dict(payload.get('data') or {}),
            metadata=payload.get('metadata'),
            channels=[ChannelName(c) for c in channels] if channels is not None else None,
        )


@dataclass
class Notification:
    """An event the policy accepted, with its resolved channels and priority"""
    type: NotificationType
    recipient: Recipient
    data: Dict[str, Any]
    channels: List[ChannelName]
    priority: NotificationPriority
    metadata: Optional[Dict[str, Any]] = None


@dataclass
class ChannelResult:
    success: bool
    channel: str
    message_id: Optional[str] = None
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class DispatchSummary:
    results: List[ChannelResult] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def failure_count(self) -> int:
        return len(self.results) - self.success_count

    @property
    def all_succeeded(self) -> bool:
        return bool(self.results) and self.failure_count == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success_count,
            'failures': self.failure_count,
            'results': [
                {
                    'channel': result.channel,
                    'success': result.success,
                    'message_id': result.message_id,
                    'error': result.error,
                }
                for result in self.results
            ],
        }
