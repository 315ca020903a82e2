from apps.notifications.channels.base import BaseChannel
from apps.notifications.channels.email import EmailChannel
from apps.notifications.channels.sms import SMSChannel

__all__ = ['BaseChannel', 'EmailChannel', 'SMSChannel']
