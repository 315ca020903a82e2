"""
Structured logging helpers

structlog processors registered in settings.LOGGING / structlog.configure.
"""

import re
from typing import Any, MutableMapping

EMAIL_RE = re.compile(r'([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*@([A-Za-z0-9.-]+\.[A-Za-z]{2,})')
PHONE_RE = re.compile(r'\+?\d[\d\s-]{6,}\d')

SENSITIVE_KEYS = {'email', 'recipient_email', 'phone', 'recipient_phone', 'to'}


def mask_email(value: str) -> str:
    """user@domain.com -> u***@domain.com"""
    return EMAIL_RE.sub(lambda m: f"{m.group(1)}***@{m.group(2)}", value)


def mask_phone(value: str) -> str:
    """+996700123456 -> +996***3456"""
    def _mask(match):
        raw = match.group(0)
        digits = raw.replace(' ', '').replace('-', '')
        if len(digits) < 8:
            return '***'
        return f"{digits[:4]}***{digits[-4:]}"
    return PHONE_RE.sub(_mask, value)


def scrub_value(value: Any) -> Any:
    if isinstance(value, str):
        return mask_phone(mask_email(value))
    if isinstance(value, dict):
        return {key: scrub_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(scrub_value(item) for item in value)
    return value


def scrub_sensitive_data(logger, method_name: str, event_dict: MutableMapping[str, Any]):
    """
    structlog processor masking e-mail addresses and phone numbers

    Keys known to hold contact data are always masked; the rendered
    event message is scanned for e-mail addresses only, so booking
    numbers and amounts are left intact.
    """
    for key, value in list(event_dict.items()):
        if key in SENSITIVE_KEYS and value:
            event_dict[key] = scrub_value(value)
        elif key == 'event' and isinstance(value, str):
            event_dict[key] = mask_email(value)
    return event_dict
