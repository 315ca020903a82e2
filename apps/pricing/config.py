"""
Pricing configuration

Single source for rates, rounding and comparison tolerance. The engine
and the breakdown validator both read from here so they never disagree
about precision.

Values come from ``settings.PRICING``; anything missing, unparsable or
outside [0, 1] falls back to the defaults below.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from django.conf import settings

from shared.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = Decimal('0.1')
DEFAULT_DEPOSIT_RATE = Decimal('0.2')
DEFAULT_TOLERANCE = Decimal('0.01')

MONEY_QUANTUM = Decimal('0.01')
ROUNDING_MODE = ROUND_HALF_UP


def to_decimal(value: Any, field: Optional[str] = None) -> Decimal:
    """
    Convert ints, floats and strings without float artefacts (0.1 -> Decimal('0.1'))

    Unparsable and non-finite values (NaN, Infinity) raise ValidationError.
    """
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f'{value!r} is not a valid amount', field=field)
    if not number.is_finite():
        raise ValidationError(f'{value!r} is not a finite amount', field=field)
    return number


def round_money(value: Any) -> Decimal:
    return to_decimal(value).quantize(MONEY_QUANTUM, rounding=ROUNDING_MODE)


def _pricing_setting(name: str) -> Any:
    return getattr(settings, 'PRICING', {}).get(name)


def _parse_rate(raw: Any) -> Optional[Decimal]:
    if raw is None or raw == '':
        return None
    try:
        rate = to_decimal(raw)
    except ValidationError:
        return None
    if rate < 0 or rate > 1:
        return None
    return rate


def _resolve_rate(name: str, default: Decimal) -> Decimal:
    raw = _pricing_setting(name)
    rate = _parse_rate(raw)
    if rate is None:
        if raw not in (None, ''):
            logger.warning(f"Ignoring invalid PRICING[{name!r}]={raw!r}, using default {default}")
        return default
    return rate


def get_tax_rate() -> Decimal:
    return _resolve_rate('TAX_RATE', DEFAULT_TAX_RATE)


def get_deposit_rate() -> Decimal:
    return _resolve_rate('DEPOSIT_RATE', DEFAULT_DEPOSIT_RATE)


def get_tolerance() -> Decimal:
    raw = _pricing_setting('TOLERANCE')
    if raw in (None, ''):
        return DEFAULT_TOLERANCE
    try:
        tolerance = to_decimal(raw)
    except ValidationError:
        return DEFAULT_TOLERANCE
    return tolerance if tolerance >= 0 else DEFAULT_TOLERANCE


def is_strict_validation() -> bool:
    value = _pricing_setting('STRICT_VALIDATION')
    return True if value is None else bool(value)
