"""Discount rule: percentage off a price."""

from decimal import Decimal
from typing import Any, Tuple

from apps.pricing.config import to_decimal
from shared.domain.exceptions import ValidationError

HUNDRED = Decimal(100)


def _check(price: Any, discount_percent: Any) -> Tuple[Decimal, Decimal]:
    amount = to_decimal(price)
    percent = to_decimal(discount_percent)
    if amount < 0:
        raise ValidationError('Price cannot be negative', field='price')
    if percent < 0 or percent > HUNDRED:
        raise ValidationError('Discount percentage must be between 0 and 100', field='discount_percent')
    return amount, percent


def apply_discount(price: Any, discount_percent: Any) -> Decimal:
    """Price after removing ``discount_percent`` percent"""
    amount, percent = _check(price, discount_percent)
    return amount * (1 - percent / HUNDRED)


def calculate_discount_amount(price: Any, discount_percent: Any) -> Decimal:
    amount, percent = _check(price, discount_percent)
    return amount * (percent / HUNDRED)


def validate_discount(discount_percent: Any) -> bool:
    percent = to_decimal(discount_percent)
    if percent < 0:
        raise ValidationError('Discount cannot be negative', field='discount_percent')
    if percent > HUNDRED:
        raise ValidationError('Discount cannot exceed 100%', field='discount_percent')
    return True
