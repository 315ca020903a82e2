"""Deposit rule: deposit = total x rate."""

from decimal import Decimal
from typing import Any, Optional

from apps.pricing.config import DEFAULT_DEPOSIT_RATE, to_decimal
from shared.domain.exceptions import ValidationError


def calculate_deposit(total: Any, deposit_rate: Optional[Any] = None) -> Decimal:
    """Deposit owed on ``total``; rate defaults to 20%"""
    amount = to_decimal(total)
    if amount < 0:
        raise ValidationError('Total cannot be negative', field='total')

    rate = DEFAULT_DEPOSIT_RATE if deposit_rate is None else to_decimal(deposit_rate)
    if rate < 0 or rate > 1:
        raise ValidationError('Deposit rate must be between 0 and 1', field='deposit_rate')
    return amount * rate


def validate_deposit_rate(deposit_rate: Any) -> bool:
    rate = to_decimal(deposit_rate)
    if rate < 0:
        raise ValidationError('Deposit rate cannot be negative', field='deposit_rate')
    if rate > 1:
        raise ValidationError('Deposit rate cannot exceed 100%', field='deposit_rate')
    return True
