"""Tax rule: tax = subtotal x rate."""

from decimal import Decimal
from typing import Any, Optional

from apps.pricing.config import DEFAULT_TAX_RATE, to_decimal
from shared.domain.exceptions import ValidationError


def validate_tax_rate(tax_rate: Any) -> bool:
    rate = to_decimal(tax_rate)
    if rate < 0:
        raise ValidationError('Tax rate cannot be negative', field='tax_rate')
    if rate > 1:
        raise ValidationError('Tax rate cannot exceed 100%', field='tax_rate')
    return True


def calculate_tax(subtotal: Any, tax_rate: Optional[Any] = None) -> Decimal:
    """
    Tax on a subtotal

    ``tax_rate`` defaults to 10%; pass ``get_tax_rate()`` to use the
    configured rate.
    """
    amount = to_decimal(subtotal)
    if amount < 0:
        raise ValidationError('Subtotal cannot be negative', field='subtotal')

    rate = DEFAULT_TAX_RATE if tax_rate is None else to_decimal(tax_rate)
    if rate < 0 or rate > 1:
        raise ValidationError('Tax rate must be between 0 and 1', field='tax_rate')
    return amount * rate
