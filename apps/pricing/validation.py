"""
Pricing breakdown validator

Re-derives each dependent value of a breakdown and compares it against the
stored one within the configured tolerance. It never alters a breakdown:

- strict mode raises PricingValidationError on the first violation
- non-strict mode logs every violation as a warning and returns False
- validate_pricing_breakdown_detailed collects everything into a report
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterator, List, Mapping, Optional, Union

from apps.pricing.config import (
    MONEY_QUANTUM,
    get_deposit_rate,
    get_tolerance,
    is_strict_validation,
    round_money,
    to_decimal,
)
from apps.pricing.discount import HUNDRED
from apps.pricing.engine import PricingBreakdown
from shared.domain.exceptions import PricingValidationError, ValidationError

logger = logging.getLogger(__name__)

MONETARY_FIELDS = ('subtotal', 'discount_amount', 'tax', 'final_total', 'deposit')

BreakdownLike = Union[PricingBreakdown, Mapping[str, Any]]


@dataclass
class PricingValidationReport:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _coerce(breakdown: BreakdownLike) -> PricingBreakdown:
    if isinstance(breakdown, PricingBreakdown):
        return breakdown
    return PricingBreakdown.from_dict(breakdown)


def _violation(pricing_field: str, expected: Any, actual: Any, message: str) -> PricingValidationError:
    return PricingValidationError(
        f"{message} ({pricing_field}: expected {expected}, got {actual})",
        pricing_field=pricing_field,
        expected_value=expected,
        actual_value=actual,
    )


def _iter_violations(
    breakdown: PricingBreakdown,
    tolerance: Decimal,
    deposit_rate: Optional[Decimal],
) -> Iterator[PricingValidationError]:
    for name in MONETARY_FIELDS:
        value = getattr(breakdown, name)
        if value is not None and value < 0:
            yield _violation(name, '>= 0', value, 'Monetary amounts cannot be negative')

    subtotal = breakdown.subtotal
    percent = breakdown.discount_percent
    amount = breakdown.discount_amount

    if percent < 0 or percent > HUNDRED:
        yield _violation('discount_percent', '0..100', percent, 'Discount percentage out of range')

    if amount > tolerance and percent <= 0:
        yield _violation(
            'discount_percent', '> 0', percent, 'Discount amount recorded without a discount percentage'
        )

    if amount > subtotal + tolerance:
        yield _violation('discount_amount', f'<= {subtotal}', amount, 'Discount exceeds subtotal')

    if percent > 0 and subtotal > 0:
        expected_amount = round_money(subtotal * percent / HUNDRED)
        if abs(amount - expected_amount) > tolerance:
            yield _violation(
                'discount_amount', expected_amount, amount, 'Discount amount does not match percentage'
            )

    expected_total = subtotal - amount + breakdown.tax
    if abs(breakdown.final_total - expected_total) > tolerance:
        yield _violation(
            'final_total', expected_total, breakdown.final_total, 'Final total does not match its components'
        )

    if breakdown.deposit is not None:
        rate = get_deposit_rate() if deposit_rate is None else deposit_rate
        expected_deposit = round_money(breakdown.final_total * rate)
        if abs(breakdown.deposit - expected_deposit) > tolerance:
            yield _violation('deposit', expected_deposit, breakdown.deposit, 'Deposit does not match deposit rate')


def _iter_warnings(breakdown: PricingBreakdown) -> Iterator[str]:
    for name in MONETARY_FIELDS:
        value = getattr(breakdown, name)
        if value is not None and value != value.quantize(MONEY_QUANTUM):
            yield f"{name} carries more precision than the currency allows: {value}"

    if breakdown.subtotal == 0 and breakdown.discount_percent > 0:
        yield f"discount_percent {breakdown.discount_percent} recorded on a zero subtotal"


def _resolve(tolerance: Optional[Any], deposit_rate: Optional[Any]):
    return (
        get_tolerance() if tolerance is None else to_decimal(tolerance),
        None if deposit_rate is None else to_decimal(deposit_rate),
    )


def validate_pricing_breakdown(
    breakdown: BreakdownLike,
    strict: Optional[bool] = None,
    tolerance: Optional[Any] = None,
    deposit_rate: Optional[Any] = None,
) -> bool:
    """
    Check a breakdown against its invariants

    ``strict`` defaults to PRICING['STRICT_VALIDATION']. Returns True when
    the breakdown is consistent; in non-strict mode returns False after
    logging each violation. A malformed breakdown (missing or unparsable
    amounts) raises ValidationError in strict mode.
    """
    if strict is None:
        strict = is_strict_validation()
    try:
        data = _coerce(breakdown)
    except ValidationError as e:
        if strict:
            raise
        logger.warning(f"Pricing validation failed for {e.field}: {e.message}")
        return False
    tol, rate = _resolve(tolerance, deposit_rate)

    is_valid = True
    for error in _iter_violations(data, tol, rate):
        if strict:
            raise error
        is_valid = False
        logger.warning(
            f"Pricing validation failed for {error.pricing_field}: "
            f"expected {error.expected_value}, got {error.actual_value}"
        )
    return is_valid


def validate_pricing_breakdown_detailed(
    breakdown: BreakdownLike,
    tolerance: Optional[Any] = None,
    deposit_rate: Optional[Any] = None,
) -> PricingValidationReport:
    try:
        data = _coerce(breakdown)
    except ValidationError as e:
        return PricingValidationReport(is_valid=False, errors=[e.message])
    tol, rate = _resolve(tolerance, deposit_rate)

    errors = [error.message for error in _iter_violations(data, tol, rate)]
    warnings = list(_iter_warnings(data))
    return PricingValidationReport(is_valid=not errors, errors=errors, warnings=warnings)
