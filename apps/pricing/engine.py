"""
Pricing engine

Combines the tax, discount and deposit rules into a PricingBreakdown.

Every monetary field is rounded once, with the shared rounding mode,
and the dependent fields are derived from already-rounded values:

    discounted = subtotal - discount_amount
    tax        = round(discounted x tax_rate)
    final      = discounted + tax
    deposit    = round(final x deposit_rate)

so a breakdown produced here always passes validate_pricing_breakdown.
"""

from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

from apps.bookings.domain.enums import ItemType
from apps.bookings.domain.snapshot import Snapshot, unit_price
from apps.pricing.config import get_deposit_rate, get_tax_rate, round_money, to_decimal
from apps.pricing.deposit import calculate_deposit
from apps.pricing.discount import calculate_discount_amount, validate_discount
from apps.pricing.tax import calculate_tax
from shared.domain.exceptions import ValidationError

ZERO = Decimal('0.00')

REQUIRED_FIELDS = ('subtotal', 'final_total')


@dataclass(frozen=True)
class Quantities:
    """Quantity fields of a booking; only those relevant to the item type are set"""
    number_of_persons: Optional[int] = None
    number_of_units: Optional[int] = None
    number_of_days: Optional[int] = None


@dataclass(frozen=True)
class PricingBreakdown:
    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    tax: Decimal
    final_total: Decimal
    deposit: Optional[Decimal] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {key: None if value is None else str(value) for key, value in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PricingBreakdown':
        """Parse a stored breakdown; subtotal and final_total are required"""
        for name in REQUIRED_FIELDS:
            if data.get(name) in (None, ''):
                raise ValidationError(f'Pricing breakdown is missing {name}', field=name)

        deposit = data.get('deposit')
        return cls(
            subtotal=to_decimal(data['subtotal'], 'subtotal'),
            discount_percent=to_decimal(data.get('discount_percent') or 0, 'discount_percent'),
            discount_amount=to_decimal(data.get('discount_amount') or 0, 'discount_amount'),
            tax=to_decimal(data.get('tax') or 0, 'tax'),
            final_total=to_decimal(data['final_total'], 'final_total'),
            deposit=None if deposit is None else to_decimal(deposit, 'deposit'),
        )


def billable_quantity(item_type: ItemType, quantities: Quantities) -> int:
    """Persons (or units) for packages/activities, days for cars; at least 1"""
    if ItemType(item_type) == ItemType.CAR:
        return quantities.number_of_days or 1
    return quantities.number_of_persons or quantities.number_of_units or 1


def calculate_subtotal(snapshot: Snapshot, quantities: Quantities) -> Decimal:
    price = unit_price(snapshot) or ZERO
    return round_money(to_decimal(price) * billable_quantity(snapshot.item_type, quantities))


def _breakdown(
    subtotal: Decimal,
    discount_percent: Any,
    include_tax: bool,
    include_deposit: bool,
    tax_rate: Optional[Any],
    deposit_rate: Optional[Any],
) -> PricingBreakdown:
    percent = to_decimal(discount_percent or 0)
    validate_discount(percent)

    discount_amount = ZERO
    if percent > 0:
        discount_amount = round_money(calculate_discount_amount(subtotal, percent))
    discounted = subtotal - discount_amount

    tax = ZERO
    if include_tax:
        rate = get_tax_rate() if tax_rate is None else tax_rate
        tax = round_money(calculate_tax(discounted, rate))
    final_total = discounted + tax

    deposit = None
    if include_deposit:
        rate = get_deposit_rate() if deposit_rate is None else deposit_rate
        deposit = round_money(calculate_deposit(final_total, rate))

    return PricingBreakdown(
        subtotal=subtotal,
        discount_percent=percent,
        discount_amount=discount_amount,
        tax=tax,
        final_total=final_total,
        deposit=deposit,
    )


def calculate_price(
    snapshot: Snapshot,
    quantities: Quantities,
    discount_percent: Any = 0,
    include_tax: bool = True,
    include_deposit: bool = False,
    tax_rate: Optional[Any] = None,
    deposit_rate: Optional[Any] = None,
) -> PricingBreakdown:
    """
    Full breakdown for one booking

    Tax is charged on the discounted subtotal and is included unless
    ``include_tax`` is False. Rates default to the configured ones.
    """
    subtotal = calculate_subtotal(snapshot, quantities)
    return _breakdown(subtotal, discount_percent, include_tax, include_deposit, tax_rate, deposit_rate)


def calculate_bundle_price(
    activities_total: Any,
    cars_total: Any,
    global_discount_percent: Any = 0,
    include_tax: bool = False,
    include_deposit: bool = False,
    tax_rate: Optional[Any] = None,
    deposit_rate: Optional[Any] = None,
) -> PricingBreakdown:
    """
    Breakdown for a package bundle (required activities + cars)

    Optional activities are priced as separate bookings, so only the
    required totals go in. Unlike single bookings, bundles exclude tax
    unless asked for.
    """
    subtotal = round_money(to_decimal(activities_total) + to_decimal(cars_total))
    return _breakdown(subtotal, global_discount_percent, include_tax, include_deposit, tax_rate, deposit_rate)
