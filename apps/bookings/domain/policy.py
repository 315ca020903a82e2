"""
Booking request policy

Checks a create-booking request before any catalog lookup or pricing
happens, and derives the values a new booking starts with.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

from apps.bookings.domain.enums import ItemType
from apps.pricing.engine import Quantities
from shared.domain.exceptions import ValidationError

DEFAULT_HOLD_HOURS = 24


@dataclass
class CreateBookingData:
    guest_id: Optional[UUID]
    item_type: Optional[str]
    item_id: Optional[str]
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    number_of_persons: Optional[int] = None
    number_of_units: Optional[int] = None
    number_of_days: Optional[int] = None
    discount_percent: Decimal = Decimal('0')
    locale: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


def _positive(value: Optional[int], name: str, label: str):
    if value is not None and value < 1:
        raise ValidationError(f'{label} must be at least 1', field=name)


def validate_booking_data(data: CreateBookingData) -> None:
    if not data.guest_id:
        raise ValidationError('Guest ID is required', field='guest_id')
    if not data.item_type:
        raise ValidationError('Item type is required', field='item_type')
    if not data.item_id:
        raise ValidationError('Item ID is required', field='item_id')

    try:
        item_type = ItemType(data.item_type)
    except ValueError:
        raise ValidationError(f'Unknown item type: {data.item_type!r}', field='item_type')

    if data.start_date and data.end_date and data.start_date >= data.end_date:
        raise ValidationError('Start date must be before end date', field='end_date')

    if item_type == ItemType.CAR:
        _positive(data.number_of_days, 'number_of_days', 'Number of days')
    else:
        _positive(data.number_of_persons, 'number_of_persons', 'Number of persons')
        _positive(data.number_of_units, 'number_of_units', 'Number of units')


def calculate_expiration_date(now: datetime, hold_hours: Optional[int] = None) -> datetime:
    """Unpaid bookings are held for ``hold_hours`` (24 by default)"""
    return now + timedelta(hours=hold_hours or DEFAULT_HOLD_HOURS)


def resolve_quantities(item_type: ItemType, data: Any) -> Quantities:
    """Keep only the quantity fields that apply to ``item_type``"""
    if ItemType(item_type) == ItemType.CAR:
        return Quantities(number_of_days=getattr(data, 'number_of_days', None))
    return Quantities(
        number_of_persons=getattr(data, 'number_of_persons', None),
        number_of_units=getattr(data, 'number_of_units', None),
    )
