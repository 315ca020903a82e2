"""
Booking snapshots

A snapshot is an immutable copy of the priced catalog data taken when
the booking is created. Pricing always reads from the snapshot, so an
admin editing the catalog later never changes what a guest is charged.

Snapshots form a tagged union keyed by item type:
- PackageSnapshot / ActivitySnapshot carry price_per_person
- CarSnapshot carries price_per_day
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar, Dict, Optional, Type, Union

from apps.bookings.domain.enums import ItemType
from shared.domain.base import utcnow
from shared.domain.exceptions import ValidationError


@dataclass(frozen=True)
class CatalogEntry:
    """What a catalog lookup must return to build a snapshot"""
    item_type: ItemType
    item_id: str
    title: str
    currency: str
    price: Decimal
    locale: Optional[str] = None
    description: str = ''
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BaseSnapshot:
    item_type: ClassVar[ItemType]

    item_id: str
    title: str
    currency: str
    locale: str
    captured_at: datetime
    description: str = ''


@dataclass(frozen=True)
class PackageSnapshot(BaseSnapshot):
    item_type: ClassVar[ItemType] = ItemType.PACKAGE
    price_per_person: Optional[Decimal] = None
    duration_days: Optional[int] = None


@dataclass(frozen=True)
class ActivitySnapshot(BaseSnapshot):
    item_type: ClassVar[ItemType] = ItemType.ACTIVITY
    price_per_person: Optional[Decimal] = None
    location: str = ''


@dataclass(frozen=True)
class CarSnapshot(BaseSnapshot):
    item_type: ClassVar[ItemType] = ItemType.CAR
    price_per_day: Optional[Decimal] = None
    car_model: str = ''


Snapshot = Union[PackageSnapshot, ActivitySnapshot, CarSnapshot]

SNAPSHOT_TYPES: Dict[ItemType, Type[BaseSnapshot]] = {
    ItemType.PACKAGE: PackageSnapshot,
    ItemType.ACTIVITY: ActivitySnapshot,
    ItemType.CAR: CarSnapshot,
}

PRICE_FIELDS: Dict[ItemType, str] = {
    ItemType.PACKAGE: 'price_per_person',
    ItemType.ACTIVITY: 'price_per_person',
    ItemType.CAR: 'price_per_day',
}


def price_field_for(item_type: ItemType) -> str:
    return PRICE_FIELDS[ItemType(item_type)]


def unit_price(snapshot: Snapshot) -> Decimal:
    return getattr(snapshot, price_field_for(snapshot.item_type))


def _field_names(snapshot_cls) -> list:
    return [f.name for f in fields(snapshot_cls)]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def validate_snapshot(snapshot: Snapshot) -> bool:
    """
    Check that a snapshot carries everything pricing needs

    Raises ValidationError naming the first missing field.
    """
    item_type = getattr(snapshot, 'item_type', None)
    if item_type is None:
        raise ValidationError('Snapshot item_type is required', field='item_type')

    for name in ('item_id', 'title', 'currency', 'locale'):
        if _is_blank(getattr(snapshot, name, None)):
            raise ValidationError(f'Snapshot {name} is required', field=name)

    if getattr(snapshot, 'captured_at', None) is None:
        raise ValidationError('Snapshot captured_at is required', field='captured_at')

    price_field = price_field_for(item_type)
    if getattr(snapshot, price_field, None) is None:
        raise ValidationError(
            f'{price_field} is required for {ItemType(item_type).value} snapshots',
            field=price_field,
        )
    return True


def is_snapshot_complete(snapshot: Snapshot) -> bool:
    try:
        validate_snapshot(snapshot)
    except ValidationError:
        return False
    return True


def build_snapshot(
    entry: CatalogEntry,
    locale: Optional[str] = None,
    captured_at: Optional[datetime] = None,
) -> Snapshot:
    """Copy priced catalog data into a new snapshot of the matching variant"""
    item_type = ItemType(entry.item_type)
    snapshot_cls = SNAPSHOT_TYPES[item_type]
    extra = {
        name: entry.attributes[name]
        for name in ('duration_days', 'location', 'car_model')
        if name in entry.attributes and name in _field_names(snapshot_cls)
    }
    extra[price_field_for(item_type)] = None if entry.price is None else Decimal(str(entry.price))

    return snapshot_cls(
        item_id=str(entry.item_id),
        title=entry.title,
        currency=entry.currency,
        locale=locale or entry.locale or '',
        captured_at=captured_at or utcnow(),
        description=entry.description or '',
        **extra,
    )


def snapshot_to_dict(snapshot: Snapshot) -> Dict[str, Any]:
    """JSON-ready representation used by persistence"""
    data: Dict[str, Any] = {'item_type': snapshot.item_type.value}
    for name in _field_names(type(snapshot)):
        value = getattr(snapshot, name)
        if isinstance(value, Decimal):
            value = str(value)
        elif isinstance(value, datetime):
            value = value.isoformat()
        data[name] = value
    return data


def snapshot_from_dict(data: Dict[str, Any]) -> Snapshot:
    try:
        item_type = ItemType(data.get('item_type'))
    except ValueError:
        raise ValidationError(f"Unknown snapshot item_type: {data.get('item_type')!r}", field='item_type')

    snapshot_cls = SNAPSHOT_TYPES[item_type]
    values = {name: data.get(name) for name in _field_names(snapshot_cls) if name in data}

    price_field = price_field_for(item_type)
    if values.get(price_field) is not None:
        values[price_field] = Decimal(str(values[price_field]))
    if isinstance(values.get('captured_at'), str):
        values['captured_at'] = datetime.fromisoformat(values['captured_at'])

    try:
        return snapshot_cls(**values)
    except TypeError as e:
        raise ValidationError(f"Incomplete snapshot data: {e}", field='snapshot') from e
