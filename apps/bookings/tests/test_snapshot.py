from dataclasses import FrozenInstanceError, replace
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from apps.bookings.domain.enums import ItemType
from apps.bookings.domain.snapshot import (
    ActivitySnapshot,
    CarSnapshot,
    CatalogEntry,
    PackageSnapshot,
    build_snapshot,
    is_snapshot_complete,
    snapshot_from_dict,
    snapshot_to_dict,
    unit_price,
    validate_snapshot,
)
from shared.domain.exceptions import ValidationError

CAPTURED_AT = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def car_entry(**overrides):
    values = dict(
        item_type=ItemType.CAR,
        item_id="car-1",
        title="Toyota Land Cruiser",
        currency="EUR",
        price=Decimal("80.00"),
        locale="en",
        attributes={"car_model": "Land Cruiser 200"},
    )
    values.update(overrides)
    return CatalogEntry(**values)


def test_build_snapshot_picks_variant_and_price_field():
    snapshot = build_snapshot(car_entry(), captured_at=CAPTURED_AT)

    assert isinstance(snapshot, CarSnapshot)
    assert snapshot.item_type == ItemType.CAR
    assert snapshot.price_per_day == Decimal("80.00")
    assert snapshot.car_model == "Land Cruiser 200"
    assert unit_price(snapshot) == Decimal("80.00")


def test_build_snapshot_converts_float_price_without_artefacts():
    entry = car_entry(item_type=ItemType.ACTIVITY, price=19.9, attributes={"location": "Ala-Archa"})

    snapshot = build_snapshot(entry, locale="fr", captured_at=CAPTURED_AT)

    assert isinstance(snapshot, ActivitySnapshot)
    assert snapshot.price_per_person == Decimal("19.9")
    assert snapshot.locale == "fr"
    assert snapshot.location == "Ala-Archa"


def test_snapshot_is_read_only():
    snapshot = build_snapshot(car_entry(), captured_at=CAPTURED_AT)

    with pytest.raises(FrozenInstanceError):
        snapshot.price_per_day = Decimal("1")


@pytest.mark.parametrize("field_name", ["item_id", "title", "currency", "locale"])
def test_validate_snapshot_names_missing_field(field_name):
    snapshot = replace(build_snapshot(car_entry(), captured_at=CAPTURED_AT), **{field_name: ""})

    with pytest.raises(ValidationError) as exc_info:
        validate_snapshot(snapshot)

    assert exc_info.value.field == field_name
    assert not is_snapshot_complete(snapshot)


def test_validate_snapshot_requires_type_specific_price():
    snapshot = PackageSnapshot(
        item_id="pkg-1",
        title="Issyk-Kul",
        currency="EUR",
        locale="en",
        captured_at=CAPTURED_AT,
    )

    with pytest.raises(ValidationError, match="price_per_person"):
        validate_snapshot(snapshot)


def test_validating_twice_gives_same_result():
    snapshot = build_snapshot(car_entry(), captured_at=CAPTURED_AT)

    assert validate_snapshot(snapshot) is True
    assert validate_snapshot(snapshot) is True


def test_snapshot_dict_conversion_restores_variant():
    snapshot = build_snapshot(car_entry(), captured_at=CAPTURED_AT)

    data = snapshot_to_dict(snapshot)
    restored = snapshot_from_dict(data)

    assert data["item_type"] == "car"
    assert data["price_per_day"] == "80.00"
    assert restored == snapshot


def test_snapshot_from_dict_rejects_unknown_type():
    with pytest.raises(ValidationError):
        snapshot_from_dict({"item_type": "boat", "item_id": "1"})


def test_snapshot_from_dict_rejects_incomplete_data():
    with pytest.raises(ValidationError, match="Incomplete snapshot"):
        snapshot_from_dict({"item_type": "car", "item_id": "1"})


def test_capture_time_defaults_to_aware_utc():
    snapshot = build_snapshot(car_entry())

    assert snapshot.captured_at.tzinfo is timezone.utc
