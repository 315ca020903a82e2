import itertools
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from apps.bookings.domain.enums import ItemType
from apps.bookings.domain.snapshot import CatalogEntry, build_snapshot
from apps.pricing.engine import (
    PricingBreakdown,
    Quantities,
    billable_quantity,
    calculate_bundle_price,
    calculate_price,
    calculate_subtotal,
)
from apps.pricing.validation import validate_pricing_breakdown
from shared.domain.exceptions import ValidationError

CAPTURED_AT = datetime(2025, 1, 1, tzinfo=timezone.utc)


def snapshot(item_type=ItemType.ACTIVITY, price="100.00", **attributes):
    return build_snapshot(
        CatalogEntry(
            item_type=item_type,
            item_id="item-1",
            title="Item",
            currency="EUR",
            price=Decimal(price),
            locale="en",
            attributes=attributes,
        ),
        captured_at=CAPTURED_AT,
    )


def test_billable_quantity_per_item_type():
    assert billable_quantity(ItemType.CAR, Quantities(number_of_days=3)) == 3
    assert billable_quantity(ItemType.PACKAGE, Quantities(number_of_persons=4)) == 4
    assert billable_quantity(ItemType.ACTIVITY, Quantities(number_of_units=2)) == 2
    assert billable_quantity(ItemType.ACTIVITY, Quantities()) == 1


def test_subtotal_for_car_uses_days():
    car = snapshot(ItemType.CAR, "80.00", car_model="Clio")

    assert calculate_subtotal(car, Quantities(number_of_days=3)) == Decimal("240.00")


def test_price_with_discount_and_tax():
    pricing = calculate_price(snapshot(), Quantities(number_of_persons=1), discount_percent=10)

    assert pricing == PricingBreakdown(
        subtotal=Decimal("100.00"),
        discount_percent=Decimal("10"),
        discount_amount=Decimal("10.00"),
        tax=Decimal("9.00"),
        final_total=Decimal("99.00"),
    )


def test_each_field_rounded_once():
    pricing = calculate_price(
        snapshot(price="19.99"),
        Quantities(number_of_persons=3),
        discount_percent="15",
        include_deposit=True,
    )

    assert pricing.subtotal == Decimal("59.97")
    assert pricing.discount_amount == Decimal("9.00")
    assert pricing.tax == Decimal("5.10")
    assert pricing.final_total == Decimal("56.07")
    assert pricing.deposit == Decimal("11.21")
    assert validate_pricing_breakdown(pricing)


ENGINE_SWEEP = list(itertools.product(
    ["0.01", "19.99", "33.33", "80", "1234.56"],
    [1, 3, 7],
    ["0", "12.5", "33.333", "100"],
    [("0", "0"), ("0.075", "0.15"), ("0.1", "0.2"), ("0.2", "0.3333")],
))


@pytest.mark.parametrize("price, persons, percent, rates", ENGINE_SWEEP)
def test_engine_output_passes_strict_validation(price, persons, percent, rates):
    tax_rate, deposit_rate = rates
    pricing = calculate_price(
        snapshot(price=price),
        Quantities(number_of_persons=persons),
        discount_percent=percent,
        include_deposit=True,
        tax_rate=tax_rate,
        deposit_rate=deposit_rate,
    )

    assert validate_pricing_breakdown(pricing, strict=True, tolerance="0", deposit_rate=deposit_rate)


def test_price_without_tax():
    pricing = calculate_price(snapshot(), Quantities(number_of_persons=2), include_tax=False)

    assert pricing.tax == Decimal("0.00")
    assert pricing.final_total == Decimal("200.00")
    assert pricing.deposit is None


def test_explicit_rates_override_settings():
    pricing = calculate_price(
        snapshot(),
        Quantities(number_of_persons=1),
        include_deposit=True,
        tax_rate="0.2",
        deposit_rate="0.5",
    )

    assert pricing.tax == Decimal("20.00")
    assert pricing.final_total == Decimal("120.00")
    assert pricing.deposit == Decimal("60.00")


def test_rates_follow_settings(settings):
    settings.PRICING = {"TAX_RATE": "0.05", "DEPOSIT_RATE": "0.3", "STRICT_VALIDATION": True}

    pricing = calculate_price(snapshot(), Quantities(number_of_persons=1), include_deposit=True)

    assert pricing.tax == Decimal("5.00")
    assert pricing.deposit == Decimal("31.50")


def test_full_discount():
    pricing = calculate_price(snapshot(), Quantities(number_of_persons=1), discount_percent=100)

    assert pricing.discount_amount == Decimal("100.00")
    assert pricing.final_total == Decimal("0.00")


@pytest.mark.parametrize("percent", [-5, 101])
def test_invalid_discount_rejected(percent):
    with pytest.raises(ValidationError):
        calculate_price(snapshot(), Quantities(number_of_persons=1), discount_percent=percent)


def test_missing_price_prices_at_zero():
    pricing = calculate_price(
        build_snapshot(
            CatalogEntry(
                item_type=ItemType.PACKAGE,
                item_id="pkg",
                title="Package",
                currency="EUR",
                price=None,
                locale="en",
            ),
            captured_at=CAPTURED_AT,
        ),
        Quantities(number_of_persons=2),
    )

    assert pricing.subtotal == Decimal("0.00")
    assert pricing.final_total == Decimal("0.00")


def test_bundle_price_excludes_tax_by_default():
    pricing = calculate_bundle_price(
        activities_total="300",
        cars_total="200",
        global_discount_percent=10,
    )

    assert pricing.subtotal == Decimal("500.00")
    assert pricing.discount_amount == Decimal("50.00")
    assert pricing.tax == Decimal("0.00")
    assert pricing.final_total == Decimal("450.00")


def test_bundle_price_with_tax():
    pricing = calculate_bundle_price(100, 0, include_tax=True, tax_rate="0.1")

    assert pricing.final_total == Decimal("110.00")


def test_breakdown_dict_round_trip():
    pricing = calculate_price(snapshot(), Quantities(number_of_persons=1), include_deposit=True)

    data = pricing.to_dict()

    assert data["final_total"] == "110.00"
    assert data["deposit"] == "22.00"
    assert PricingBreakdown.from_dict(data) == pricing


def test_bundle_price_takes_required_totals_only():
    with pytest.raises(TypeError):
        calculate_bundle_price(100, 50, optional_activities_total=25)


def test_breakdown_from_dict_requires_totals():
    with pytest.raises(ValidationError) as exc_info:
        PricingBreakdown.from_dict({"subtotal": "100"})

    assert exc_info.value.field == "final_total"
