from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from apps.bookings.domain.entities import Booking
from apps.bookings.domain.enums import BookingStatus, ItemType, PaymentStatus
from apps.bookings.domain.events import BookingCancelled, BookingCreated, BookingExpired, PaymentConfirmed
from apps.bookings.domain.snapshot import CatalogEntry, build_snapshot
from apps.pricing.engine import Quantities, calculate_price
from shared.domain.exceptions import StateTransitionError, ValidationError
from shared.domain.value_objects import DateRange

NOW = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)


def make_booking(**overrides):
    snapshot = build_snapshot(
        CatalogEntry(
            item_type=ItemType.ACTIVITY,
            item_id="act-1",
            title="Horse riding",
            currency="EUR",
            price=Decimal("50.00"),
            locale="en",
        ),
        captured_at=NOW,
    )
    quantities = Quantities(number_of_persons=2)
    values = dict(
        booking_number="BKG-20250101-0001",
        guest_id=uuid4(),
        snapshot=snapshot,
        quantities=quantities,
        pricing=calculate_price(snapshot, quantities, tax_rate=Decimal("0.1")),
        dates=DateRange(date(2025, 2, 1), date(2025, 2, 2)),
        expires_at=NOW + timedelta(hours=24),
    )
    values.update(overrides)
    return Booking.create(**values)


def test_create_records_booking_created():
    booking = make_booking()

    assert booking.status == BookingStatus.PENDING
    assert booking.payment_status == PaymentStatus.UNPAID
    [event] = booking.events
    assert isinstance(event, BookingCreated)
    assert event.booking_number == "BKG-20250101-0001"
    assert event.final_total == Decimal("110.00")
    assert event.item_type == "activity"


def test_confirm_payment():
    booking = make_booking()
    booking.clear_events()

    booking.confirm_payment("card", "txn-1", moment=NOW + timedelta(hours=1))

    assert booking.status == BookingStatus.CONFIRMED
    assert booking.payment_status == PaymentStatus.PAID
    assert booking.transaction_id == "txn-1"
    assert booking.expires_at is None
    [event] = booking.events
    assert isinstance(event, PaymentConfirmed)
    assert event.payment_status == "paid"


def test_cannot_pay_after_hold_window():
    booking = make_booking()

    with pytest.raises(ValidationError, match="expired"):
        booking.confirm_payment(moment=NOW + timedelta(hours=25))
    assert booking.status == BookingStatus.PENDING


def test_cancel_paid_booking_marks_refund():
    booking = make_booking()
    booking.confirm_payment(moment=NOW)
    booking.clear_events()

    booking.cancel("Change of plans", moment=NOW)

    assert booking.status == BookingStatus.CANCELLED
    assert booking.payment_status == PaymentStatus.REFUNDED
    assert not booking.blocks_dates
    [event] = booking.events
    assert isinstance(event, BookingCancelled)
    assert event.refund_due is True
    assert event.previous_status == "confirmed"


def test_cancel_twice_is_rejected():
    booking = make_booking()
    booking.cancel(moment=NOW)

    with pytest.raises(ValidationError, match="already cancelled"):
        booking.cancel(moment=NOW)


def test_expired_booking_cannot_be_cancelled():
    booking = make_booking()
    booking.expire(moment=NOW)

    assert not booking.can_be_cancelled()
    with pytest.raises(StateTransitionError):
        booking.cancel(moment=NOW)


def test_expire_only_from_pending():
    booking = make_booking()
    booking.clear_events()

    assert booking.expire(moment=NOW) is True
    assert booking.expire(moment=NOW) is False
    assert [type(e) for e in booking.events] == [BookingExpired]

    confirmed = make_booking()
    confirmed.confirm_payment(moment=NOW)
    with pytest.raises(StateTransitionError):
        confirmed.expire(moment=NOW)


def test_is_expired():
    booking = make_booking()

    assert not booking.is_expired(NOW)
    assert booking.is_expired(NOW + timedelta(hours=24, seconds=1))


def test_pricing_is_frozen_after_pending():
    booking = make_booking()
    new_pricing = calculate_price(booking.snapshot, Quantities(number_of_persons=3), tax_rate=Decimal("0.1"))

    booking.apply_pricing(new_pricing, Quantities(number_of_persons=3))
    assert booking.pricing.final_total == Decimal("165.00")

    booking.confirm_payment(moment=NOW)
    with pytest.raises(ValidationError):
        booking.apply_pricing(new_pricing)


def test_metadata_updates_gated_by_status():
    booking = make_booking(metadata={"source": "web"})
    booking.update_metadata({"note": "vegetarian"})

    assert booking.metadata == {"source": "web", "note": "vegetarian"}

    booking.cancel(moment=NOW)
    with pytest.raises(ValidationError):
        booking.update_metadata({"note": "late"})


def test_identity_equality():
    booking = make_booking()

    assert booking == booking
    assert booking != make_booking()
    assert len({booking, booking}) == 1


def test_default_timestamps_are_aware_utc():
    booking = make_booking()
    [event] = booking.events

    booking.touch()

    assert booking.created_at.tzinfo is timezone.utc
    assert booking.updated_at.tzinfo is timezone.utc
    assert event.occurred_at.tzinfo is timezone.utc
