"""Booking repository backed by the Django ORM."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.db import transaction  # type: ignore
from django.db.models import Avg, Count, F, Q, Sum  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.domain.entities import Booking
from apps.bookings.domain.enums import BookingStatus, PaymentStatus
from apps.bookings.domain.snapshot import snapshot_from_dict, snapshot_to_dict
from apps.bookings.models import Booking as BookingModel
from apps.bookings.models import BookingCounter, ItemLock
from apps.pricing.config import round_money
from apps.pricing.engine import PricingBreakdown, Quantities
from shared.domain.exceptions import BookingConflictError, NotFoundError, StaleBookingError
from shared.domain.value_objects import DateRange

logger = logging.getLogger(__name__)

BOOKING_NUMBER_PREFIX = "BKG"

# Columns a lifecycle transition may change
TRANSITION_FIELDS = (
    "status",
    "payment_status",
    "payment_method",
    "transaction_id",
    "paid_at",
    "expires_at",
    "expired_at",
    "cancelled_at",
    "cancellation_reason",
)

PRICING_FIELDS = (
    "number_of_persons",
    "number_of_units",
    "number_of_days",
    "subtotal",
    "discount_percent",
    "discount_amount",
    "tax",
    "final_total",
    "deposit",
)


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def format_booking_number(day, sequence: int) -> str:
    return f"{BOOKING_NUMBER_PREFIX}-{day:%Y%m%d}-{sequence:04d}"


class DjangoBookingRepository:
    """
    Persistence boundary for Booking aggregates

    - add(): atomic "lock item, find overlapping active booking, else insert"
    - save_transition()/save_changes(): conditional UPDATE keyed by the
      status the caller read, raising StaleBookingError when it changed
    """

    # ===== Booking numbers =====

    @transaction.atomic
    def next_booking_number(self, moment: Optional[datetime] = None) -> str:
        day = timezone.localdate(moment) if moment else timezone.localdate()
        counter, _ = BookingCounter.objects.get_or_create(day=day)
        BookingCounter.objects.filter(pk=counter.pk).update(last_value=F("last_value") + 1)
        counter.refresh_from_db(fields=["last_value"])
        return format_booking_number(day, counter.last_value)

    # ===== Writes =====

    def _lock_item(self, item_type: str, item_id: str) -> None:
        lock, _ = ItemLock.objects.get_or_create(item_type=item_type, item_id=item_id)
        _lock_queryset_if_possible(ItemLock.objects.filter(pk=lock.pk)).get()

    def ensure_item_is_available(
        self,
        item_type: str,
        item_id: str,
        dates: Optional[DateRange],
        *,
        exclude_booking_id=None,
    ) -> None:
        """Raise BookingConflictError when an active booking overlaps ``dates``."""

        if dates is None:
            return

        overlapping_filter = Q(start_date__lt=dates.end_date) & Q(end_date__gt=dates.start_date)
        bookings_qs = BookingModel.objects.filter(
            item_type=item_type,
            item_id=item_id,
            status__in=BookingModel.ACTIVE_STATUSES,
        ).filter(overlapping_filter)

        if exclude_booking_id is not None:
            bookings_qs = bookings_qs.exclude(pk=exclude_booking_id)

        if _lock_queryset_if_possible(bookings_qs).exists():
            raise BookingConflictError(
                f"{item_type.capitalize()} {item_id} is not available for {dates}"
            )

    @transaction.atomic
    def add(self, booking: Booking) -> Booking:
        item_type = booking.item_type.value
        self._lock_item(item_type, booking.item_id)
        self.ensure_item_is_available(item_type, booking.item_id, booking.dates)

        row = BookingModel.objects.create(id=booking.id, **self._to_fields(booking))
        booking.created_at = row.created_at
        booking.updated_at = row.updated_at
        logger.info(f"Booking {booking.booking_number} stored for {item_type} {booking.item_id}")
        return booking

    def _conditional_update(self, booking: Booking, expected_status: BookingStatus, fields) -> None:
        row_fields = self._to_fields(booking)
        values = {name: row_fields[name] for name in fields}
        updated = BookingModel.objects.filter(
            pk=booking.id,
            status=BookingStatus(expected_status).value,
        ).update(updated_at=timezone.now(), **values)

        if updated:
            return
        if not BookingModel.objects.filter(pk=booking.id).exists():
            raise NotFoundError(f"Booking {booking.booking_number} not found", resource="booking")
        raise StaleBookingError(
            f"Booking {booking.booking_number} changed concurrently; "
            f"expected status {BookingStatus(expected_status).value}"
        )

    def save_transition(self, booking: Booking, expected_status: BookingStatus) -> None:
        self._conditional_update(booking, expected_status, TRANSITION_FIELDS)

    def save_pricing(self, booking: Booking, expected_status: BookingStatus) -> None:
        self._conditional_update(booking, expected_status, PRICING_FIELDS)

    def save_metadata(self, booking: Booking, expected_status: BookingStatus) -> None:
        self._conditional_update(booking, expected_status, ("metadata",))

    # ===== Reads =====

    def get_by_number(self, booking_number: str, lock: bool = False) -> Booking:
        queryset = BookingModel.objects.filter(booking_number=booking_number)
        if lock:
            queryset = _lock_queryset_if_possible(queryset)
        row = queryset.first()
        if row is None:
            raise NotFoundError(f"Booking {booking_number} not found", resource="booking")
        return self.to_domain(row)

    def get_by_id(self, booking_id) -> Booking:
        row = BookingModel.objects.filter(pk=booking_id).first()
        if row is None:
            raise NotFoundError(f"Booking {booking_id} not found", resource="booking")
        return self.to_domain(row)

    def list_for_guest(self, guest_id) -> List[Booking]:
        return [self.to_domain(row) for row in BookingModel.objects.filter(guest_id=guest_id)]

    def list_overdue_numbers(self, moment: datetime) -> List[str]:
        return list(
            BookingModel.objects.filter(
                status=BookingModel.Status.PENDING,
                expires_at__isnull=False,
                expires_at__lt=moment,
            ).order_by("expires_at").values_list("booking_number", flat=True)
        )

    def statistics(self) -> Dict[str, Any]:
        by_status = {
            row["status"]: row["count"]
            for row in BookingModel.objects.values("status").annotate(count=Count("id"))
        }
        by_payment = {
            row["payment_status"]: row["count"]
            for row in BookingModel.objects.values("payment_status").annotate(count=Count("id"))
        }
        revenue = BookingModel.objects.filter(payment_status=BookingModel.PaymentStatus.PAID).aggregate(
            total=Sum("final_total"),
            average=Avg("final_total"),
        )
        return {
            "total": sum(by_status.values()),
            "by_status": {status.value: by_status.get(status.value, 0) for status in BookingStatus},
            "by_payment_status": {status.value: by_payment.get(status.value, 0) for status in PaymentStatus},
            "revenue": {
                "total": round_money(revenue["total"] or Decimal("0")),
                "average": round_money(revenue["average"] or Decimal("0")),
            },
        }

    # ===== Mapping =====

    @staticmethod
    def _to_fields(booking: Booking) -> Dict[str, Any]:
        pricing = booking.pricing
        return {
            "booking_number": booking.booking_number,
            "guest_id": booking.guest_id,
            "item_type": booking.item_type.value,
            "item_id": booking.item_id,
            "snapshot": snapshot_to_dict(booking.snapshot),
            "locale": booking.locale,
            "number_of_persons": booking.quantities.number_of_persons,
            "number_of_units": booking.quantities.number_of_units,
            "number_of_days": booking.quantities.number_of_days,
            "start_date": booking.dates.start_date if booking.dates else None,
            "end_date": booking.dates.end_date if booking.dates else None,
            "subtotal": pricing.subtotal,
            "discount_percent": pricing.discount_percent,
            "discount_amount": pricing.discount_amount,
            "tax": pricing.tax,
            "final_total": pricing.final_total,
            "deposit": pricing.deposit,
            "currency": booking.snapshot.currency,
            "status": booking.status.value,
            "payment_status": booking.payment_status.value,
            "payment_method": booking.payment_method,
            "transaction_id": booking.transaction_id,
            "paid_at": booking.paid_at,
            "expires_at": booking.expires_at,
            "expired_at": booking.expired_at,
            "cancelled_at": booking.cancelled_at,
            "cancellation_reason": booking.cancellation_reason,
            "metadata": booking.metadata,
        }

    @staticmethod
    def to_domain(row: BookingModel) -> Booking:
        dates = None
        if row.start_date and row.end_date:
            dates = DateRange(row.start_date, row.end_date)

        return Booking(
            id=row.id,
            created_at=row.created_at,
            updated_at=row.updated_at,
            booking_number=row.booking_number,
            guest_id=row.guest_id,
            snapshot=snapshot_from_dict(row.snapshot),
            quantities=Quantities(
                number_of_persons=row.number_of_persons,
                number_of_units=row.number_of_units,
                number_of_days=row.number_of_days,
            ),
            pricing=PricingBreakdown(
                subtotal=row.subtotal,
                discount_percent=row.discount_percent,
                discount_amount=row.discount_amount,
                tax=row.tax,
                final_total=row.final_total,
                deposit=row.deposit,
            ),
            dates=dates,
            locale=row.locale,
            status=BookingStatus(row.status),
            payment_status=PaymentStatus(row.payment_status),
            expires_at=row.expires_at,
            payment_method=row.payment_method,
            transaction_id=row.transaction_id,
            paid_at=row.paid_at,
            cancellation_reason=row.cancellation_reason,
            cancelled_at=row.cancelled_at,
            expired_at=row.expired_at,
            metadata=dict(row.metadata or {}),
        )
