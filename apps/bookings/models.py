"""Booking persistence models."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Booking(models.Model):
    """Reservation of a package, activity or car by a guest."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Awaiting payment")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")
        EXPIRED = "expired", _("Expired / not paid")

    class PaymentStatus(models.TextChoices):
        UNPAID = "unpaid", _("Unpaid")
        PAID = "paid", _("Paid")
        REFUNDED = "refunded", _("Refunded")
        FAILED = "failed", _("Payment failed")

    class ItemType(models.TextChoices):
        PACKAGE = "package", _("Package tour")
        ACTIVITY = "activity", _("Activity")
        CAR = "car", _("Car rental")

    ACTIVE_STATUSES = (Status.PENDING, Status.CONFIRMED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking_number = models.CharField(max_length=20, unique=True, editable=False)
    guest = models.ForeignKey(
        "guests.Guest",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    item_type = models.CharField(max_length=16, choices=ItemType.choices)
    item_id = models.CharField(max_length=64)
    snapshot = models.JSONField(help_text=_("Priced item data captured at booking time."))
    locale = models.CharField(max_length=8, blank=True)

    number_of_persons = models.PositiveSmallIntegerField(null=True, blank=True)
    number_of_units = models.PositiveSmallIntegerField(null=True, blank=True)
    number_of_days = models.PositiveSmallIntegerField(null=True, blank=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True, help_text=_("Exclusive end of the booked range."))

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_percent = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    final_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    deposit = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    currency = models.CharField(max_length=3, default="EUR")

    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING)
    payment_status = models.CharField(
        max_length=16,
        choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID,
    )
    payment_method = models.CharField(max_length=50, blank=True)
    transaction_id = models.CharField(max_length=120, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text=_("Hold timeout after which an unpaid booking expires."),
    )
    expired_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.CharField(max_length=255, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(start_date__isnull=True)
                    | models.Q(end_date__isnull=True)
                    | models.Q(end_date__gt=models.F("start_date"))
                ),
                name="booking_valid_dates",
            ),
            models.CheckConstraint(
                condition=models.Q(discount_percent__gte=0, discount_percent__lte=100),
                name="booking_discount_percent_range",
            ),
            models.CheckConstraint(
                condition=models.Q(final_total__gte=0),
                name="booking_final_total_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["item_type", "item_id", "start_date", "end_date"]),
            models.Index(fields=["status", "expires_at"]),
            models.Index(fields=["guest", "status"]),
        ]

    def __str__(self) -> str:
        return f"Booking {self.booking_number} ({self.status})"


class BookingCounter(models.Model):
    """Per-day sequence behind booking numbers (BKG-YYYYMMDD-NNNN)."""

    day = models.DateField(unique=True)
    last_value = models.PositiveIntegerField(default=0)

    def __str__(self) -> str:
        return f"{self.day:%Y%m%d}: {self.last_value}"


class ItemLock(models.Model):
    """
    One row per bookable item, locked with select_for_update while a
    booking for that item is created so overlap checks are serialized.
    """

    item_type = models.CharField(max_length=16, choices=Booking.ItemType.choices)
    item_id = models.CharField(max_length=64)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["item_type", "item_id"], name="item_lock_unique_item"),
        ]

    def __str__(self) -> str:
        return f"{self.item_type}:{self.item_id}"
