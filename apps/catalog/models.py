"""Catalog models: package tours, activities and car rentals."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class CatalogItem(models.Model):
    """Fields shared by every bookable item."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    currency = models.CharField(max_length=3, default="EUR")
    locale = models.CharField(max_length=8, default="en")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["title"]

    def __str__(self) -> str:
        return self.title


class TravelPackage(CatalogItem):
    """Package tour priced per person."""

    price_per_person = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    duration_days = models.PositiveSmallIntegerField(default=1)

    class Meta(CatalogItem.Meta):
        verbose_name = _("Travel package")
        verbose_name_plural = _("Travel packages")


class Activity(CatalogItem):
    """Activity priced per person."""

    price_per_person = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    location = models.CharField(max_length=255, blank=True)

    class Meta(CatalogItem.Meta):
        verbose_name = _("Activity")
        verbose_name_plural = _("Activities")


class Car(CatalogItem):
    """Rental car priced per day."""

    price_per_day = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    car_model = models.CharField(max_length=120, blank=True)

    class Meta(CatalogItem.Meta):
        verbose_name = _("Car")
        verbose_name_plural = _("Cars")
