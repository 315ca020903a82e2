"""Guest model."""

from __future__ import annotations

import uuid

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Guest(models.Model):
    """Session-scoped guest; no account is required to book."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session_id = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=32, blank=True)
    locale = models.CharField(max_length=8, default="en")
    expires_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text=_("Session expiry; an expired guest cannot create bookings."),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Guest")
        verbose_name_plural = _("Guests")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name or self.session_id

    def is_expired(self) -> bool:
        return bool(self.expires_at and timezone.now() > self.expires_at)
