"""Guest lookup used by the booking service and notification handlers."""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore

from apps.guests.models import Guest
from shared.domain.exceptions import NotFoundError


@dataclass(frozen=True)
class GuestContact:
    id: UUID
    name: str = ''
    email: Optional[str] = None
    phone: Optional[str] = None
    locale: Optional[str] = None
    is_expired: bool = False


class DjangoGuestLookup:

    def get_contact(self, guest_id) -> GuestContact:
        try:
            guest = Guest.objects.get(pk=guest_id)
        except (Guest.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFoundError(f'Guest {guest_id} not found', resource='guest')

        return GuestContact(
            id=guest.id,
            name=guest.name,
            email=guest.email or None,
            phone=guest.phone or None,
            locale=guest.locale or None,
            is_expired=guest.is_expired(),
        )
