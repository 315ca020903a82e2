"""
Catalog lookup

Turns a catalog row into the CatalogEntry a snapshot is built from.
Missing or inactive items are reported as NotFoundError.
"""

import logging
from typing import Dict, Tuple, Type

from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from django.db import models  # type: ignore

from apps.bookings.domain.enums import ItemType
from apps.bookings.domain.snapshot import CatalogEntry
from apps.catalog.models import Activity, Car, TravelPackage
from shared.domain.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# model, price field, extra attributes copied into the snapshot
CATALOG_MODELS: Dict[ItemType, Tuple[Type[models.Model], str, Tuple[str, ...]]] = {
    ItemType.PACKAGE: (TravelPackage, 'price_per_person', ('duration_days',)),
    ItemType.ACTIVITY: (Activity, 'price_per_person', ('location',)),
    ItemType.CAR: (Car, 'price_per_day', ('car_model',)),
}


class DjangoCatalogLookup:
    """Catalog lookup backed by the catalog app's models"""

    def get_entry(self, item_type, item_id) -> CatalogEntry:
        try:
            kind = ItemType(item_type)
        except ValueError:
            raise ValidationError(f'Unknown item type: {item_type!r}', field='item_type')

        model, price_field, extra_fields = CATALOG_MODELS[kind]
        try:
            item = model.objects.get(pk=item_id, is_active=True)
        except (model.DoesNotExist, DjangoValidationError, ValueError):
            logger.info(f"Catalog item not found: {kind.value} {item_id}")
            raise NotFoundError(
                f'{kind.value.capitalize()} {item_id} not found',
                resource=kind.value,
            )

        return CatalogEntry(
            item_type=kind,
            item_id=str(item.pk),
            title=item.title,
            currency=item.currency,
            price=getattr(item, price_field),
            locale=item.locale,
            description=item.description,
            attributes={name: getattr(item, name) for name in extra_fields},
        )
