"""
Composition root for the booking context

Builds the message bus, registers command and event handlers, and returns
a BookingService. Collaborators can be swapped (tests pass fakes);
defaults are the Django-backed implementations.
"""

from apps.bookings.application import command_handlers as commands
from apps.bookings.application.event_handlers import NOTIFICATION_TYPES, BookingNotificationHandler
from apps.bookings.repository import DjangoBookingRepository
from apps.bookings.services import BookingService
from apps.catalog.lookup import DjangoCatalogLookup
from apps.guests.lookup import DjangoGuestLookup
from apps.notifications.notifier import CeleryNotifier
from shared.application.message_bus import MessageBus


def bootstrap(repository=None, catalog=None, guests=None, notifier=None) -> BookingService:
    repository = repository or DjangoBookingRepository()
    catalog = catalog or DjangoCatalogLookup()
    guests = guests or DjangoGuestLookup()
    notifier = notifier or CeleryNotifier()

    bus = MessageBus()

    notification_handler = BookingNotificationHandler(guests, notifier)
    for event_type in NOTIFICATION_TYPES:
        bus.register_event_handler(event_type, notification_handler)

    bus.register_command_handler(
        commands.CreateBookingCommand,
        commands.CreateBookingHandler(repository, catalog, guests, bus).handle,
    )
    for command_type, handler_cls in (
        (commands.MarkBookingPaidCommand, commands.MarkBookingPaidHandler),
        (commands.CancelBookingCommand, commands.CancelBookingHandler),
        (commands.ExpireBookingCommand, commands.ExpireBookingHandler),
        (commands.ExpireOverdueBookingsCommand, commands.ExpireOverdueBookingsHandler),
        (commands.UpdateBookingQuantitiesCommand, commands.UpdateBookingQuantitiesHandler),
        (commands.UpdateBookingMetadataCommand, commands.UpdateBookingMetadataHandler),
    ):
        bus.register_command_handler(command_type, handler_cls(repository, bus).handle)

    return BookingService(bus, repository)
