"""
Message Bus

Routes commands to their single handler and domain events to any number
of subscribers. An instance is built once by the composition root and
passed to whoever needs it; there is no module-level bus.
"""

from typing import Any, Callable, Dict, Iterable, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]
CommandHandler = Callable[[Any], Any]


class MessageBus:
    """
    Commands: one handler per command type (1:1)
    Events: any number of handlers per event type (1:N)
    """

    def __init__(self):
        self._event_handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}
        self._command_handlers: Dict[Type, CommandHandler] = {}

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        self._event_handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Registered event handler {_handler_name(handler)} for {event_type.__name__}")

    def register_command_handler(self, command_type: Type, handler: CommandHandler):
        """Only one handler can be registered per command type."""
        if command_type in self._command_handlers:
            raise ValueError(
                f"Handler for {command_type.__name__} is already registered. "
                "Commands can have only one handler."
            )
        self._command_handlers[command_type] = handler
        logger.debug(f"Registered command handler for {command_type.__name__}")

    def handlers_for(self, event_type: Type[DomainEvent]) -> List[EventHandler]:
        return list(self._event_handlers.get(event_type, []))

    def handle_command(self, command: Any) -> Any:
        """
        Run the handler registered for the command's type

        Errors raised by the handler propagate to the caller unchanged.
        """
        command_type = type(command)
        handler = self._command_handlers.get(command_type)
        if handler is None:
            raise ValueError(f"No handler registered for command {command_type.__name__}")

        logger.info(f"Handling command: {command_type.__name__}")
        try:
            return handler(command)
        except Exception as e:
            logger.warning(f"Command {command_type.__name__} failed: {e}")
            raise

    def publish_events(self, events: Iterable[DomainEvent]) -> int:
        """
        Deliver events to their subscribers

        A failing handler is logged and skipped; the remaining handlers
        still run. Returns the number of handler invocations that failed.
        """
        failures = 0
        for event in events:
            event_type = type(event)
            handlers = self._event_handlers.get(event_type, [])
            if not handlers:
                logger.debug(f"No handlers registered for event {event_type.__name__}")
                continue

            logger.info(f"Publishing event: {event_type.__name__} (ID: {event.event_id})")
            for handler in handlers:
                try:
                    handler(event)
                except Exception as e:
                    failures += 1
                    logger.error(
                        f"Error in event handler {_handler_name(handler)} "
                        f"for event {event_type.__name__}: {e}",
                        exc_info=True,
                    )
        return failures


def _handler_name(handler: Callable) -> str:
    return getattr(handler, '__qualname__', None) or handler.__class__.__name__
