"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Any, Dict, List, Type

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus.

    Subscribing an event class also registers its name, so outbox rows
    (which only store ``event_type``) can be turned back into events.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}
        self._event_types: Dict[str, Type[DomainEvent]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        self._event_types[event_class.__name__] = event_class
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def publish(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(type(event), []):
            handler.handle(event)

    def rebuild(self, event_type: str, payload: Dict[str, Any]) -> DomainEvent:
        """Instantiate a registered event class from an outbox payload.

        Raises:
            LookupError: no event class with that name was subscribed.
        """
        try:
            event_class = self._event_types[event_type]
        except KeyError:
            raise LookupError(f"Unknown event type {event_type!r}.") from None
        return event_class.from_payload(payload)


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
