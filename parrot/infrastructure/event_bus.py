"""
Event Bus Infrastructure

Architectural Intent:
- In-memory event bus implementation for publishing command lifecycle events
- Supports async subscription handlers
- A failing handler is logged and does not stop delivery to the others
"""

import logging
from typing import Callable, Awaitable
from parrot.domain.events.event_base import DomainEvent

logger = logging.getLogger(__name__)


class EventBus:
    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[DomainEvent], Awaitable[None]]]] = {}

    async def publish(self, events: list[DomainEvent]) -> None:
        for event in events:
            for event_type, handlers in self._handlers.items():
                if not isinstance(event, event_type):
                    continue
                for handler in handlers:
                    try:
                        await handler(event)
                    except Exception:
                        logger.exception(
                            "Handler %r failed for %s", handler, type(event).__name__
                        )

    def subscribe(
        self, event_type: type, handler: Callable[[DomainEvent], Awaitable[None]]
    ) -> None:
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)
