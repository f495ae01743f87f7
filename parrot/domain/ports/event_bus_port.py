"""
Event Bus Port

Architectural Intent:
- Abstract interface for publishing command lifecycle events
- Decouples the executor from whoever drains queues or refreshes the screen
"""

from typing import Protocol, Callable, Awaitable, runtime_checkable
from parrot.domain.events.event_base import DomainEvent


@runtime_checkable
class EventBusPort(Protocol):
    async def publish(self, events: list[DomainEvent]) -> None: ...

    def subscribe(
        self, event_type: type, handler: Callable[[DomainEvent], Awaitable[None]]
    ) -> None: ...
