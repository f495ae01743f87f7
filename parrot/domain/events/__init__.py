"""
Domain Events Package

Architectural Intent:
- Contains domain events and their base class
- Events are the primary mechanism for reacting to command completion
"""

from parrot.domain.events.event_base import DomainEvent
from parrot.domain.events.command_events import (
    CommandEvent,
    CommandQueuedEvent,
    CommandStartedEvent,
    CommandFinishedEvent,
)

__all__ = [
    "DomainEvent",
    "CommandEvent",
    "CommandQueuedEvent",
    "CommandStartedEvent",
    "CommandFinishedEvent",
]
