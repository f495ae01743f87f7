"""
Domain Ports Package

Architectural Intent:
- Contains port interfaces (abstract contracts) for external dependencies
- Ports define what the domain needs, adapters implement how
- Follows Hexagonal Architecture principles
"""

from parrot.domain.ports.process_port import ProcessPort, ProcessHandle
from parrot.domain.ports.display_port import DisplayPort, DisplayUnavailable, NullDisplay
from parrot.domain.ports.event_bus_port import EventBusPort

__all__ = [
    "ProcessPort",
    "ProcessHandle",
    "DisplayPort",
    "DisplayUnavailable",
    "NullDisplay",
    "EventBusPort",
]
