"""
Command Lifecycle Events

Published by the CommandExecutor:
- CommandQueuedEvent: a submission was deferred because the session was busy
- CommandStartedEvent: a child was spawned (captured or interactive)
- CommandFinishedEvent: the child ended or failed to start; the session is READY
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING

from parrot.domain.events.event_base import DomainEvent
from parrot.domain.value_objects.exit_status import ExitStatus

if TYPE_CHECKING:
    from parrot.domain.entities.session import Session


@dataclass(frozen=True)
class CommandEvent(DomainEvent):
    command: str = ""
    session: Optional["Session"] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class CommandQueuedEvent(CommandEvent):
    queue_length: int = 0


@dataclass(frozen=True)
class CommandStartedEvent(CommandEvent):
    interactive: bool = False
    pid: Optional[int] = None


@dataclass(frozen=True)
class CommandFinishedEvent(CommandEvent):
    status: Optional[ExitStatus] = None
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["command"] = self.command
        data["status"] = str(self.status) if self.status else None
        data["error"] = self.error
        return data
