"""
Command Queue Module

Architectural Intent:
- Bounded FIFO of commands waiting for a session's running command to finish
- Rejects instead of overflowing; the FULL state drives input backpressure
"""

from collections import deque
from enum import Enum, auto
from typing import Optional

DEFAULT_QUEUE_CAPACITY = 10


class QueueState(Enum):
    NORMAL = auto()
    FULL = auto()


class CommandQueue:
    def __init__(self, capacity: int = DEFAULT_QUEUE_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("Queue capacity must be positive")
        self._capacity = capacity
        self._entries: deque[str] = deque()
        self._state = QueueState.NORMAL

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def state(self) -> QueueState:
        return self._state

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= self._capacity

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def enqueue(self, command: str) -> bool:
        """Append ``command``; returns False and leaves the queue untouched when full."""
        if self.is_full:
            self._state = QueueState.FULL
            return False
        self._entries.append(command)
        self._update_state()
        return True

    def dequeue(self) -> Optional[str]:
        if not self._entries:
            return None
        command = self._entries.popleft()
        self._update_state()
        return command

    def clear(self) -> None:
        self._entries.clear()
        self._update_state()

    def pending(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def _update_state(self) -> None:
        self._state = QueueState.FULL if self.is_full else QueueState.NORMAL

    def __repr__(self) -> str:
        return (
            f"CommandQueue(count={len(self._entries)}/{self._capacity}, "
            f"state={self._state.name})"
        )
