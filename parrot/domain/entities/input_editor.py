"""
Input Editor Module

Architectural Intent:
- Line-editing state machine for one session's prompt
- Holds a bounded text buffer, cursor, horizontal display window and lock flag
- Keeps a bounded ring of previously submitted commands for recall
- Submission is handed to a caller-supplied dispatcher so the editor
  stays free of execution concerns
"""

from __future__ import annotations
from enum import Enum, auto
from typing import Callable, Optional

DEFAULT_INPUT_CAPACITY = 512
DEFAULT_RECALL_CAPACITY = 256
EXIT_SENTINEL = "exit"

PRINTABLE_MIN = 32
PRINTABLE_MAX = 126


class SubmitOutcome(Enum):
    IGNORED = auto()
    EXIT = auto()
    DISPATCHED = auto()


class RecallRing:
    """Bounded list of distinct-adjacent submitted commands, oldest first."""

    def __init__(self, capacity: int = DEFAULT_RECALL_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("Recall capacity must be positive")
        self._capacity = capacity
        self._entries: list[str] = []
        # len(self._entries) means "fresh input", not browsing
        self._position = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_fresh(self) -> bool:
        return self._position == len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, command: str) -> bool:
        """Store ``command`` unless it repeats the newest entry."""
        if self._entries and self._entries[-1] == command:
            self.reset()
            return False
        if len(self._entries) >= self._capacity:
            self._entries.pop(0)
        self._entries.append(command)
        self.reset()
        return True

    def reset(self) -> None:
        self._position = len(self._entries)

    def previous(self) -> Optional[str]:
        if self._position > 0:
            self._position -= 1
            return self._entries[self._position]
        return None

    def next(self) -> Optional[str]:
        """Step toward newer entries; returns "" when leaving history."""
        if self._position < len(self._entries) - 1:
            self._position += 1
            return self._entries[self._position]
        if self._position == len(self._entries) - 1:
            self._position = len(self._entries)
            return ""
        return None


class InputEditor:
    def __init__(
        self,
        capacity: int = DEFAULT_INPUT_CAPACITY,
        recall_capacity: int = DEFAULT_RECALL_CAPACITY,
    ) -> None:
        if capacity < 2:
            raise ValueError("Input capacity must leave room for one character")
        self._max_length = capacity - 1
        self._text = ""
        self._cursor = 0
        self._display_start = 0
        self._locked = False
        self._recall = RecallRing(recall_capacity)

    @property
    def text(self) -> str:
        return self._text

    @property
    def length(self) -> int:
        return len(self._text)

    @property
    def max_length(self) -> int:
        return self._max_length

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def display_start(self) -> int:
        return self._display_start

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def recall(self) -> RecallRing:
        return self._recall

    def lock(self) -> None:
        self._locked = True

    def unlock(self) -> None:
        self._locked = False

    def insert(self, char: str) -> bool:
        if self._locked or len(char) != 1:
            return False
        if not PRINTABLE_MIN <= ord(char) <= PRINTABLE_MAX:
            return False
        if len(self._text) >= self._max_length:
            return False
        self._text = self._text[: self._cursor] + char + self._text[self._cursor :]
        self._cursor += 1
        return True

    def backspace(self) -> bool:
        if self._locked or self._cursor == 0:
            return False
        self._text = self._text[: self._cursor - 1] + self._text[self._cursor :]
        self._cursor -= 1
        return True

    def delete(self) -> bool:
        if self._locked or self._cursor >= len(self._text):
            return False
        self._text = self._text[: self._cursor] + self._text[self._cursor + 1 :]
        return True

    def move_left(self) -> bool:
        if self._locked or self._cursor == 0:
            return False
        self._cursor -= 1
        return True

    def move_right(self) -> bool:
        if self._locked or self._cursor >= len(self._text):
            return False
        self._cursor += 1
        return True

    def move_home(self) -> bool:
        if self._locked:
            return False
        self._cursor = 0
        self._display_start = 0
        return True

    def move_end(self) -> bool:
        if self._locked:
            return False
        self._cursor = len(self._text)
        return True

    def submit(self, dispatch: Callable[[str], None]) -> SubmitOutcome:
        """Hand the current line to ``dispatch`` and reset to fresh input."""
        if self._locked or not self._text:
            return SubmitOutcome.IGNORED
        command = self._text
        if command == EXIT_SENTINEL:
            return SubmitOutcome.EXIT
        self._recall.record(command)
        dispatch(command)
        self.clear()
        return SubmitOutcome.DISPATCHED

    def recall_previous(self) -> bool:
        if self._locked:
            return False
        entry = self._recall.previous()
        if entry is None:
            return False
        self._load(entry)
        return True

    def recall_next(self) -> bool:
        if self._locked:
            return False
        entry = self._recall.next()
        if entry is None:
            return False
        self._load(entry)
        return True

    def clear(self) -> None:
        self._text = ""
        self._cursor = 0
        self._display_start = 0
        self._recall.reset()

    def visible(self, width: int) -> tuple[str, int]:
        """Slice of the buffer shown in ``width`` columns and the cursor column.

        One column is kept for the cursor when it sits past the last character.
        """
        if width <= 0:
            return "", 0
        self._display_start = min(
            self._display_start, max(0, len(self._text) - width + 1)
        )
        if self._cursor < self._display_start:
            self._display_start = self._cursor
        elif self._cursor >= self._display_start + width:
            self._display_start = self._cursor - width + 1
        start = self._display_start
        return self._text[start : start + width], self._cursor - start

    def _load(self, text: str) -> None:
        self._text = text[: self._max_length]
        self._cursor = len(self._text)
        self._display_start = 0

    def __repr__(self) -> str:
        return (
            f"InputEditor(text={self._text!r}, cursor={self._cursor}, "
            f"locked={self._locked})"
        )
