"""
Key Event Value Object

Architectural Intent:
- Immutable description of one keystroke delivered by the Input Source
- Named navigation keys and session shortcuts are enumerated
- Printable characters and raw escape-sequence bytes travel as CHAR events
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

ESC = "\x1b"


class Key(Enum):
    CHAR = auto()
    ENTER = auto()
    BACKSPACE = auto()
    DELETE = auto()
    LEFT = auto()
    RIGHT = auto()
    HOME = auto()
    END = auto()
    SCROLL_UP = auto()
    SCROLL_DOWN = auto()
    RECALL_PREVIOUS = auto()
    RECALL_NEXT = auto()
    NEW_SESSION = auto()
    CLOSE_SESSION = auto()
    SPLIT_HORIZONTAL = auto()
    SPLIT_VERTICAL = auto()
    TOGGLE_LINE_BREAKS = auto()


@dataclass(frozen=True)
class KeyEvent:
    """
    Value Object for a single key press.
    """
    key: Key
    char: Optional[str] = None

    def __post_init__(self):
        if self.key is Key.CHAR:
            if self.char is None or len(self.char) != 1:
                raise ValueError("CHAR events carry exactly one character")
        elif self.char is not None:
            raise ValueError(f"{self.key.name} events carry no character")

    @staticmethod
    def char_of(char: str) -> "KeyEvent":
        return KeyEvent(Key.CHAR, char)

    @staticmethod
    def escape() -> "KeyEvent":
        return KeyEvent(Key.CHAR, ESC)

    @property
    def is_escape(self) -> bool:
        return self.key is Key.CHAR and self.char == ESC

    def __str__(self):
        if self.key is Key.CHAR:
            return repr(self.char)
        return self.key.name
