"""
Escape Sequence Decoder

Architectural Intent:
- Explicit state machine for Alt-style shortcuts arriving as raw bytes
- IDLE -> SAW_ESCAPE -> SAW_BRACKET -> dispatch, with a timeout abort
- Non-blocking: the caller feeds bytes as they arrive and calls expire()
  on every tick, so an abandoned sequence never stalls the input loop

Recognised sequences (after ESC):
- "1".."9": switch to that 1-indexed session
- "+" or "=": next session
- "-": previous session
- "[" then "A" | "B" | "C" | "D": switch to the split partner
"""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional

from parrot.domain.value_objects.key_event import ESC

logger = logging.getLogger(__name__)

DEFAULT_ESCAPE_TIMEOUT = 0.1

_ARROW_CODES = frozenset("ABCD")


class EscapeState(Enum):
    IDLE = auto()
    SAW_ESCAPE = auto()
    SAW_BRACKET = auto()


class EscapeActionKind(Enum):
    SWITCH_TO = auto()
    NEXT = auto()
    PREVIOUS = auto()
    SPLIT_PANE = auto()


@dataclass(frozen=True)
class EscapeAction:
    kind: EscapeActionKind
    index: Optional[int] = None


class EscapeDecoder:
    def __init__(
        self,
        timeout: float = DEFAULT_ESCAPE_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._timeout = timeout
        self._clock = clock
        self._state = EscapeState.IDLE
        self._last_byte_at = 0.0

    @property
    def state(self) -> EscapeState:
        return self._state

    @property
    def pending(self) -> bool:
        return self._state is not EscapeState.IDLE

    def wants(self, char: str, now: Optional[float] = None) -> bool:
        """True if ``char`` belongs to an escape sequence and must be fed here."""
        self.expire(now)
        return self.pending or char == ESC

    def expire(self, now: Optional[float] = None) -> bool:
        """Abandon a sequence whose next byte did not arrive in time."""
        if not self.pending:
            return False
        now = self._clock() if now is None else now
        if now - self._last_byte_at > self._timeout:
            logger.debug("Escape sequence timed out in state %s", self._state.name)
            self.reset()
            return True
        return False

    def reset(self) -> None:
        self._state = EscapeState.IDLE

    def feed(self, char: str, now: Optional[float] = None) -> Optional[EscapeAction]:
        now = self._clock() if now is None else now

        if self._state is EscapeState.IDLE:
            if char == ESC:
                self._state = EscapeState.SAW_ESCAPE
                self._last_byte_at = now
            return None

        if self._state is EscapeState.SAW_ESCAPE:
            self._state = EscapeState.IDLE
            if "1" <= char <= "9":
                return EscapeAction(EscapeActionKind.SWITCH_TO, index=int(char) - 1)
            if char in ("+", "="):
                return EscapeAction(EscapeActionKind.NEXT)
            if char == "-":
                return EscapeAction(EscapeActionKind.PREVIOUS)
            if char == "[":
                self._state = EscapeState.SAW_BRACKET
                self._last_byte_at = now
                return None
            logger.debug("Discarding unknown escape sequence byte %r", char)
            return None

        self._state = EscapeState.IDLE
        if char in _ARROW_CODES:
            return EscapeAction(EscapeActionKind.SPLIT_PANE)
        logger.debug("Discarding unknown bracket sequence byte %r", char)
        return None
