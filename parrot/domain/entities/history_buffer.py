"""
History Buffer Module

Architectural Intent:
- Append-only log of rendered lines for one session
- Lines are immutable once appended and only released with the whole buffer
- Capacity is tracked explicitly and doubles on overflow, never shrinks
- Scroll offset is a distance from the newest line, read by the Renderer
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional

from parrot.domain.entities.display_options import DisplayOptions

DEFAULT_HISTORY_CAPACITY = 500


class LineType(Enum):
    NORMAL = auto()
    COMMAND = auto()
    RAW = auto()


@dataclass(frozen=True)
class HistoryLine:
    text: str
    line_type: LineType = LineType.NORMAL
    created_at: datetime = field(default_factory=datetime.now)


class HistoryBuffer:
    def __init__(
        self,
        options: Optional[DisplayOptions] = None,
        capacity: int = DEFAULT_HISTORY_CAPACITY,
    ) -> None:
        if capacity < 1:
            raise ValueError("History capacity must be positive")
        self._options = options or DisplayOptions()
        self._lines: list[HistoryLine] = []
        self._capacity = capacity
        self._scroll_offset = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def count(self) -> int:
        return len(self._lines)

    @property
    def scroll_offset(self) -> int:
        return self._scroll_offset

    @property
    def lines(self) -> tuple[HistoryLine, ...]:
        return tuple(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __getitem__(self, index: int) -> HistoryLine:
        return self._lines[index]

    def append(self, text: str, line_type: LineType = LineType.NORMAL) -> HistoryLine:
        if len(self._lines) >= self._capacity:
            self._capacity *= 2
        if not self._options.line_break_enabled:
            text = text.replace("\n", " ")
        line = HistoryLine(text=text, line_type=line_type)
        self._lines.append(line)
        return line

    def scroll_up(self) -> None:
        if self._scroll_offset < len(self._lines) - 1:
            self._scroll_offset += 1

    def scroll_down(self) -> None:
        if self._scroll_offset > 0:
            self._scroll_offset -= 1

    def window(self, height: int) -> list[HistoryLine]:
        """Lines visible in a viewport of ``height`` rows at the current offset."""
        if height <= 0:
            return []
        end = len(self._lines) - self._scroll_offset
        start = max(0, end - height)
        return self._lines[start:end]

    def clear(self) -> None:
        self._lines.clear()
        self._scroll_offset = 0

    def __repr__(self) -> str:
        return (
            f"HistoryBuffer(count={len(self._lines)}, capacity={self._capacity}, "
            f"scroll_offset={self._scroll_offset})"
        )
