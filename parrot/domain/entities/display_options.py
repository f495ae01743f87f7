from dataclasses import dataclass
from datetime import datetime
from typing import Optional

TIME_FORMAT_24H = "24h"
TIME_FORMAT_12H = "12h"

_STRFTIME = {
    TIME_FORMAT_24H: "%H:%M:%S",
    TIME_FORMAT_12H: "%I:%M:%S %p",
}


@dataclass
class DisplayOptions:
    """Process-wide presentation switches, shared by reference."""

    line_break_enabled: bool = True
    time_format: str = TIME_FORMAT_24H

    def __post_init__(self) -> None:
        if self.time_format not in _STRFTIME:
            raise ValueError(f"Unknown time format: {self.time_format!r}")

    def toggle_line_breaks(self) -> bool:
        self.line_break_enabled = not self.line_break_enabled
        return self.line_break_enabled

    def clock(self, now: Optional[datetime] = None) -> str:
        return (now or datetime.now()).strftime(_STRFTIME[self.time_format])
