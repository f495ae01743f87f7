"""
Domain Services Package

Architectural Intent:
- Stateless helpers and small state machines used by the use cases
"""

from parrot.domain.services.escape_decoder import (
    EscapeDecoder,
    EscapeState,
    EscapeAction,
    EscapeActionKind,
)
from parrot.domain.services.text import (
    LineAssembler,
    shorten_path,
    strip_escape_codes,
)

__all__ = [
    "EscapeDecoder",
    "EscapeState",
    "EscapeAction",
    "EscapeActionKind",
    "LineAssembler",
    "shorten_path",
    "strip_escape_codes",
]
