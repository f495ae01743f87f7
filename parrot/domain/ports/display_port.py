"""
Display Port

Architectural Intent:
- Lets the executor hand the real terminal to an interactive child
- The Renderer implements it; headless runs use NullDisplay
"""

from contextlib import contextmanager
from typing import ContextManager, Iterator, Protocol, runtime_checkable


class DisplayUnavailable(Exception):
    """The display cannot be handed over to a child right now."""


@runtime_checkable
class DisplayPort(Protocol):
    def suspend(self) -> ContextManager[None]: ...


class NullDisplay:
    """Display used when nothing is drawn, e.g. in tests."""

    @contextmanager
    def suspend(self) -> Iterator[None]:
        yield
