"""
Manage Sessions Use Case

Architectural Intent:
- Owns the ordered collection of sessions, the active index and split links
- Session ids are array positions; closing compacts and renumbers
- The active session's working directory is the process-wide current
  directory, so switching persists the outgoing one and applies the incoming one
- Impossible operations (capacity reached, closing the last session) are
  ignored rather than raised
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from typing import Callable, Optional

from parrot.domain.entities.command_queue import CommandQueue, DEFAULT_QUEUE_CAPACITY
from parrot.domain.entities.display_options import DisplayOptions
from parrot.domain.entities.history_buffer import HistoryBuffer, DEFAULT_HISTORY_CAPACITY
from parrot.domain.entities.input_editor import (
    InputEditor,
    DEFAULT_INPUT_CAPACITY,
    DEFAULT_RECALL_CAPACITY,
)
from parrot.domain.entities.session import Session, SplitDirection
from parrot.domain.services.banner import show_welcome

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 8


@dataclass
class SessionFactory:
    """Builds fully initialised sessions with the configured limits."""

    options: DisplayOptions = field(default_factory=DisplayOptions)
    history_capacity: int = DEFAULT_HISTORY_CAPACITY
    queue_capacity: int = DEFAULT_QUEUE_CAPACITY
    input_capacity: int = DEFAULT_INPUT_CAPACITY
    recall_capacity: int = DEFAULT_RECALL_CAPACITY
    welcome: bool = True

    def build(self, session_id: int, working_directory: str) -> Session:
        session = Session(
            session_id=session_id,
            working_directory=working_directory,
            history=HistoryBuffer(self.options, self.history_capacity),
            editor=InputEditor(self.input_capacity, self.recall_capacity),
            queue=CommandQueue(self.queue_capacity),
        )
        if self.welcome:
            show_welcome(session.history)
        return session


class SessionManager:
    def __init__(
        self,
        factory: SessionFactory,
        canceller: Callable[[Session], None],
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        working_directory: Optional[str] = None,
    ):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._factory = factory
        self._canceller = canceller
        self._max_sessions = max_sessions
        cwd = working_directory or os.getcwd()
        self._sessions: list[Session] = [factory.build(0, cwd)]
        self._active = 0
        if working_directory:
            self._apply_directory(self.active)

    @property
    def sessions(self) -> tuple[Session, ...]:
        return tuple(self._sessions)

    @property
    def count(self) -> int:
        return len(self._sessions)

    @property
    def max_sessions(self) -> int:
        return self._max_sessions

    @property
    def active_index(self) -> int:
        return self._active

    @property
    def active(self) -> Session:
        return self._sessions[self._active]

    def get(self, session_id: int) -> Optional[Session]:
        if 0 <= session_id < len(self._sessions):
            return self._sessions[session_id]
        return None

    def is_active(self, session: Session) -> bool:
        return self.active is session

    def split_map(self) -> dict[int, int]:
        return {
            s.id: s.split_with for s in self._sessions if s.split_with is not None
        }

    def create(self) -> Optional[Session]:
        if len(self._sessions) >= self._max_sessions:
            logger.debug("Session limit of %d reached", self._max_sessions)
            return None
        session = self._factory.build(len(self._sessions), self.active.working_directory)
        self._sessions.append(session)
        logger.info("Created session %d in %s", session.id, session.working_directory)
        return session

    def create_split(self, direction: SplitDirection) -> Optional[Session]:
        origin = self.active
        session = self.create()
        if session is None:
            return None
        if origin.split_with is not None:
            self._unlink(origin)
        session.split_with = origin.id
        session.split_direction = direction
        origin.split_with = session.id
        origin.split_direction = direction
        self.switch_to(session.id)
        return session

    def switch_to(self, session_id: int) -> bool:
        if not 0 <= session_id < len(self._sessions):
            logger.debug("Ignoring switch to missing session %d", session_id)
            return False
        self._capture_directory(self.active)
        self._active = session_id
        self._apply_directory(self.active)
        return True

    def next(self) -> bool:
        return self.switch_to((self._active + 1) % len(self._sessions))

    def prev(self) -> bool:
        return self.switch_to((self._active - 1) % len(self._sessions))

    def switch_split_pane(self) -> bool:
        partner = self.active.split_with
        if partner is None:
            return False
        return self.switch_to(partner)

    def close(self) -> bool:
        if len(self._sessions) <= 1:
            logger.debug("Refusing to close the last session")
            return False

        removed = self._active
        session = self._sessions[removed]

        if session.is_running:
            self._canceller(session)

        if session.split_with is not None:
            self._unlink(session)

        session.release()
        del self._sessions[removed]

        for index, other in enumerate(self._sessions):
            other.id = index
            if other.split_with is not None and other.split_with > removed:
                other.split_with -= 1

        if self._active >= len(self._sessions):
            self._active = len(self._sessions) - 1
        self._apply_directory(self.active)
        logger.info("Closed session %d, %d remaining", removed, len(self._sessions))
        return True

    def _unlink(self, session: Session) -> None:
        partner = self._sessions[session.split_with]
        partner.split_with = None
        partner.split_direction = None
        session.split_with = None
        session.split_direction = None

    def _capture_directory(self, session: Session) -> None:
        try:
            session.working_directory = os.getcwd()
        except OSError as e:
            logger.warning("Cannot read current directory: %s", e)

    def _apply_directory(self, session: Session) -> None:
        try:
            os.chdir(session.working_directory)
        except OSError as e:
            logger.warning(
                "Cannot enter %s for session %d: %s",
                session.working_directory,
                session.id,
                e,
            )
