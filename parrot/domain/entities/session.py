"""
Session Module

Architectural Intent:
- Session aggregate bundles one workspace's history, input editor, command
  queue and process state
- Owned exclusively by the SessionManager, which assigns ids and split links
- Process state moves READY -> RUNNING -> READY; a RUNNING session may track
  the handle of its child so it can be interrupted
"""

from __future__ import annotations
from enum import Enum, auto
from typing import Optional

from parrot.domain.entities.command_queue import CommandQueue
from parrot.domain.entities.history_buffer import HistoryBuffer
from parrot.domain.entities.input_editor import InputEditor
from parrot.domain.ports.process_port import ProcessHandle


class ProcessState(Enum):
    READY = auto()
    RUNNING = auto()


class SplitDirection(Enum):
    HORIZONTAL = auto()
    VERTICAL = auto()


class Session:
    __slots__ = (
        "id",
        "working_directory",
        "split_with",
        "split_direction",
        "history",
        "editor",
        "queue",
        "_state",
        "_process",
        "_run",
        "_closed",
    )

    def __init__(
        self,
        session_id: int,
        working_directory: str,
        history: HistoryBuffer,
        editor: InputEditor,
        queue: CommandQueue,
    ):
        if session_id < 0:
            raise ValueError("Session id cannot be negative")
        self.id = session_id
        self.working_directory = working_directory
        self.split_with: Optional[int] = None
        self.split_direction: Optional[SplitDirection] = None
        self.history = history
        self.editor = editor
        self.queue = queue
        self._state = ProcessState.READY
        self._process: Optional[ProcessHandle] = None
        self._run = 0
        self._closed = False

    @property
    def state(self) -> ProcessState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is ProcessState.RUNNING

    @property
    def process(self) -> Optional[ProcessHandle]:
        return self._process

    @property
    def closed(self) -> bool:
        return self._closed

    def mark_running(self) -> int:
        """Enter RUNNING and return the id of this run."""
        if self._state is not ProcessState.READY:
            raise ValueError("Session can only start a command from READY state")
        self._state = ProcessState.RUNNING
        self._run += 1
        return self._run

    def is_current(self, run: int) -> bool:
        """True while ``run`` is still the command this session is running."""
        return not self._closed and self.is_running and self._run == run

    def attach(self, handle: ProcessHandle) -> None:
        if self._state is not ProcessState.RUNNING:
            raise ValueError("Session must be RUNNING to track a process")
        self._process = handle

    def mark_ready(self) -> None:
        self._state = ProcessState.READY
        self._process = None

    def owns(self, handle: ProcessHandle) -> bool:
        return self._process is handle

    def sync_input_lock(self) -> None:
        """Input is locked exactly while the queue is full."""
        if self.queue.is_full:
            self.editor.lock()
        else:
            self.editor.unlock()

    def release(self) -> None:
        self.history.clear()
        self.editor.clear()
        self.queue.clear()
        self._closed = True

    def __repr__(self) -> str:
        return (
            f"Session(id={self.id}, cwd={self.working_directory!r}, "
            f"split_with={self.split_with}, state={self._state.name})"
        )
