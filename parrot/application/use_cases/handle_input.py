"""
Handle Input Use Case

Architectural Intent:
- Routes each key event from the Input Source to the escape decoder, the
  SessionManager or the active session's InputEditor
- Session management and history scrolling stay available while input is
  locked; editing, recall and submit do not
- tick() is the periodic step of the event loop: it expires stale escape
  sequences and drains the active session's queue
"""

from __future__ import annotations
import logging
from typing import Callable, Optional

from parrot.application.use_cases.execute_command import CommandExecutor
from parrot.application.use_cases.manage_sessions import SessionManager
from parrot.domain.entities.display_options import DisplayOptions
from parrot.domain.entities.input_editor import InputEditor, SubmitOutcome
from parrot.domain.entities.session import SplitDirection
from parrot.domain.services.escape_decoder import (
    EscapeAction,
    EscapeActionKind,
    EscapeDecoder,
)
from parrot.domain.value_objects.key_event import Key, KeyEvent

logger = logging.getLogger(__name__)


class InputHandler:
    def __init__(
        self,
        manager: SessionManager,
        executor: CommandExecutor,
        decoder: Optional[EscapeDecoder] = None,
        options: Optional[DisplayOptions] = None,
    ):
        self.manager = manager
        self.executor = executor
        self.decoder = decoder or EscapeDecoder()
        self.options = options or DisplayOptions()

        self._always: dict[Key, Callable[[], object]] = {
            Key.NEW_SESSION: manager.create,
            Key.CLOSE_SESSION: manager.close,
            Key.SPLIT_HORIZONTAL: lambda: manager.create_split(SplitDirection.HORIZONTAL),
            Key.SPLIT_VERTICAL: lambda: manager.create_split(SplitDirection.VERTICAL),
            Key.SCROLL_UP: lambda: manager.active.history.scroll_up(),
            Key.SCROLL_DOWN: lambda: manager.active.history.scroll_down(),
            Key.TOGGLE_LINE_BREAKS: self.options.toggle_line_breaks,
        }
        self._editing: dict[Key, Callable[[InputEditor], object]] = {
            Key.BACKSPACE: InputEditor.backspace,
            Key.DELETE: InputEditor.delete,
            Key.LEFT: InputEditor.move_left,
            Key.RIGHT: InputEditor.move_right,
            Key.HOME: InputEditor.move_home,
            Key.END: InputEditor.move_end,
            Key.RECALL_PREVIOUS: InputEditor.recall_previous,
            Key.RECALL_NEXT: InputEditor.recall_next,
        }

    def handle(self, event: KeyEvent, now: Optional[float] = None) -> bool:
        """Apply one key event. Returns True when the user asked to exit."""
        if event.key is Key.CHAR and self.decoder.wants(event.char, now):
            action = self.decoder.feed(event.char, now)
            if action is not None:
                self._dispatch_escape(action)
            return False
        if self.decoder.pending:
            self.decoder.reset()

        shortcut = self._always.get(event.key)
        if shortcut is not None:
            shortcut()
            return False

        session = self.manager.active
        editor = session.editor
        if editor.locked:
            logger.debug("Input locked, ignoring %s", event)
            return False

        if event.key is Key.ENTER:
            outcome = editor.submit(lambda command: self.executor.submit(session, command))
            return outcome is SubmitOutcome.EXIT

        if event.key is Key.CHAR:
            editor.insert(event.char)
            return False

        edit = self._editing.get(event.key)
        if edit is not None:
            edit(editor)
        return False

    def tick(self, now: Optional[float] = None) -> None:
        self.decoder.expire(now)
        self.executor.drain(self.manager.active)

    def _dispatch_escape(self, action: EscapeAction) -> None:
        if action.kind is EscapeActionKind.SWITCH_TO:
            self.manager.switch_to(action.index)
        elif action.kind is EscapeActionKind.NEXT:
            self.manager.next()
        elif action.kind is EscapeActionKind.PREVIOUS:
            self.manager.prev()
        elif action.kind is EscapeActionKind.SPLIT_PANE:
            self.manager.switch_split_pane()
