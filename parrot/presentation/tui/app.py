"""
Parrot TUI

Architectural Intent:
- Textual-based Renderer and Input Source for the session engine
- Reads core state on every tick: tabs, history window(s), prompt line
- Translates Textual key events into KeyEvents for the InputHandler
- Hands the real terminal to interactive children through App.suspend()
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional
import logging
import os

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult, SuspendNotSupported
from textual.containers import Container
from textual.widgets import Static

from parrot.composition_root import ParrotContext
from parrot.domain.entities.display_options import DisplayOptions
from parrot.domain.entities.history_buffer import HistoryBuffer, LineType
from parrot.domain.entities.session import Session, SplitDirection
from parrot.domain.ports.display_port import DisplayUnavailable
from parrot.domain.services.text import shorten_path
from parrot.domain.value_objects.key_event import ESC, Key, KeyEvent

logger = logging.getLogger(__name__)

LINE_STYLES = {
    LineType.NORMAL: "",
    LineType.COMMAND: "bold green",
    LineType.RAW: "cyan",
}

MIN_TAB_WIDTH = 15

KEY_MAP = {
    "enter": Key.ENTER,
    "backspace": Key.BACKSPACE,
    "delete": Key.DELETE,
    "left": Key.LEFT,
    "right": Key.RIGHT,
    "home": Key.HOME,
    "end": Key.END,
    "up": Key.SCROLL_UP,
    "down": Key.SCROLL_DOWN,
    "shift+up": Key.RECALL_PREVIOUS,
    "shift+down": Key.RECALL_NEXT,
}

ALT_ARROWS = {"alt+up": "A", "alt+down": "B", "alt+right": "C", "alt+left": "D"}


def translate_key(key: str, character: Optional[str]) -> list[KeyEvent]:
    """Map one Textual key to the KeyEvents the InputHandler understands."""
    if key in KEY_MAP:
        return [KeyEvent(KEY_MAP[key])]
    if key == "escape":
        return [KeyEvent.escape()]
    if key in ALT_ARROWS:
        return [KeyEvent.escape(), KeyEvent.char_of("["), KeyEvent.char_of(ALT_ARROWS[key])]
    if key.startswith("alt+"):
        rest = key[len("alt+"):]
        named = {"plus": "+", "minus": "-", "equals_sign": "="}.get(rest, rest)
        if len(named) == 1:
            return [KeyEvent.escape(), KeyEvent.char_of(named)]
        return []
    if character and len(character) == 1 and (character == ESC or character.isprintable()):
        return [KeyEvent.char_of(character)]
    return []


def render_tabs(sessions: tuple[Session, ...], active: int, width: int, home: str) -> Text:
    text = Text()
    if not sessions:
        return text
    tab_width = max(MIN_TAB_WIDTH, width // len(sessions))
    for session in sessions:
        label = f" [{session.id + 1}] {shorten_path(session.working_directory, home)} "
        if len(label) > tab_width:
            label = label[: max(0, tab_width - 4)] + "... "
        style = "black on cyan" if session.id == active else "white"
        text.append(label.ljust(tab_width), style=style)
    return text


def render_history(history: HistoryBuffer, height: int) -> Text:
    text = Text()
    for index, line in enumerate(history.window(height)):
        if index:
            text.append("\n")
        text.append(line.text, style=LINE_STYLES[line.line_type])
    return text


def render_prompt(
    session: Session,
    options: DisplayOptions,
    width: int,
    now: Optional[datetime] = None,
) -> tuple[Text, int]:
    """Build the prompt line; returns it with the cursor column."""
    queue = session.queue
    text = Text()
    clock_style = "bold red blink" if queue.is_full else "bold yellow"
    text.append(f"[{options.clock(now)}]: ", style=clock_style)
    if session.is_running:
        text.append("[RUNNING] ", style="bold red")
    elif not queue.is_empty:
        text.append(f"[QUEUED:{len(queue)}/{queue.capacity}] ", style="bold cyan")

    available = max(0, width - len(text) - 2)
    editor = session.editor
    if editor.locked:
        text.append("#" * available, style="bold red")
        return text, len(text)

    visible, column = editor.visible(available)
    prefix = len(text)
    text.append(visible)
    return text, prefix + column


class TextualDisplay:
    """DisplayPort handing the terminal to a child via App.suspend()."""

    def __init__(self, app: App):
        self._app = app

    @contextmanager
    def suspend(self) -> Iterator[None]:
        try:
            with self._app.suspend():
                yield
        except SuspendNotSupported as e:
            raise DisplayUnavailable(str(e)) from e
        self._app.refresh()


class ParrotApp(App):
    """A Textual app multiplexing shell sessions."""

    CSS = """
    Screen {
        layout: vertical;
    }
    #tabs {
        height: 1;
    }
    #panes {
        height: 1fr;
        layout: horizontal;
    }
    #panes.stacked {
        layout: vertical;
    }
    .pane {
        width: 1fr;
        height: 1fr;
    }
    #secondary {
        border-left: solid $accent;
        display: none;
    }
    #panes.split #secondary {
        display: block;
    }
    #panes.stacked #secondary {
        border-left: none;
        border-top: solid $accent;
    }
    #prompt {
        height: 1;
    }
    """

    BINDINGS = [
        ("ctrl+t", "new_session", "New terminal"),
        ("ctrl+w", "close_session", "Close terminal"),
        ("ctrl+s", "split_horizontal", "Split horizontally"),
        ("ctrl+v", "split_vertical", "Split vertically"),
        ("ctrl+b", "toggle_line_breaks", "Toggle line breaks"),
    ]

    def __init__(self, context: ParrotContext):
        super().__init__()
        self.context = context
        self.handler = context.handler
        self.manager = context.manager
        context.executor.display = TextualDisplay(self)
        self._home = os.path.expanduser("~")
        self._timer = None

    def compose(self) -> ComposeResult:
        yield Static(id="tabs")
        yield Container(
            Static(id="primary", classes="pane"),
            Static(id="secondary", classes="pane"),
            id="panes",
        )
        yield Static(id="prompt")

    def on_mount(self) -> None:
        self._timer = self.set_interval(
            self.context.config.display.tick_interval, self._tick
        )
        self.refresh_view()

    def on_unmount(self) -> None:
        if self._timer:
            self._timer.stop()
        self.context.executor.shutdown(self.manager.sessions)

    def on_key(self, event: events.Key) -> None:
        translated = translate_key(event.key, event.character)
        if not translated:
            return
        event.stop()
        event.prevent_default()
        for key_event in translated:
            if self.handler.handle(key_event):
                self.exit()
                return
        self.refresh_view()

    def _press(self, key: Key) -> None:
        self.handler.handle(KeyEvent(key))
        self.refresh_view()

    def action_new_session(self) -> None:
        self._press(Key.NEW_SESSION)

    def action_close_session(self) -> None:
        self._press(Key.CLOSE_SESSION)

    def action_split_horizontal(self) -> None:
        self._press(Key.SPLIT_HORIZONTAL)

    def action_split_vertical(self) -> None:
        self._press(Key.SPLIT_VERTICAL)

    def action_toggle_line_breaks(self) -> None:
        self._press(Key.TOGGLE_LINE_BREAKS)

    def _tick(self) -> None:
        self.handler.tick()
        self.refresh_view()

    def refresh_view(self) -> None:
        active = self.manager.active
        width = self.size.width

        self.query_one("#tabs", Static).update(
            render_tabs(self.manager.sessions, self.manager.active_index, width, self._home)
        )

        panes = self.query_one("#panes", Container)
        primary = self.query_one("#primary", Static)
        secondary = self.query_one("#secondary", Static)
        partner = (
            self.manager.get(active.split_with) if active.split_with is not None else None
        )
        panes.set_class(partner is not None, "split")
        panes.set_class(active.split_direction is SplitDirection.HORIZONTAL, "stacked")

        height = max(1, panes.size.height)
        if partner is not None and active.split_direction is SplitDirection.HORIZONTAL:
            height = max(1, height // 2 - 1)
        primary.update(render_history(active.history, height))
        if partner is not None:
            secondary.update(render_history(partner.history, height))

        prompt, column = render_prompt(active, self.context.options, width)
        prompt_widget = self.query_one("#prompt", Static)
        if not active.editor.locked:
            if column < len(prompt):
                prompt.stylize("reverse", column, column + 1)
            else:
                prompt.append(" ", style="reverse")
        prompt_widget.update(prompt)
