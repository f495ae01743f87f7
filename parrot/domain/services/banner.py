"""Fixed text blocks shown by the terminal and the CLI."""

from parrot.domain.entities.history_buffer import HistoryBuffer, LineType

PARROT_VERSION = "v6.0.0"

WELCOME_LINES = (
    f"Welcome to Parrot Terminal Version {PARROT_VERSION}",
    "==========================================",
    "Type 'exit' to quit",
    "Ctrl+T: New terminal, Ctrl+W: Close terminal",
    "Ctrl+S / Ctrl+V: Split horizontally / vertically",
    "Alt+1-9: Switch terminals, Alt+/-: Next/Prev terminal",
    "Alt+Arrows: Switch between split panes",
    "Arrows: Scroll terminal history",
    "Shift+Up/Down: Command history",
    "",
)

MANUAL_LINES = (
    "Parrot Terminal Usage:",
    "======================",
    "Ctrl+T: Create new terminal",
    "Ctrl+W: Close current terminal",
    "Ctrl+S / Ctrl+V: Split terminal horizontally / vertically",
    "Alt+1-9: Switch to terminal 1-9",
    "Alt+/-: Switch to next/previous terminal",
    "Alt+Arrows: Switch between split panes",
    "Arrow Keys: Scroll terminal history",
    "Shift+Up/Down: Navigate command history",
    "Ctrl+B: Toggle line breaks in captured output",
    "Type 'stop' to interrupt running command",
    "Type 'exit' to quit",
    "Note: Commands queue automatically when another is running",
    "Queue size: 10 commands max",
)

CLI_USAGE = f"""\
Parrot Terminal {PARROT_VERSION}
==========================================
Interactive mode keyboard shortcuts:
  Ctrl+T: New terminal
  Ctrl+W: Close terminal
  Ctrl+S / Ctrl+V: Split terminal
  Alt+1-9: Switch terminals
  Alt+/-: Next/Prev terminal
  Alt+Arrows: Switch between split panes
  Arrow Keys: Scroll terminal history
  Shift+Up/Down: Command history

Command Queue Features:
  - Commands auto-queue when another is running
  - Queue size: 10 commands maximum
  - Terminal locks when queue is full (red clock)
  - Input shows #### when locked
Type 'parrot' to start interactive mode"""


def show_welcome(history: HistoryBuffer) -> None:
    for line in WELCOME_LINES:
        history.append(line, LineType.RAW)


def show_manual(history: HistoryBuffer) -> None:
    for line in MANUAL_LINES:
        history.append(line, LineType.RAW)
