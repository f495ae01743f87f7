"""
Text Helpers

Architectural Intent:
- Pure string operations shared by the executor and the Renderer
- Escape stripping for captured child output
- Incremental line assembly from a byte stream
- Compact path labels for tabs and prompts
"""

from __future__ import annotations
import os
import re
from typing import Optional

ANSI_RE = re.compile(
    r"\x1b\[[0-9;?]*[a-zA-Z]"
    r"|\x1b\][^\x07]*\x07"
    r"|\x1b\([A-Z]"
    r"|\x1b[>=]"
    r"|\x0f"
)

LAST_COMPONENT_WIDTH = 12


def strip_escape_codes(text: str) -> str:
    return ANSI_RE.sub("", text)


class LineAssembler:
    """Splits a chunked byte stream into complete, escape-free lines.

    A trailing partial line is held back until the next chunk or ``flush()``.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding
        self._pending = b""

    def feed(self, chunk: bytes) -> list[str]:
        data = self._pending + chunk
        *complete, self._pending = data.split(b"\n")
        return [self._clean(raw) for raw in complete]

    def flush(self) -> list[str]:
        if not self._pending:
            return []
        raw, self._pending = self._pending, b""
        return [self._clean(raw)]

    def _clean(self, raw: bytes) -> str:
        line = raw.decode(self._encoding, errors="replace").rstrip("\r")
        return strip_escape_codes(line)


def shorten_path(path: str, home: Optional[str] = None) -> str:
    """Abbreviate ``path``: home becomes "~", inner components keep one letter.

    >>> shorten_path("/usr/local/bin")
    '/u/l/bin'
    """
    if not path:
        return path

    home = os.path.expanduser("~") if home is None else home
    home = home.rstrip("/")
    if home and (path == home or path.startswith(home + "/")):
        path = "~" + path[len(home):]

    components = [part for part in path.split("/") if part]
    output = "/" if path.startswith("/") else ""

    for i, part in enumerate(components):
        if i == len(components) - 1:
            if len(part) > LAST_COMPONENT_WIDTH:
                part = part[:LAST_COMPONENT_WIDTH] + "..."
            output += part
        else:
            output += part[0] + "/"

    return output
