"""Keyboard input for the terminal frontend.

Keys are read one at a time in raw mode and decoded into action names
("up", "shuffle", "escape", "7", ...). Reading always takes a timeout so
the caller can keep the game clock ticking between keypresses.
"""

from __future__ import annotations

import os
import sys
import time
from typing import Callable

ESC = "\x1b"
DIGITS = "0123456789"

# A terminal sends the rest of an escape sequence right after ESC.
_SEQUENCE_GAP = 0.05

KeyReader = Callable[[float], "str | None"]

_KEY_MAP: dict[str, str] = {
    "w": "up",
    "s": "down",
    "a": "left",
    "d": "right",
    "n": "shuffle",
    "r": "reset",
    "m": "mark",
    "q": "quit",
    "\x03": "quit",  # Ctrl-C
    "\r": "enter",
    "\n": "enter",
    "\x7f": "backspace",
    "\b": "backspace",
}

# ESC [ <letter>
_ANSI_ARROWS = {"A": "up", "B": "down", "C": "right", "D": "left"}

# msvcrt prefixes arrow keys with \x00 or \xe0.
_WINDOWS_ARROWS = {"H": "up", "P": "down", "M": "right", "K": "left"}


def is_digit(key: str) -> bool:
    return len(key) == 1 and key in DIGITS


def resolve(ch: str) -> str:
    """Map one plain character to an action name ("" when it has none)."""
    if is_digit(ch):
        return ch
    return _KEY_MAP.get(ch.lower(), "")


def decode_key(ch: str, read_next: KeyReader) -> str:
    """Decode the key starting with *ch*, pulling follow-up bytes if needed."""
    if ch == ESC:
        if read_next(_SEQUENCE_GAP) != "[":
            return "escape"
        return _ANSI_ARROWS.get(read_next(_SEQUENCE_GAP) or "", "")
    if ch in ("\x00", "\xe0"):
        return _WINDOWS_ARROWS.get(read_next(_SEQUENCE_GAP) or "", "")
    return resolve(ch)


# -- terminal -----------------------------------------------------------------


class RawTerminal:
    """Puts stdin in raw mode for the duration of a ``with`` block."""

    def __init__(self) -> None:
        self._fd: int | None = None
        self._saved: list | None = None

    def __enter__(self) -> RawTerminal:
        if os.name != "nt":
            import termios
            import tty

            self._fd = sys.stdin.fileno()
            self._saved = termios.tcgetattr(self._fd)
            tty.setraw(self._fd)
        return self

    def __exit__(self, *exc_info) -> None:
        if self._saved is not None:
            import termios

            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
            self._saved = None

    def read(self, timeout: float) -> str | None:
        """Return one character, or None if nothing arrives within *timeout*."""
        if os.name == "nt":
            import msvcrt  # type: ignore[import-not-found]

            deadline = time.monotonic() + timeout
            while not msvcrt.kbhit():
                if time.monotonic() >= deadline:
                    return None
                time.sleep(0.02)
            return msvcrt.getwch()

        import select

        ready, _, _ = select.select([self._fd], [], [], timeout)
        if not ready:
            return None
        # os.read bypasses stdin's buffer so select() still sees queued bytes.
        return os.read(self._fd, 1).decode("utf-8", errors="ignore")


def get_key_timeout(timeout: float) -> str | None:
    """Wait up to *timeout* seconds for a key and return its action name."""
    with RawTerminal() as terminal:
        ch = terminal.read(timeout)
        if ch is None:
            return None
        return decode_key(ch, terminal.read)


# -- number entry -------------------------------------------------------------


class NumberEntry:
    """Digits typed so far while the player enters a tile number."""

    def __init__(self, max_digits: int) -> None:
        self.max_digits = max_digits
        self.text = ""
        self.done = False
        self.cancelled = False

    def feed(self, key: str) -> None:
        if is_digit(key):
            if len(self.text) < self.max_digits:
                self.text += key
        elif key == "backspace":
            self.text = self.text[:-1]
        elif key == "enter":
            self.done = True
        elif key in ("escape", "quit"):
            self.done = self.cancelled = True

    @property
    def value(self) -> int | None:
        if self.cancelled or not self.text:
            return None
        return int(self.text)


def read_number(
    max_digits: int,
    on_change: Callable[[str], object],
    idle: Callable[[], object],
    poll_seconds: float,
    read_key: KeyReader = get_key_timeout,
) -> int | None:
    """Collect digits until Enter (the number) or Esc (None).

    *idle* runs whenever no key arrives within *poll_seconds*, so timers
    keep running while the player types. *on_change* receives the digits
    typed so far each time they change.
    """
    entry = NumberEntry(max_digits)
    on_change(entry.text)
    while not entry.done:
        key = read_key(poll_seconds)
        if key is None:
            idle()
            continue
        before = entry.text
        entry.feed(key)
        if entry.text != before:
            on_change(entry.text)
    return entry.value
