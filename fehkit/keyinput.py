"""Keyboard control through the terminal on standard input."""

from __future__ import annotations

import contextlib
import termios
from collections.abc import Iterator

from fehkit.keys import KEYSYMS, NO_SYMBOL, Modifier, keysym_from_name

_ESC = "\x1b"
_ARROWS = {"A": "Up", "B": "Down", "C": "Right", "D": "Left"}


class StdinDecoder:
    """Turn characters read from a raw terminal into ``(state, keysym)`` events.

    ``ESC`` followed by a key gives that key with Alt held; ``ESC [``
    followed by A-D gives the arrow keys.
    """

    def __init__(self) -> None:
        self._escape = 0

    def feed(self, char: str) -> tuple[int, int] | None:
        """Consume one character; return an event, or None if there is none yet."""
        if len(char) != 1:
            raise ValueError("feed() expects exactly one character")

        if char == _ESC:
            self._escape = 1
            return None
        if self._escape == 1 and char == "[":
            self._escape = 2
            return None

        keysym = NO_SYMBOL
        if char == " ":
            keysym = KEYSYMS["space"]
        elif char == "\n":
            keysym = KEYSYMS["Return"]
        elif char in ("\b", "\x7f"):
            keysym = KEYSYMS["BackSpace"]
        elif self._escape == 2:
            if char in _ARROWS:
                keysym = KEYSYMS[_ARROWS[char]]
            self._escape = 0
        else:
            keysym = keysym_from_name(char)

        state = self._escape * int(Modifier.MOD1)
        self._escape = 0
        if keysym == NO_SYMBOL:
            return None
        return state, keysym


@contextlib.contextmanager
def raw_terminal(fd: int) -> Iterator[None]:
    """Put a terminal into unbuffered, non-echoing 8-bit mode for the block."""
    try:
        saved = termios.tcgetattr(fd)
        ctrl = termios.tcgetattr(fd)
    except termios.error as exc:
        raise OSError(f"tcgetattr failed: {exc}") from exc

    ctrl[0] &= ~(termios.PARMRK | termios.ISTRIP | termios.INLCR | termios.IGNCR | termios.IXON)
    ctrl[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN)
    ctrl[2] &= ~(termios.CSIZE | termios.PARENB)
    ctrl[2] |= termios.CS8

    try:
        termios.tcsetattr(fd, termios.TCSANOW, ctrl)
    except termios.error as exc:
        raise OSError(f"tcsetattr failed: {exc}") from exc
    try:
        yield
    finally:
        try:
            termios.tcsetattr(fd, termios.TCSANOW, saved)
        except termios.error as exc:
            raise OSError(f"tcsetattr failed: {exc}") from exc