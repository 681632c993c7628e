"""Terminal handle — key decoding, cursor control, line writes and erasure."""
from __future__ import annotations

import codecs
import os
import select
import sys
import termios
import tty
from contextlib import contextmanager
from enum import Enum
from typing import IO, Iterator, Optional, Union

from rich.console import Console
from rich.control import Control
from rich.segment import ControlType
from rich.text import Text

ESC = "\x1b"

# How long to wait for the rest of an escape sequence before treating ESC as a key
_ESCAPE_TIMEOUT = 0.03
_MAX_SEQUENCE = 8


class Key(Enum):
    ARROW_UP = "up"
    ARROW_DOWN = "down"
    ARROW_LEFT = "left"
    ARROW_RIGHT = "right"
    TAB = "tab"
    BACK_TAB = "backtab"
    ENTER = "enter"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    DEL = "delete"
    HOME = "home"
    END = "end"
    UNKNOWN = "unknown"


KeyPress = Union[Key, str]

_SEQUENCES: dict[str, Key] = {
    "\x1b[A": Key.ARROW_UP,
    "\x1b[B": Key.ARROW_DOWN,
    "\x1b[C": Key.ARROW_RIGHT,
    "\x1b[D": Key.ARROW_LEFT,
    "\x1bOA": Key.ARROW_UP,
    "\x1bOB": Key.ARROW_DOWN,
    "\x1bOC": Key.ARROW_RIGHT,
    "\x1bOD": Key.ARROW_LEFT,
    "\x1b[Z": Key.BACK_TAB,
    "\x1b[3~": Key.DEL,
    "\x1b[H": Key.HOME,
    "\x1b[F": Key.END,
    "\x1b[1~": Key.HOME,
    "\x1b[4~": Key.END,
    ESC: Key.ESCAPE,
    "\r": Key.ENTER,
    "\n": Key.ENTER,
    "\t": Key.TAB,
    "\x7f": Key.BACKSPACE,
    "\x08": Key.BACKSPACE,
}


def decode_key(sequence: str) -> KeyPress:
    """Map raw terminal input to a Key, or return the printable character itself."""
    key = _SEQUENCES.get(sequence)
    if key is not None:
        return key
    if sequence.startswith(ESC) or len(sequence) != 1:
        return Key.UNKNOWN
    return sequence


class Term:
    """A live terminal: a Rich console for output plus a raw input descriptor."""

    def __init__(
        self,
        console: Optional[Console] = None,
        input_file: Optional[IO[str]] = None,
    ) -> None:
        self.console = console or Console(stderr=True)
        self._input = input_file or sys.stdin
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @classmethod
    def stderr(cls) -> "Term":
        return cls(Console(stderr=True))

    # ----------------------------------------------------------------- output

    def size(self) -> tuple[int, int]:
        """Returns (rows, columns)."""
        width, height = self.console.size
        return height, width

    def hide_cursor(self) -> None:
        self.console.show_cursor(False)

    def show_cursor(self) -> None:
        self.console.show_cursor(True)

    def write_line(self, text: Union[Text, str]) -> None:
        # soft_wrap leaves wrapping to the terminal so row accounting stays exact
        self.console.print(text, soft_wrap=True, highlight=False, markup=False)

    def clear_last_lines(self, n: int) -> None:
        if n <= 0:
            return
        codes = [ControlType.CARRIAGE_RETURN]
        for _ in range(n):
            codes.append((ControlType.CURSOR_UP, 1))
            codes.append((ControlType.ERASE_IN_LINE, 2))
        self.console.control(Control(*codes))

    def flush(self) -> None:
        self.console.file.flush()

    # ------------------------------------------------------------------ input

    def read_key(self) -> KeyPress:
        """Block until one key press arrives and decode it."""
        fd = self._input.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            # cbreak rather than raw: Ctrl-C still raises KeyboardInterrupt.
            # TCSANOW keeps keys typed ahead between frames.
            tty.setcbreak(fd, termios.TCSANOW)
            sequence = self._read_char(fd)
            if sequence == ESC:
                while len(sequence) < _MAX_SEQUENCE:
                    ready, _, _ = select.select([fd], [], [], _ESCAPE_TIMEOUT)
                    if not ready:
                        break
                    ch = self._read_char(fd)
                    sequence += ch
                    if len(sequence) > 2 and (ch.isalpha() or ch == "~"):
                        break
            return decode_key(sequence)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)

    def _read_char(self, fd: int) -> str:
        while True:
            chunk = os.read(fd, 1)
            if not chunk:
                raise EOFError("terminal input closed")
            ch = self._decoder.decode(chunk)
            if ch:
                return ch


@contextmanager
def hidden_cursor(term) -> Iterator[None]:
    """Hide the cursor for the duration of the block, restoring it on any exit."""
    term.hide_cursor()
    try:
        yield
    finally:
        term.show_cursor()
