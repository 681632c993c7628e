import math

import pytest
from rich.cells import cell_len
from rich.text import Text


class FakeTerm:
    """
    Terminal double: scripted key presses, fixed size, and a simulated screen
    that records how many rows every written line occupies, so tests can check
    that erasing removes exactly the previous frame.
    """

    def __init__(self, keys=(), rows=24, cols=80):
        self.keys = list(keys)
        self.rows = rows
        self.cols = cols
        self.lines = []
        self.screen = []
        self.cleared = []
        self.overshoot = False
        self.cursor_visible = True
        self.hide_calls = 0
        self.flushes = 0

    def size(self):
        return self.rows, self.cols

    def hide_cursor(self):
        self.hide_calls += 1
        self.cursor_visible = False

    def show_cursor(self):
        self.cursor_visible = True

    def write_line(self, text):
        plain = text.plain if isinstance(text, Text) else text
        self.lines.append(plain)
        rows = max(1, math.ceil(cell_len(plain) / self.cols))
        self.screen.append(plain)
        self.screen.extend(["<wrapped>"] * (rows - 1))

    def clear_last_lines(self, n):
        self.cleared.append(n)
        if n > len(self.screen):
            self.overshoot = True
        if n:
            del self.screen[-n:]

    def flush(self):
        self.flushes += 1

    def read_key(self):
        if not self.keys:
            raise OSError("no more scripted keys")
        return self.keys.pop(0)


@pytest.fixture
def make_term():
    return FakeTerm


@pytest.fixture
def flavors():
    return [
        "Ice Cream",
        "Vanilla Cupcake",
        "Chocolate Muffin",
        "A Pile of sweet, sweet mustard",
    ]
