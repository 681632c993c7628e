"""Draws themed lines on a terminal and remembers how much to erase."""
from __future__ import annotations

import logging
import math
from typing import AbstractSet, Callable, Optional

from rich.cells import cell_len
from rich.text import Text

from .theme import Theme

logger = logging.getLogger(__name__)


def rows_for(width: int, columns: int) -> int:
    """Terminal rows taken by one written line of `width` cells."""
    if columns <= 0 or width <= columns:
        return 1
    return math.ceil(width / columns)


class FrameAccountant:
    """
    Tracks the rows the last frame occupied, split into the prompt region and
    the body region (item rows). Knows nothing about the terminal itself: the
    caller supplies line widths and the column count.
    """

    def __init__(self) -> None:
        self.prompt_height = 0
        self.body_height = 0

    @staticmethod
    def line_rows(plain: str, columns: int) -> int:
        return sum(rows_for(cell_len(part), columns) for part in plain.split("\n"))

    def add_prompt(self, plain: str, columns: int) -> None:
        self.prompt_height += self.line_rows(plain, columns)

    def add_body(self, plain: str, columns: int) -> None:
        self.body_height += self.line_rows(plain, columns)

    @property
    def total(self) -> int:
        return self.prompt_height + self.body_height

    def reset(self) -> None:
        self.prompt_height = 0
        self.body_height = 0


class TermThemeRenderer:
    """Helper to conveniently render a theme on a terminal."""

    def __init__(self, term, theme: Theme) -> None:
        self.term = term
        self.theme = theme
        self.frame = FrameAccountant()

    def _format(self, fmt: Callable[[Text], None]) -> Text:
        buf = Text()
        fmt(buf)
        return buf

    def _columns(self) -> int:
        return self.term.size()[1]

    def _write_prompt_line(self, buf: Text) -> None:
        self.term.write_line(buf)
        self.frame.add_prompt(buf.plain, self._columns())

    def _write_body_line(self, buf: Text) -> None:
        self.term.write_line(buf)
        self.frame.add_body(buf.plain, self._columns())

    @staticmethod
    def write_paging_info(buf: Text, paging_info: tuple[int, int]) -> None:
        buf.append(f" [Page {paging_info[0]}/{paging_info[1]}] ")

    def error(self, err: str) -> None:
        self._write_body_line(self._format(lambda f: self.theme.format_error(f, err)))

    def fuzzy_select_prompt(
        self,
        prompt: str,
        search_term: str,
        cursor_pos: int,
        paging_info: Optional[tuple[int, int]] = None,
    ) -> None:
        def fmt(buf: Text) -> None:
            if paging_info is not None:
                self.write_paging_info(buf, paging_info)
            self.theme.format_fuzzy_select_prompt(buf, prompt, search_term, cursor_pos)

        self._write_prompt_line(self._format(fmt))

    def input_prompt_selection(self, prompt: str, sel: str) -> None:
        self._write_prompt_line(
            self._format(lambda f: self.theme.format_input_prompt_selection(f, prompt, sel))
        )

    def fuzzy_select_prompt_item(
        self,
        text: str,
        active: bool,
        highlight: bool,
        positions: AbstractSet[int],
    ) -> None:
        self._write_body_line(
            self._format(
                lambda f: self.theme.format_fuzzy_select_prompt_item(
                    f, text, active, highlight, positions
                )
            )
        )

    def clear(self) -> None:
        """Erase the whole previous frame: prompt rows plus body rows."""
        logger.debug(
            "erasing frame: prompt=%d body=%d",
            self.frame.prompt_height,
            self.frame.body_height,
        )
        self.term.clear_last_lines(self.frame.total)
        self.frame.reset()
