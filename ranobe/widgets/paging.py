"""Page bookkeeping for the fuzzy selector."""
from __future__ import annotations

import math
import sys
from typing import Optional

# Rows kept free for the prompt line (which carries the page indicator)
RESERVED_ROWS = 2
_MIN_CAPACITY = RESERVED_ROWS + 1


def page_capacity(max_capacity: Optional[int], term_rows: int) -> int:
    """Item rows per page: the requested maximum bounded by the terminal height."""
    wanted = max_capacity if max_capacity is not None else sys.maxsize
    return max(_MIN_CAPACITY, min(wanted, term_rows)) - RESERVED_ROWS


class Paging:
    """
    Maps a flat item count onto pages of `capacity` rows.

    `max_capacity` already includes the RESERVED_ROWS bias (see
    FuzzySelect.max_length); without it the page fills the terminal.
    """

    def __init__(self, term, items_len: int, max_capacity: Optional[int] = None) -> None:
        self._term = term
        self.max_capacity = max_capacity
        self.current_term_size = term.size()
        self.capacity = page_capacity(max_capacity, self.current_term_size[0])
        self.items_len = items_len
        self.pages = self._count_pages()
        self.current_page = 0
        self.active = self.pages > 1

    def _count_pages(self) -> int:
        return math.ceil(self.items_len / self.capacity)

    def update(self, cursor_pos: int, items_len: Optional[int] = None) -> None:
        """
        Re-read the terminal size and item count, then move to the page that
        contains `cursor_pos`. Call once per frame; pass 0 when nothing is selected.
        """
        new_term_size = self._term.size()
        if new_term_size != self.current_term_size:
            self.current_term_size = new_term_size
            self.capacity = page_capacity(self.max_capacity, new_term_size[0])

        if items_len is not None:
            self.items_len = items_len
        self.pages = self._count_pages()
        self.active = self.pages > 1
        self.current_page = cursor_pos // self.capacity

    @property
    def info(self) -> Optional[tuple[int, int]]:
        """(1-based current page, page count) while paging is active."""
        if not self.active:
            return None
        return self.current_page + 1, self.pages

    @property
    def window(self) -> tuple[int, int]:
        start = self.current_page * self.capacity
        return start, start + self.capacity

    def next_page(self) -> int:
        """Advance one page (wrapping) and return the index of its first row."""
        if self.current_page >= self.pages - 1:
            self.current_page = 0
        else:
            self.current_page += 1
        return self.current_page * self.capacity

    def previous_page(self) -> int:
        """Go back one page (wrapping) and return the index of its first row."""
        if self.current_page == 0:
            self.current_page = self.pages - 1
        else:
            self.current_page -= 1
        return self.current_page * self.capacity
