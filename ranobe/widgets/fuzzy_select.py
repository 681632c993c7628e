"""Interactive fuzzy-filtered selection prompt with paging and vim-like keys."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional

from ..term import Key, KeyPress, Term, hidden_cursor
from .matcher import Candidate, MatchResult, as_candidates, filter_candidates
from .paging import RESERVED_ROWS, Paging
from .render import TermThemeRenderer
from .theme import SimpleTheme, Theme

logger = logging.getLogger(__name__)

UP = -1
DOWN = 1


class Mode(Enum):
    NORMAL = "normal"      # navigation keys active
    EDITING = "editing"    # text entry keys active


@dataclass
class Query:
    """Search text plus a cursor offset, 0 <= cursor <= len(text)."""

    text: str = ""
    cursor: int = 0

    def insert(self, ch: str) -> None:
        self.text = self.text[:self.cursor] + ch + self.text[self.cursor:]
        self.cursor += len(ch)

    def backspace(self) -> bool:
        if self.cursor == 0:
            return False
        self.text = self.text[:self.cursor - 1] + self.text[self.cursor:]
        self.cursor -= 1
        return True

    def delete(self) -> bool:
        if self.cursor == len(self.text):
            return False
        self.text = self.text[:self.cursor] + self.text[self.cursor + 1:]
        return True

    def move_to(self, cursor: int) -> bool:
        cursor = max(0, min(cursor, len(self.text)))
        moved = cursor != self.cursor
        self.cursor = cursor
        return moved


def step_selection(sel: Optional[int], direction: int, length: int) -> int:
    """
    Move `sel` one row in `direction` (UP or DOWN), wrapping at both ends.

    With nothing selected yet, UP lands on the last row and DOWN on the first.
    """
    if sel is None:
        return length - 1 if direction == UP else 0
    return (sel + direction) % length


def validate_selection(sel: Optional[int], length: int) -> Optional[int]:
    if sel is None or not 0 <= sel < length:
        return None
    return sel


_UP_KEYS = {Key.ARROW_UP, Key.BACK_TAB}
_DOWN_KEYS = {Key.ARROW_DOWN, Key.TAB}
_VIM_VERTICAL = {"k": UP, "j": DOWN}


class FuzzySelect:
    """
    A fuzzy-filtered select prompt.

    Configure it fluently, then call interact():

        FuzzySelect.with_theme(ColorfulTheme())
            .with_prompt("Pick your flavor")
            .items(["Ice Cream", "Vanilla Cupcake"])
            .interact()

    Normal mode navigates (arrows, Tab/BackTab, k/j/h/l), `i` switches to
    Editing mode where typed characters refine the query (Home, End and Delete
    edit it too); Escape or Enter go back to Normal. Enter in Normal mode
    commits, any cancel key (Escape by default) cancels.
    """

    def __init__(self, theme: Optional[Theme] = None) -> None:
        self._theme = theme if theme is not None else SimpleTheme()
        self._default: Optional[int] = None
        self._items: list[Candidate] = []
        self._prompt = ""
        self._report = True
        self._clear = True
        self._highlight_matches = True
        self._max_length: Optional[int] = None
        self._initial_text = ""
        self._initial_cursor: Optional[int] = None
        self._cancel_keys: frozenset[KeyPress] = frozenset({Key.ESCAPE})

    @classmethod
    def with_theme(cls, theme: Theme) -> "FuzzySelect":
        return cls(theme)

    # ---------------------------------------------------------------- builder

    def clear(self, val: bool) -> "FuzzySelect":
        """Whether to erase the menu on exit. Default: on."""
        self._clear = val
        return self

    def default(self, val: int) -> "FuzzySelect":
        self._default = val
        return self

    def item(self, label: str, payload: Any = None) -> "FuzzySelect":
        self._items.append(Candidate(label, label if payload is None else payload))
        return self

    def items(self, items: Iterable[Any]) -> "FuzzySelect":
        self._items.extend(as_candidates(items))
        return self

    def with_initial_text(self, text: str, cursor: Optional[int] = None) -> "FuzzySelect":
        """Query the search starts with; the cursor defaults to its end."""
        self._initial_text = text
        self._initial_cursor = cursor
        return self

    def with_prompt(self, prompt: str) -> "FuzzySelect":
        self._prompt = prompt
        return self

    def report(self, val: bool) -> "FuzzySelect":
        """Whether to echo "<prompt>: <choice>" after a commit. Default: on."""
        self._report = val
        return self

    def highlight_matches(self, val: bool) -> "FuzzySelect":
        self._highlight_matches = val
        return self

    def max_length(self, val: int) -> "FuzzySelect":
        # Paging takes RESERVED_ROWS off the capacity for the prompt line, so
        # add them back to show `val` items.
        self._max_length = val + RESERVED_ROWS
        return self

    def cancel_keys(self, *keys: KeyPress) -> "FuzzySelect":
        """Keys that cancel the prompt in Normal mode. Default: Escape only."""
        self._cancel_keys = frozenset(keys)
        return self

    @property
    def candidates(self) -> list[Candidate]:
        return list(self._items)

    # ------------------------------------------------------------ interaction

    def interact(self) -> Optional[int]:
        """
        Run the prompt on stderr.

        Returns the original index of the chosen item, or None when cancelled.
        """
        return self.interact_on(Term.stderr())

    def interact_on(self, term) -> Optional[int]:
        """Like interact() but on a specific terminal."""
        with hidden_cursor(term):
            return _Session(self, term).run()


class _Session:
    """State of one interact() call; discarded when it returns."""

    def __init__(self, select: FuzzySelect, term) -> None:
        self.cfg = select
        self.term = term
        cursor = select._initial_cursor
        if cursor is None or not 0 <= cursor <= len(select._initial_text):
            cursor = len(select._initial_text)
        self.query = Query(select._initial_text, cursor)
        self.mode = Mode.NORMAL
        self.sel: Optional[int] = select._default
        self.paging = Paging(term, len(select._items), select._max_length)
        self.render = TermThemeRenderer(term, select._theme)
        self.matches: list[MatchResult] = []

    def refresh(self) -> None:
        """Recompute the filtered list and keep selection and page consistent with it."""
        self.matches = filter_candidates(self.query.text, self.cfg._items)
        self.sel = validate_selection(self.sel, len(self.matches))
        self.paging.update(self.sel if self.sel is not None else 0, len(self.matches))

    def draw(self) -> None:
        self.render.clear()
        self.render.fuzzy_select_prompt(
            self.cfg._prompt, self.query.text, self.query.cursor, self.paging.info
        )
        start, stop = self.paging.window
        for idx in range(start, min(stop, len(self.matches))):
            match = self.matches[idx]
            self.render.fuzzy_select_prompt_item(
                match.label, idx == self.sel, self.cfg._highlight_matches, match.positions
            )
        self.term.flush()

    def run(self) -> Optional[int]:
        while True:
            self.refresh()
            self.draw()
            key = self.term.read_key()
            logger.debug("key %r in %s mode", key, self.mode.value)

            done, result = self.handle(key)
            if done:
                return result

    # ------------------------------------------------------------------ keys

    def handle(self, key: KeyPress) -> tuple[bool, Optional[int]]:
        """Apply one key press. Returns (finished, result)."""
        normal = self.mode is Mode.NORMAL

        if normal and key in self.cfg._cancel_keys:
            return True, self.cancel()
        if key is Key.ESCAPE:
            self.mode = Mode.NORMAL
        elif normal and key == "i":
            self.mode = Mode.EDITING
        elif key in _UP_KEYS or (normal and _VIM_VERTICAL.get(key) == UP):
            self.move(UP)
        elif key in _DOWN_KEYS or (normal and _VIM_VERTICAL.get(key) == DOWN):
            self.move(DOWN)
        elif key is Key.ARROW_LEFT or (normal and key == "h"):
            self.turn_page(self.paging.previous_page)
        elif key is Key.ARROW_RIGHT or (normal and key == "l"):
            self.turn_page(self.paging.next_page)
        elif key is Key.ENTER:
            if not normal:
                self.mode = Mode.NORMAL
            elif self.sel is not None and self.matches:
                return True, self.commit()
        elif key is Key.BACKSPACE and not normal:
            if self.query.backspace():
                self.term.flush()
        elif key is Key.DEL and not normal:
            if self.query.delete():
                self.term.flush()
        elif key in (Key.HOME, Key.END) and not normal:
            if self.query.move_to(0 if key is Key.HOME else len(self.query.text)):
                self.term.flush()
        elif isinstance(key, str) and not normal and key.isprintable():
            self.query.insert(key)
            self.term.flush()
            self.sel = 0
        return False, None

    def move(self, direction: int) -> None:
        if not self.matches:
            return
        self.sel = step_selection(self.sel, direction, len(self.matches))
        self.term.flush()

    def turn_page(self, turn) -> None:
        if self.paging.active:
            self.sel = turn()

    def cancel(self) -> None:
        if self.cfg._clear:
            self.render.clear()
            self.term.flush()
        return None

    def commit(self) -> int:
        chosen = self.matches[self.sel]
        if self.cfg._clear:
            self.render.clear()
        if self.cfg._report:
            self.render.input_prompt_selection(self.cfg._prompt, chosen.label)
        self.term.flush()
        logger.debug("committed %r (index %d)", chosen.label, chosen.index)
        return chosen.index
