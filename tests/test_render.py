import pytest

from ranobe.widgets.render import FrameAccountant, TermThemeRenderer, rows_for
from ranobe.widgets.theme import SimpleTheme


@pytest.mark.parametrize(
    "width, columns, rows",
    [(0, 80, 1), (10, 80, 1), (80, 80, 1), (81, 80, 2), (160, 80, 2), (161, 80, 3)],
)
def test_rows_for(width, columns, rows) -> None:
    assert rows_for(width, columns) == rows


def test_accountant_tracks_prompt_and_body_separately() -> None:
    frame = FrameAccountant()

    frame.add_prompt("x" * 5, 10)
    # a 23-cell label plus the 2-cell marker wraps onto ceil(25 / 10) rows
    frame.add_body("> " + "y" * 23, 10)
    frame.add_body("short", 10)

    assert frame.prompt_height == 1
    assert frame.body_height == 4
    assert frame.total == 5

    frame.reset()
    assert (frame.prompt_height, frame.body_height) == (0, 0)


def test_accountant_counts_wide_characters_by_cell_width() -> None:
    assert FrameAccountant.line_rows("漢字" * 5, 10) == 2


def test_accountant_counts_embedded_newlines() -> None:
    assert FrameAccountant.line_rows("one\ntwo", 80) == 2


def test_renderer_clear_erases_exactly_what_was_drawn(make_term) -> None:
    term = make_term(cols=20)
    render = TermThemeRenderer(term, SimpleTheme())

    render.fuzzy_select_prompt("Pick", "", 0)
    render.fuzzy_select_prompt_item("short", True, False, frozenset())
    render.fuzzy_select_prompt_item("a label that is much longer than twenty", False, False, frozenset())

    assert render.frame.prompt_height == 1
    assert render.frame.body_height == 4
    assert len(term.screen) == 5

    render.clear()
    assert term.cleared == [5]
    assert term.screen == []
    assert not term.overshoot
    assert render.frame.total == 0


def test_renderer_prefixes_paging_info(make_term) -> None:
    term = make_term()
    TermThemeRenderer(term, SimpleTheme()).fuzzy_select_prompt("Pick", "q", 1, (1, 3))

    assert term.lines == [" [Page 1/3] Pick q|"]


def test_renderer_error_uses_theme(make_term) -> None:
    term = make_term()
    render = TermThemeRenderer(term, SimpleTheme())
    render.error("nothing here")

    assert term.lines == ["error: nothing here"]
    assert render.frame.body_height == 1
