"""Customizes how each element of the selector is rendered.

Every formatter appends to a `rich.text.Text` sink and does nothing else, so a
theme can be exercised without a terminal.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet, Optional

from rich.style import Style
from rich.text import Text


class Theme:
    """
    Formatting capabilities used by the selector.

    The method bodies here are the plain rendering; subclass and override to
    restyle. Any object providing these six methods works as a theme.
    """

    def format_prompt(self, f: Text, prompt: str) -> None:
        f.append(f"{prompt}:")

    def format_error(self, f: Text, err: str) -> None:
        f.append(f"error: {err}")

    def format_input_prompt(self, f: Text, prompt: str, default: Optional[str] = None) -> None:
        if default is not None and not prompt:
            f.append(f"[{default}]: ")
        elif default is not None:
            f.append(f"{prompt} [{default}]: ")
        else:
            f.append(f"{prompt}: ")

    def format_input_prompt_selection(self, f: Text, prompt: str, sel: str) -> None:
        f.append(f"{prompt}: {sel}")

    def format_fuzzy_select_prompt_item(
        self,
        f: Text,
        text: str,
        active: bool,
        highlight_matches: bool,
        positions: AbstractSet[int],
    ) -> None:
        f.append(f"{'>' if active else ' '} ")
        if highlight_matches and positions:
            for idx, ch in enumerate(text):
                f.append(ch, style="bold" if idx in positions else None)
        else:
            f.append(text)

    def format_fuzzy_select_prompt(
        self, f: Text, prompt: str, search_term: str, cursor_pos: int
    ) -> None:
        if prompt:
            f.append(f"{prompt} ")
        f.append(search_term[:cursor_pos])
        f.append("|")
        f.append(search_term[cursor_pos:])


class SimpleTheme(Theme):
    """The default theme: no colors, `>` marks the active row."""


@dataclass
class ColorfulTheme(Theme):
    """A colorful theme."""

    defaults_style: Style = field(default_factory=lambda: Style(color="cyan"))
    prompt_style: Style = field(default_factory=lambda: Style(bold=True))
    prompt_prefix: Text = field(default_factory=lambda: Text("?", style="yellow"))
    prompt_suffix: Text = field(default_factory=lambda: Text("›", style="bright_black"))
    success_prefix: Text = field(default_factory=lambda: Text("✔", style="green"))
    success_suffix: Text = field(default_factory=lambda: Text("·", style="bright_black"))
    error_prefix: Text = field(default_factory=lambda: Text("✘", style="red"))
    error_style: Style = field(default_factory=lambda: Style(color="red"))
    hint_style: Style = field(default_factory=lambda: Style(color="bright_black"))
    values_style: Style = field(default_factory=lambda: Style(color="green"))
    active_item_style: Style = field(default_factory=lambda: Style(color="cyan"))
    inactive_item_style: Style = field(default_factory=Style)
    active_item_prefix: Text = field(default_factory=lambda: Text("❯", style="green"))
    inactive_item_prefix: Text = field(default_factory=lambda: Text(" "))
    fuzzy_cursor_style: Style = field(
        default_factory=lambda: Style(color="black", bgcolor="white")
    )
    fuzzy_match_highlight_style: Style = field(default_factory=lambda: Style(bold=True))
    # Echo the confirmed value on the success line
    inline_selections: bool = True

    def _prompt_head(self, f: Text, prefix: Text, prompt: str) -> None:
        if prompt:
            f.append_text(prefix)
            f.append(" ")
            f.append(prompt, style=self.prompt_style)
            f.append(" ")

    def format_prompt(self, f: Text, prompt: str) -> None:
        self._prompt_head(f, self.prompt_prefix, prompt)
        f.append_text(self.prompt_suffix)

    def format_error(self, f: Text, err: str) -> None:
        f.append_text(self.error_prefix)
        f.append(" ")
        f.append(err, style=self.error_style)

    def format_input_prompt(self, f: Text, prompt: str, default: Optional[str] = None) -> None:
        self._prompt_head(f, self.prompt_prefix, prompt)
        if default is not None:
            f.append(f"({default})", style=self.hint_style)
            f.append(" ")
        f.append_text(self.prompt_suffix)
        f.append(" ")

    def format_input_prompt_selection(self, f: Text, prompt: str, sel: str) -> None:
        self._prompt_head(f, self.success_prefix, prompt)
        f.append_text(self.success_suffix)
        if self.inline_selections:
            f.append(" ")
            f.append(sel, style=self.values_style)

    def format_fuzzy_select_prompt_item(
        self,
        f: Text,
        text: str,
        active: bool,
        highlight_matches: bool,
        positions: AbstractSet[int],
    ) -> None:
        f.append_text(self.active_item_prefix if active else self.inactive_item_prefix)
        f.append(" ")

        if not highlight_matches:
            f.append(text)
            return

        row_style = self.active_item_style if active else self.inactive_item_style
        for idx, ch in enumerate(text):
            if idx in positions:
                f.append(ch, style=row_style + self.fuzzy_match_highlight_style)
            elif active:
                f.append(ch, style=self.active_item_style)
            else:
                f.append(ch)

    def format_fuzzy_select_prompt(
        self, f: Text, prompt: str, search_term: str, cursor_pos: int
    ) -> None:
        self._prompt_head(f, self.prompt_prefix, prompt)
        f.append_text(self.prompt_suffix)
        f.append(" ")

        # The cursor is drawn over the character it sits on, or as a block past the end
        f.append(search_term[:cursor_pos])
        if cursor_pos < len(search_term):
            f.append(search_term[cursor_pos], style=self.fuzzy_cursor_style)
            f.append(search_term[cursor_pos + 1:])
        else:
            f.append(" ", style=self.fuzzy_cursor_style)
