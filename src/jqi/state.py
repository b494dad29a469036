"""Mutable per-session state."""

from __future__ import annotations

from dataclasses import dataclass, field

from jqi.errors import JqiError
from jqi.history import QueryHistory


@dataclass
class SessionState:
    """Input buffer, scroll position, error slot, exit flag and history.

    scroll_offset stays within [0, max(0, total_lines - visible_height)]
    for the content last rendered, as long as it is only changed through
    the methods below.
    """

    input: str = ""
    scroll_offset: int = 0
    exit: bool = False
    last_error: JqiError | None = None
    history: QueryHistory = field(default_factory=QueryHistory)

    # -- input -------------------------------------------------------------

    def push_char(self, ch: str) -> None:
        self.input += ch

    def pop_char(self) -> None:
        self.input = self.input[:-1]

    def clear_input(self) -> None:
        self.input = ""
        self.last_error = None

    def commit(self) -> None:
        """Record the input in history (unless blank) and start over."""
        if self.input.strip():
            self.history.record(self.input)
        self.clear_input()
        self.reset_scroll()

    # -- suggestions -------------------------------------------------------

    def suggestions(self, limit: int) -> list[str]:
        return [item.text for item in self.history.get_suggestions(self.input, limit)]

    def best_suggestion(self) -> str | None:
        return self.history.get_best_suggestion(self.input)

    def accept_suggestion(self) -> bool:
        """Replace the input with the best suggestion. Returns True if one existed."""
        best = self.best_suggestion()
        if best is None:
            return False
        self.input = best
        return True

    # -- flags -------------------------------------------------------------

    def set_exit(self, exit: bool) -> None:
        self.exit = exit

    def set_error(self, error: JqiError) -> None:
        self.last_error = error

    def clear_error(self) -> None:
        self.last_error = None

    # -- scrolling ---------------------------------------------------------

    def scroll_up(self) -> None:
        if self.scroll_offset > 0:
            self.scroll_offset -= 1

    def scroll_down_bounded(self, total_lines: int, visible_height: int) -> None:
        max_scroll = max(0, total_lines - visible_height)
        if self.scroll_offset < max_scroll:
            self.scroll_offset += 1

    def reset_scroll(self) -> None:
        self.scroll_offset = 0
