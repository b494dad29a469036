"""Textual widget that draws a query session."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widget import Widget

from jqi.session import Session


class QueryView(Widget, can_focus=True):
    """Prompt line on top, scrolled result window below.

    Keys: type to edit the query, Enter commits it to history, Tab takes
    the best suggestion, Up/Down scroll, Escape or Ctrl+C quits.

    The error banner only shows once something has called
    Session.refresh_error(); typing alone never sets last_error, and a
    failing query just leaves the result window blank.
    """

    DEFAULT_CSS = """
    QueryView {
        height: 1fr;
        background: $surface;
        padding: 0 1;
    }
    """

    @dataclass
    class Quit(Message):
        pass

    def __init__(
        self,
        session: Session,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.session = session

    def _body_height(self) -> int:
        """Rows left for content below the prompt line."""
        height = self.content_region.height
        if height <= 1:
            return self.session.config.visible_height
        return height - 1

    def render(self) -> Text:
        session = self.session
        result = Text()
        result.append(session.prompt, style="bold cyan")
        result.append(session.input)

        best = session.best_suggestion()
        if best is not None:
            result.append(best[len(session.input) :], style="dim italic")
        result.append("\n")

        if session.last_error is not None:
            result.append(f"Error: {session.last_error}", style="bold red")
            return result

        lines = session.visible_lines(self._body_height())
        result.append("\n".join(lines))
        return result

    def on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()

        self.session.handle_key_event(event, visible_height=self._body_height())
        if self.session.should_exit:
            self.post_message(self.Quit())
            return
        self.refresh()
