"""One interactive query session over one document."""

from __future__ import annotations

import time
from typing import Callable

from jqi.actions import Action, ActionDispatcher
from jqi.config import SessionConfig, build_executor
from jqi.content import ContentGenerator
from jqi.errors import JqiError
from jqi.history import QueryHistory
from jqi.query import Document, QueryExecutor, QueryResult
from jqi.state import SessionState


class Session:
    """Wires document, executor, state and dispatcher together.

    Every key event goes through handle_key_event(); the front end then
    asks for the content window to paint.
    """

    def __init__(
        self,
        document: Document | object,
        config: SessionConfig | None = None,
        executor: QueryExecutor | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config if config is not None else SessionConfig()
        self.document = (
            document if isinstance(document, Document) else Document(document)
        )
        self.executor = executor if executor is not None else build_executor(self.config)
        self.state = SessionState(
            history=QueryHistory(
                max_entries=self.config.max_history,
                recent_weight=self.config.recent_weight,
                clock=clock,
            )
        )
        self.content = ContentGenerator(self.document, self.executor, self.state)
        self.dispatcher = ActionDispatcher()

    # -- accessors ---------------------------------------------------------

    @property
    def input(self) -> str:
        return self.state.input

    @property
    def prompt(self) -> str:
        return self.config.prompt

    @property
    def should_exit(self) -> bool:
        return self.state.exit

    @property
    def last_error(self) -> JqiError | None:
        return self.state.last_error

    @property
    def scroll_offset(self) -> int:
        return self.state.scroll_offset

    # -- events ------------------------------------------------------------

    def handle_key_event(self, event, visible_height: int | None = None) -> Action:
        action = self.dispatcher.get_action(event)
        self.apply(action, visible_height)
        return action

    def apply(self, action: Action, visible_height: int | None = None) -> None:
        height = visible_height if visible_height is not None else self.config.visible_height
        self.dispatcher.apply(
            self.state, action, lambda: (self.content.get_total_lines(), height)
        )

    def scroll_down(self, visible_height: int | None = None) -> None:
        height = visible_height if visible_height is not None else self.config.visible_height
        self.state.scroll_down_bounded(self.content.get_total_lines(), height)

    # -- content -----------------------------------------------------------

    def execute_current_query(self) -> QueryResult:
        return self.content.execute_current_query()

    def generate(self) -> str:
        return self.content.generate()

    def get_total_lines(self) -> int:
        return self.content.get_total_lines()

    def visible_lines(self, height: int | None = None) -> list[str]:
        height = height if height is not None else self.config.visible_height
        return self.content.visible_lines(height)

    def suggestions(self) -> list[str]:
        return self.state.suggestions(self.config.suggestion_limit)

    def best_suggestion(self) -> str | None:
        return self.state.best_suggestion()

    def refresh_error(self) -> JqiError | None:
        """Run the current query once and store its error, if any.

        Empty input is not an error here; the document is shown instead.
        """
        if not self.state.input:
            self.state.clear_error()
            return None
        try:
            self.content.execute_current_query()
        except JqiError as e:
            self.state.set_error(e)
            return e
        self.state.clear_error()
        return None
