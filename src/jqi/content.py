"""Text shown for the current input: the document or a query result."""

from __future__ import annotations

from jqi.errors import JqiError, QueryCompileError
from jqi.query import Document, QueryExecutor, QueryResult
from jqi.state import SessionState


class ContentGenerator:
    """Derives display text from the session's input.

    Errors from the executor are not reported here. A failing non-empty
    query simply produces empty content and last_error is left alone;
    callers that want an error banner run execute_current_query()
    themselves.
    """

    def __init__(
        self, document: Document, executor: QueryExecutor, state: SessionState
    ) -> None:
        self.document = document
        self.executor = executor
        self.state = state

    def execute_current_query(self) -> QueryResult:
        query = self.state.input
        if not query:
            raise QueryCompileError("Empty query")
        values = self.executor.execute(self.document, query)
        return QueryResult.from_values(values)

    def generate(self) -> str:
        if not self.state.input:
            return self.document.format_pretty()
        try:
            return self.execute_current_query().format_pretty()
        except JqiError:
            return ""

    def get_total_lines(self) -> int:
        return len(split_lines(self.generate()))

    def visible_lines(self, height: int) -> list[str]:
        """Lines [scroll_offset, scroll_offset + height) of the current content."""
        lines = split_lines(self.generate())
        start = self.state.scroll_offset
        return lines[start : start + height]


def split_lines(text: str) -> list[str]:
    """Split on "\\n" only; "" has no lines and a trailing newline adds none."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines
