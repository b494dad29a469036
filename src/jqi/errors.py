"""Error types raised by the query session."""

from __future__ import annotations


class JqiError(Exception):
    """Base class for all recoverable session errors."""

    kind: str = "Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class JsonParseError(JqiError):
    kind = "JSON parsing error"


class QueryCompileError(JqiError):
    kind = "Query compilation error"


class QueryExecutionError(JqiError):
    kind = "Query execution error"


class IoError(JqiError):
    kind = "IO error"
