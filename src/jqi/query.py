"""Documents, query results and the query executor contract."""

from __future__ import annotations

import copy
import hashlib
import json
from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol, runtime_checkable

from jqi._filter import compile_filter
from jqi.errors import QueryCompileError


def pretty_json(value: object) -> str:
    """Format a JSON value with indent=4, keeping key order and unicode."""
    return json.dumps(value, indent=4, ensure_ascii=False)


def canonical_json(value: object) -> str:
    """Serialize a JSON value so equal values always give equal text."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class Document:
    """The JSON value loaded for a session.

    The value is deep-copied on construction, so later changes to the
    caller's object do not reach results or cache keys. The canonical
    serialization and its digest are computed on first use and reused
    afterwards, so cache keys do not re-serialize the whole document on
    every keystroke.
    """

    __slots__ = ("_value", "_canonical", "_digest")

    def __init__(self, value: object) -> None:
        self._value = copy.deepcopy(value)
        self._canonical: str | None = None
        self._digest: str | None = None

    @property
    def value(self) -> object:
        return self._value

    def canonical(self) -> str:
        if self._canonical is None:
            self._canonical = canonical_json(self._value)
        return self._canonical

    def digest(self) -> str:
        if self._digest is None:
            self._digest = hashlib.sha256(self.canonical().encode("utf-8")).hexdigest()
        return self._digest

    def format_pretty(self) -> str:
        return pretty_json(self._value)

    def __repr__(self) -> str:
        return f"Document({self._value!r})"


class ResultKind(Enum):
    EMPTY = auto()
    SINGLE = auto()
    MULTIPLE = auto()


@dataclass(frozen=True)
class QueryResult:
    """Outcome of one query: no value, one value or several values."""

    kind: ResultKind
    values: tuple = ()

    @classmethod
    def empty(cls) -> QueryResult:
        return cls(ResultKind.EMPTY)

    @classmethod
    def single(cls, value: object) -> QueryResult:
        return cls(ResultKind.SINGLE, (value,))

    @classmethod
    def multiple(cls, values: list) -> QueryResult:
        return cls(ResultKind.MULTIPLE, tuple(values))

    @classmethod
    def from_values(cls, values: list) -> QueryResult:
        if not values:
            return cls.empty()
        if len(values) == 1:
            return cls.single(values[0])
        return cls.multiple(values)

    @property
    def value(self) -> object:
        """The single value. Only meaningful for SINGLE results."""
        if self.kind is not ResultKind.SINGLE:
            raise ValueError(f"{self.kind.name} result has no single value")
        return self.values[0]

    def format_pretty(self) -> str:
        if self.kind is ResultKind.EMPTY:
            return "null"
        if self.kind is ResultKind.SINGLE:
            return pretty_json(self.values[0])
        return pretty_json(list(self.values))


@runtime_checkable
class QueryExecutor(Protocol):
    """Runs query text against a document.

    Implementations raise QueryCompileError for empty or malformed queries
    and QueryExecutionError when a compiled query fails while running.
    """

    def execute(self, document: Document, query: str) -> list: ...


class FilterQueryExecutor:
    """Stateless executor backed by the built-in filter language."""

    def execute(self, document: Document, query: str) -> list:
        if not query:
            raise QueryCompileError("Empty query")
        return compile_filter(query)(document.value)
