"""Pytest fixtures for jqi tests."""

import pytest

from jqi.query import Document, FilterQueryExecutor


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SpyExecutor:
    """Counts calls and delegates to the filter executor."""

    def __init__(self):
        self.inner = FilterQueryExecutor()
        self.calls: list[str] = []

    def execute(self, document, query):
        self.calls.append(query)
        return self.inner.execute(document, query)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def spy():
    return SpyExecutor()


@pytest.fixture
def items_doc():
    return Document({"items": [1, 2, 3, 4, 5]})


@pytest.fixture
def users_doc():
    return Document(
        {
            "name": "example",
            "users": [
                {"name": "alice", "age": 30, "tags": ["admin"]},
                {"name": "bob", "age": 25, "tags": []},
            ],
            "meta": {"count": 2, "active": True},
        }
    )
