"""Memoizing query executor."""

from __future__ import annotations

import hashlib
import logging
from typing import Protocol

from jqi.query import Document, QueryExecutor

logger = logging.getLogger(__name__)


class QueryCache(Protocol):
    def get(self, key: str) -> list | None: ...

    def set(self, key: str, values: list) -> None: ...

    def clear(self) -> None: ...

    def __len__(self) -> int: ...


class InMemoryQueryCache:
    """Dict-backed cache. Grows with every distinct query; nothing is evicted."""

    def __init__(self) -> None:
        self._entries: dict[str, list] = {}

    def get(self, key: str) -> list | None:
        return self._entries.get(key)

    def set(self, key: str, values: list) -> None:
        self._entries[key] = values

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def cache_key(document: Document, query: str) -> str:
    """Hex digest identifying a (document, query) pair."""
    hasher = hashlib.sha256()
    hasher.update(document.digest().encode("ascii"))
    hasher.update(b"\0")
    hasher.update(query.encode("utf-8"))
    return hasher.hexdigest()


class CachingExecutor:
    """Wraps another executor and remembers its successful results.

    The cache is owned by this object and mutated without locking; share
    one instance per session thread only. Failures from the wrapped
    executor propagate untouched and are never stored.
    """

    def __init__(self, inner: QueryExecutor, cache: QueryCache | None = None) -> None:
        self.inner = inner
        self.cache: QueryCache = cache if cache is not None else InMemoryQueryCache()
        self.hits = 0
        self.misses = 0

    def execute(self, document: Document, query: str) -> list:
        key = cache_key(document, query)

        cached = self.cache.get(key)
        if cached is not None:
            self.hits += 1
            logger.debug("cache hit for %r", query)
            return list(cached)

        values = self.inner.execute(document, query)
        self.misses += 1
        self.cache.set(key, list(values))
        logger.debug("cache miss for %r, stored %d value(s)", query, len(values))
        return values
