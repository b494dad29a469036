"""Committed-query history with frequency and recency ranking."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400.0
DEFAULT_MAX_ENTRIES = 100
DEFAULT_RECENT_WEIGHT = 0.5
MIN_PREFIX_LENGTH = 2


@dataclass
class QueryHistoryEntry:
    query: str
    count: int
    first_used: float  # epoch seconds
    last_used: float


@dataclass
class SuggestionItem:
    text: str
    score: float


class QueryHistory:
    """Ranks previously committed queries as completions for typed input.

    score = count * (1 - w) + exp(-elapsed / 86400) * w

    The recency term decays to 1/e after a day idle and never exceeds 1,
    so the count term dominates once a query has been used a few times.
    Equal scores are ordered by query text.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        recent_weight: float = DEFAULT_RECENT_WEIGHT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_entries = max_entries
        self.recent_weight = recent_weight
        self._clock = clock
        self._entries: dict[str, QueryHistoryEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, query: object) -> bool:
        return query in self._entries

    def get(self, query: str) -> QueryHistoryEntry | None:
        return self._entries.get(query)

    def entries(self) -> list[QueryHistoryEntry]:
        return list(self._entries.values())

    def record(self, query: str) -> None:
        """Count one use of query. Blank text is ignored."""
        if not query.strip():
            return

        now = self._clock()
        entry = self._entries.get(query)
        if entry is not None:
            entry.count += 1
            entry.last_used = now
        else:
            self._entries[query] = QueryHistoryEntry(
                query=query, count=1, first_used=now, last_used=now
            )

        self._evict_excess()

    def time_decay(self, last_used: float) -> float:
        elapsed = max(0.0, self._clock() - last_used)
        return math.exp(-elapsed / SECONDS_PER_DAY)

    def score(self, entry: QueryHistoryEntry) -> float:
        w = self.recent_weight
        return entry.count * (1.0 - w) + self.time_decay(entry.last_used) * w

    def get_suggestions(self, prefix: str, limit: int) -> list[SuggestionItem]:
        """Highest-scored queries starting with prefix, excluding prefix itself."""
        if len(prefix) < MIN_PREFIX_LENGTH:
            return []

        candidates = [
            SuggestionItem(entry.query, self.score(entry))
            for entry in self._entries.values()
            if entry.query.startswith(prefix) and entry.query != prefix
        ]
        candidates.sort(key=lambda item: (-item.score, item.text))
        return candidates[: max(limit, 0)]

    def get_best_suggestion(self, prefix: str) -> str | None:
        suggestions = self.get_suggestions(prefix, 1)
        return suggestions[0].text if suggestions else None

    def _evict_excess(self) -> None:
        excess = len(self._entries) - self.max_entries
        if excess <= 0:
            return

        # Lowest score first; among equal scores drop the later text, the
        # entry that would be ranked last as a suggestion. sort() is stable.
        ranked = sorted(self._entries.values(), key=lambda e: e.query, reverse=True)
        ranked.sort(key=self.score)
        for entry in ranked[:excess]:
            del self._entries[entry.query]
            logger.debug("evicted history entry %r (count=%d)", entry.query, entry.count)
