"""Tests for query history recording, scoring and suggestions."""

import math

import pytest

from jqi.history import SECONDS_PER_DAY, QueryHistory


@pytest.fixture
def history(clock):
    return QueryHistory(max_entries=100, clock=clock)


class TestRecording:
    def test_new_entry(self, history, clock):
        history.record(".name")
        entry = history.get(".name")
        assert entry.count == 1
        assert entry.first_used == entry.last_used == clock.now

    def test_duplicates_merge(self, history):
        for _ in range(4):
            history.record(".name")
        assert len(history) == 1
        assert history.get(".name").count == 4

    def test_duplicate_refreshes_last_used(self, history, clock):
        history.record(".name")
        first = clock.now
        clock.advance(60)
        history.record(".name")
        entry = history.get(".name")
        assert entry.first_used == first
        assert entry.last_used == first + 60

    def test_blank_ignored(self, history):
        history.record("")
        history.record("   ")
        history.record("\t\n")
        assert len(history) == 0

    def test_exact_text_is_key(self, history):
        history.record(".name")
        history.record(".name ")
        assert len(history) == 2
        assert ".name " in history


class TestScoring:
    def test_fresh_entry_score(self, history):
        history.record(".a")
        # count 1 * 0.5 + decay 1.0 * 0.5
        assert history.score(history.get(".a")) == pytest.approx(1.0)

    def test_decay_after_one_day(self, history, clock):
        history.record(".a")
        clock.advance(SECONDS_PER_DAY)
        assert history.time_decay(history.get(".a").last_used) == pytest.approx(
            math.exp(-1)
        )

    def test_future_timestamp_clamped(self, history, clock):
        assert history.time_decay(clock.now + 1000) == 1.0

    def test_recent_weight(self, clock):
        history = QueryHistory(recent_weight=1.0, clock=clock)
        for _ in range(10):
            history.record(".a")
        assert history.score(history.get(".a")) == pytest.approx(1.0)

    def test_count_dominates_recency(self, history, clock):
        for _ in range(3):
            history.record(".name")
        clock.advance(10 * SECONDS_PER_DAY)
        history.record(".users[0].name")
        assert history.score(history.get(".name")) > history.score(
            history.get(".users[0].name")
        )


class TestSuggestions:
    def test_prefix_match(self, history):
        history.record(".name")
        history.record(".age")
        history.record(".users[0]")
        suggestions = history.get_suggestions(".u", 5)
        assert [s.text for s in suggestions] == [".users[0]"]

    def test_short_prefix_returns_nothing(self, history):
        history.record(".name")
        assert history.get_suggestions("", 5) == []
        assert history.get_suggestions(".", 5) == []
        assert len(history.get_suggestions(".n", 5)) == 1

    def test_non_positive_limit_returns_nothing(self, history):
        for q in (".a1", ".a2", ".a3"):
            history.record(q)
        assert history.get_suggestions(".a", 0) == []
        assert history.get_suggestions(".a", -1) == []

    def test_exact_match_excluded(self, history):
        history.record(".name")
        assert history.get_suggestions(".name", 5) == []

    def test_ranked_by_count(self, history):
        for _ in range(3):
            history.record(".name")
        history.record(".users[0].name")
        history.record(".names")

        suggestions = history.get_suggestions(".n", 5)
        assert [s.text for s in suggestions] == [".name", ".names"]
        assert suggestions[0].score > suggestions[1].score

    def test_ranking_scenario(self, history):
        for _ in range(3):
            history.record(".name")
        history.record(".users[0].name")

        name = history.score(history.get(".name"))
        users = history.score(history.get(".users[0].name"))
        assert name > users
        assert [s.text for s in history.get_suggestions(".n", 5)] == [".name"]

    def test_limit(self, history):
        for q in (".a1", ".a2", ".a3", ".a4"):
            history.record(q)
        assert len(history.get_suggestions(".a", 2)) == 2

    def test_equal_scores_ordered_by_text(self, history):
        for q in (".ab", ".ac", ".aa"):
            history.record(q)
        assert [s.text for s in history.get_suggestions(".a", 5)] == [
            ".aa",
            ".ab",
            ".ac",
        ]

    def test_best_suggestion(self, history):
        history.record(".users")
        history.record(".users")
        history.record(".user_count")
        assert history.get_best_suggestion(".us") == ".users"
        assert history.get_best_suggestion(".x") is None
        assert history.get_best_suggestion(".") is None


class TestEviction:
    def test_capacity_respected(self, clock):
        history = QueryHistory(max_entries=5, clock=clock)
        for i in range(8):
            history.record(f".q{i}")
        assert len(history) == 5

    def test_lowest_score_evicted(self, clock):
        history = QueryHistory(max_entries=3, clock=clock)
        for _ in range(3):
            history.record(".frequent")
        history.record(".stale")
        clock.advance(5 * SECONDS_PER_DAY)
        history.record(".fresh")
        history.record(".newest")

        assert ".stale" not in history
        assert {e.query for e in history.entries()} == {
            ".frequent",
            ".fresh",
            ".newest",
        }

    def test_repeat_does_not_evict(self, clock):
        history = QueryHistory(max_entries=2, clock=clock)
        history.record(".a")
        history.record(".b")
        history.record(".a")
        assert len(history) == 2

    def test_many_distinct_queries(self, clock):
        history = QueryHistory(clock=clock)
        for i in range(150):
            clock.advance(1)
            history.record(f".field{i}")
        assert len(history) == 100
        # Older entries have decayed slightly more, so they go first.
        assert ".field0" not in history
        assert ".field149" in history
