"""Tests for the TTL + LRU memoization layer."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from studygraph.graph import RecommendationCache, make_cache_key
from studygraph.models import InteractionEvent, InteractionType, RecommendationCandidate, UserAttributes


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


class TestMakeCacheKey:
    def test_same_inputs_same_key(self):
        user = UserAttributes(id="u1", subjects=["Math", "CS"])
        assert make_cache_key("content", user, 10) == make_cache_key("content", user, 10)

    def test_set_order_does_not_matter(self):
        first = make_cache_key("fof", {"b", "a", "c"})
        second = make_cache_key("fof", {"c", "a", "b"})
        assert first == second

    def test_different_inputs_differ(self):
        assert make_cache_key("cf", "u1", 10) != make_cache_key("cf", "u1", 11)
        assert make_cache_key("cf", "u1") != make_cache_key("content", "u1")

    def test_key_is_prefixed_with_namespace(self):
        assert make_cache_key("cf", "u1").startswith("cf_")

    def test_datetimes_are_supported(self):
        key = make_cache_key("decay", datetime(2026, 1, 1, tzinfo=UTC))
        assert key.startswith("decay_")

    def test_set_of_models_is_order_independent(self):
        first = make_cache_key("pool", {UserAttributes(id="a", subjects=["x"]), UserAttributes(id="b")})
        second = make_cache_key("pool", {UserAttributes(id="b"), UserAttributes(id="a", subjects=["x"])})
        assert first == second

    def test_model_field_changes_change_key(self):
        base = make_cache_key("content", UserAttributes(id="a", subjects=["x"]))
        changed = make_cache_key("content", UserAttributes(id="a", subjects=["x", "y"]))
        assert base != changed

    def test_interaction_log(self):
        start = datetime(2026, 3, 1, tzinfo=UTC)
        log = [
            InteractionEvent(
                source_user_id="A",
                target_user_id="B",
                interaction_type=InteractionType.STUDY_SESSION,
                timestamp=start,
            ),
            InteractionEvent(
                source_user_id="C",
                target_user_id="B",
                interaction_type=InteractionType.MESSAGE,
                timestamp=start + timedelta(hours=1),
            ),
        ]

        key = make_cache_key("cf", log, "A", 10)

        assert key == make_cache_key("cf", list(log), "A", 10)
        assert key != make_cache_key("cf", list(reversed(log)), "A", 10)

    def test_unsupported_objects_raise(self):
        with pytest.raises(TypeError):
            make_cache_key("bad", object())


class TestRecommendationCache:
    def test_miss_then_hit(self):
        cache = RecommendationCache(clock=FakeClock())
        assert cache.get("k") is None

        cache.set("k", [RecommendationCandidate(user_id="u2", score=6.0)])

        assert cache.get("k") == [RecommendationCandidate(user_id="u2", score=6.0)]
        stats = cache.get_stats()
        assert stats["hit_count"] == 1
        assert stats["miss_count"] == 1
        assert stats["hit_rate"] == 0.5

    def test_returns_copies(self):
        cache = RecommendationCache(clock=FakeClock())
        original = [RecommendationCandidate(user_id="u2", score=6.0)]
        cache.set("k", original)

        original.append(RecommendationCandidate(user_id="u3", score=1.0))
        fetched = cache.get("k")
        fetched.clear()

        assert cache.get("k") == [RecommendationCandidate(user_id="u2", score=6.0)]

    def test_entries_expire_after_ttl(self):
        clock = FakeClock()
        cache = RecommendationCache(ttl_seconds=60, clock=clock)
        cache.set("k", "value")

        clock.now += 61

        assert cache.get("k") is None
        assert len(cache) == 0

    def test_lru_eviction_at_capacity(self):
        clock = FakeClock()
        cache = RecommendationCache(max_cache_size=2, clock=clock)
        cache.set("a", 1)
        clock.now += 1
        cache.set("b", 2)
        clock.now += 1
        cache.get("a")
        clock.now += 1

        cache.set("c", 3)

        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3

    def test_get_or_compute_only_computes_once(self):
        cache = RecommendationCache(clock=FakeClock())
        calls = []

        def compute():
            calls.append(1)
            return ["result"]

        assert cache.get_or_compute("k", compute) == ["result"]
        assert cache.get_or_compute("k", compute) == ["result"]
        assert len(calls) == 1

    def test_get_or_compute_with_model_inputs(self):
        cache = RecommendationCache(clock=FakeClock())
        user = UserAttributes(id="u1", subjects=["math"])
        pool = {UserAttributes(id="u2", subjects=["math"]), UserAttributes(id="u3")}
        calls = []

        def compute():
            calls.append(1)
            return [RecommendationCandidate(user_id="u2", score=40.0)]

        first = cache.get_or_compute(make_cache_key("matches", user, pool), compute, users=["u1"])
        reordered = set(sorted(pool, key=lambda u: u.id, reverse=True))
        second = cache.get_or_compute(make_cache_key("matches", user, reordered), compute, users=["u1"])

        assert first == second == [RecommendationCandidate(user_id="u2", score=40.0)]
        assert len(calls) == 1

    def test_cached_none_is_a_hit(self):
        cache = RecommendationCache(clock=FakeClock())
        calls = []

        def compute():
            calls.append(1)
            return None

        assert cache.get_or_compute("k", compute) is None
        assert cache.get_or_compute("k", compute) is None
        assert len(calls) == 1
        assert cache.get_stats()["hit_count"] == 1

    def test_invalidate_for_user(self):
        cache = RecommendationCache(clock=FakeClock())
        cache.set("a", 1, users=["u1", "u2"])
        cache.set("b", 2, users=["u3"])

        assert cache.invalidate_for_user("u2") == 1
        assert cache.get("a") is None
        assert cache.get("b") == 2

    def test_invalidate_and_clear(self):
        cache = RecommendationCache(clock=FakeClock())
        cache.set("a", 1)
        cache.set("b", 2)

        assert cache.invalidate("a") is True
        assert cache.invalidate("a") is False

        cache.clear()
        assert len(cache) == 0

    def test_cleanup_expired(self):
        clock = FakeClock()
        cache = RecommendationCache(ttl_seconds=10, clock=clock)
        cache.set("old", 1)
        clock.now += 5
        cache.set("new", 2)
        clock.now += 6

        assert cache.cleanup_expired() == 1
        assert cache.get("new") == 2

    def test_from_config(self, mock_config):
        mock_config._config["cache.ttl_seconds"] = 30
        mock_config._config["cache.max_size"] = 7

        cache = RecommendationCache.from_config()
        stats = cache.get_stats()

        assert stats["ttl_seconds"] == 30
        assert stats["max_size"] == 7
