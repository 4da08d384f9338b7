"""Tests for interaction weights and two-hop collaborative filtering."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from studygraph.models import InteractionEvent, InteractionType, RecommendationCandidate
from studygraph.recommendation import (
    InteractionWeights,
    collaborative_filtering,
    interaction_weight,
    normalize_collaborative_scores,
)

FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


def event(source: str, target: str, kind: InteractionType, days_ago: float = 0, weight: float | None = None):
    return InteractionEvent(
        source_user_id=source,
        target_user_id=target,
        interaction_type=kind,
        timestamp=FIXED_NOW - timedelta(days=days_ago),
        weight=weight,
    )


class TestInteractionWeight:
    def test_weights_by_kind(self):
        assert interaction_weight(event("a", "b", InteractionType.STUDY_SESSION)) == 3.0
        assert interaction_weight(event("a", "b", InteractionType.MESSAGE)) == 2.0
        assert interaction_weight(event("a", "b", InteractionType.CONNECTION)) == 1.0

    def test_explicit_weight_wins(self):
        assert interaction_weight(event("a", "b", InteractionType.STUDY_SESSION, weight=0.25)) == 0.25

    def test_explicit_zero_weight_is_respected(self):
        assert interaction_weight(event("a", "b", InteractionType.MESSAGE, weight=0.0)) == 0.0

    def test_custom_weights(self):
        weights = InteractionWeights(study_session=5.0, message=1.0, connection=0.5)
        assert interaction_weight(event("a", "b", InteractionType.CONNECTION), weights) == 0.5


class TestCollaborativeFiltering:
    def test_example_scenario(self, sample_interactions):
        result = collaborative_filtering(sample_interactions, "A")

        assert result == [RecommendationCandidate(user_id="D", score=6.0)]

    def test_empty_log(self):
        assert collaborative_filtering([], "A") == []

    def test_target_without_interactions(self, sample_interactions):
        assert collaborative_filtering(sample_interactions, "nobody") == []

    def test_excludes_target_and_existing_targets(self):
        log = [
            event("A", "B", InteractionType.MESSAGE),
            event("A", "E", InteractionType.MESSAGE),
            event("C", "B", InteractionType.MESSAGE),
            event("C", "A", InteractionType.MESSAGE),
            event("C", "E", InteractionType.MESSAGE),
            event("C", "F", InteractionType.MESSAGE),
        ]

        result = collaborative_filtering(log, "A")
        ids = [candidate.user_id for candidate in result]

        assert "A" not in ids
        assert "B" not in ids
        assert "E" not in ids
        assert ids == ["F"]
        # C shares B and E with A: similarity 2 + 2 = 4; C -> F message weight 2
        assert result[0].score == pytest.approx(8.0)

    def test_duplicates_each_contribute(self):
        log = [
            event("A", "B", InteractionType.CONNECTION),
            event("C", "B", InteractionType.CONNECTION),
            event("C", "B", InteractionType.CONNECTION),
            event("C", "D", InteractionType.CONNECTION),
            event("C", "D", InteractionType.CONNECTION),
        ]

        result = collaborative_filtering(log, "A")

        # peer similarity 2, two C -> D events each add 2 * 1
        assert result == [RecommendationCandidate(user_id="D", score=4.0)]

    def test_sorted_descending_and_limited(self):
        log = [
            event("A", "B", InteractionType.STUDY_SESSION),
            event("C", "B", InteractionType.STUDY_SESSION),
            event("C", "low", InteractionType.CONNECTION),
            event("C", "high", InteractionType.STUDY_SESSION),
            event("C", "mid", InteractionType.MESSAGE),
        ]

        result = collaborative_filtering(log, "A")
        assert [c.user_id for c in result] == ["high", "mid", "low"]
        assert [c.score for c in result] == [9.0, 6.0, 3.0]

        assert [c.user_id for c in collaborative_filtering(log, "A", limit=2)] == ["high", "mid"]

    def test_ties_keep_first_scored_order(self):
        log = [
            event("A", "B", InteractionType.MESSAGE),
            event("C", "B", InteractionType.MESSAGE),
            event("C", "zed", InteractionType.MESSAGE),
            event("C", "amy", InteractionType.MESSAGE),
        ]

        assert [c.user_id for c in collaborative_filtering(log, "A")] == ["zed", "amy"]

    def test_not_symmetric(self, sample_interactions):
        """D gets a signal for A, but D never acted so D gets nothing."""
        assert collaborative_filtering(sample_interactions, "D") == []

    def test_time_decay_halves_old_signal(self):
        log = [
            event("A", "B", InteractionType.CONNECTION, days_ago=0),
            event("C", "B", InteractionType.CONNECTION, days_ago=0),
            event("C", "D", InteractionType.CONNECTION, days_ago=30),
        ]

        plain = collaborative_filtering(log, "A")
        decayed = collaborative_filtering(log, "A", half_life_days=30, now=FIXED_NOW)

        assert plain[0].score == pytest.approx(1.0)
        assert decayed[0].score == pytest.approx(0.5)

    def test_zero_limit(self, sample_interactions):
        assert collaborative_filtering(sample_interactions, "A", limit=0) == []


class TestNormalizeCollaborativeScores:
    def test_scales_to_best(self):
        raw = [
            RecommendationCandidate(user_id="a", score=8.0),
            RecommendationCandidate(user_id="b", score=2.0),
        ]

        normalized = normalize_collaborative_scores(raw)

        assert [(c.user_id, c.score) for c in normalized] == [("a", 100.0), ("b", 25.0)]
        assert raw[0].score == 8.0

    def test_empty(self):
        assert normalize_collaborative_scores([]) == []

    def test_all_zero(self):
        normalized = normalize_collaborative_scores([RecommendationCandidate(user_id="a", score=0.0)])
        assert normalized[0].score == 0.0

    def test_negative_scores_floor_at_zero(self):
        normalized = normalize_collaborative_scores(
            [
                RecommendationCandidate(user_id="a", score=4.0),
                RecommendationCandidate(user_id="b", score=-2.0),
            ]
        )
        assert [c.score for c in normalized] == [100.0, 0.0]
