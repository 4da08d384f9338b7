"""Collaborative filtering over a flat interaction log.

Two-hop signal propagation: people who interacted with the same people as
the target user also interacted with... Scores are raw sums, neither
normalized nor symmetric; use normalize_collaborative_scores before mixing
them with bounded scores.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..models import InteractionEvent, InteractionType, RecommendationCandidate
from ..similarity import time_decay_factor, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InteractionWeights:
    """Signal strength per interaction kind.

    Co-attending a study session is the strongest affinity signal, a direct
    message is weaker, a bare connection is the baseline.
    """

    study_session: float = 3.0
    message: float = 2.0
    connection: float = 1.0

    @classmethod
    def from_config(cls, config: Any) -> InteractionWeights:
        return cls(
            study_session=config.get_float("collaborative.weight.study_session"),
            message=config.get_float("collaborative.weight.message"),
            connection=config.get_float("collaborative.weight.connection"),
        )

    def for_type(self, interaction_type: InteractionType) -> float:
        if interaction_type == InteractionType.STUDY_SESSION:
            return self.study_session
        if interaction_type == InteractionType.MESSAGE:
            return self.message
        return self.connection


DEFAULT_INTERACTION_WEIGHTS = InteractionWeights()


def interaction_weight(
    event: InteractionEvent,
    weights: InteractionWeights = DEFAULT_INTERACTION_WEIGHTS,
) -> float:
    """Explicit per-event weight if set, otherwise the weight for its kind."""
    if event.weight is not None:
        return event.weight
    return weights.for_type(event.interaction_type)


def collaborative_filtering(
    interactions: Iterable[InteractionEvent],
    target_user: str,
    limit: int = 10,
    *,
    weights: InteractionWeights = DEFAULT_INTERACTION_WEIGHTS,
    half_life_days: float | None = None,
    now: datetime | None = None,
) -> list[RecommendationCandidate]:
    """Rank users the target has not interacted with yet.

    Args:
        interactions: Interaction log; duplicates each count
        target_user: User to recommend for
        limit: Maximum number of candidates
        weights: Per-kind interaction weights
        half_life_days: When set, every interaction weight is time-decayed
        now: Reference time for decay (defaults to wall clock)

    Returns:
        Candidates sorted by descending score; equal scores keep the order in
        which the candidate was first scored. Never contains the target user
        or anyone the target already interacted with.
    """
    log = list(interactions)
    if not log or limit <= 0:
        return []

    if half_life_days is not None and now is None:
        now = utcnow()

    def signal(event: InteractionEvent) -> float:
        value = interaction_weight(event, weights)
        if half_life_days is not None:
            value *= time_decay_factor(event.timestamp, half_life_days, now=now)
        return value

    # Step 1: everyone the target has interacted with
    target_targets = {event.target_user_id for event in log if event.source_user_id == target_user}
    if not target_targets:
        logger.debug(f"No interactions from {target_user}; no collaborative signal")
        return []

    # Step 2: peers sharing at least one of those targets
    peer_similarity: dict[str, float] = defaultdict(float)
    by_source: dict[str, list[InteractionEvent]] = defaultdict(list)
    for event in log:
        by_source[event.source_user_id].append(event)
        if event.source_user_id != target_user and event.target_user_id in target_targets:
            peer_similarity[event.source_user_id] += signal(event)

    # Step 3: propagate peer similarity through each peer's own targets
    scores: dict[str, float] = defaultdict(float)
    for peer, similarity in peer_similarity.items():
        for event in by_source[peer]:
            candidate = event.target_user_id
            if candidate in target_targets or candidate == target_user:
                continue
            scores[candidate] += similarity * signal(event)

    # Step 4: rank
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    logger.debug(
        f"Collaborative filtering for {target_user}: {len(peer_similarity)} peers, {len(scores)} candidates"
    )
    return [RecommendationCandidate(user_id=user_id, score=score) for user_id, score in ranked[:limit]]


def normalize_collaborative_scores(candidates: Iterable[RecommendationCandidate]) -> list[RecommendationCandidate]:
    """Map raw collaborative scores onto [0, 100] relative to the best one.

    Non-positive scores map to 0; order is preserved.
    """
    items = list(candidates)
    if not items:
        return []

    best = max(candidate.score for candidate in items)
    if best <= 0:
        return [RecommendationCandidate(user_id=candidate.user_id, score=0.0) for candidate in items]

    return [
        RecommendationCandidate(user_id=candidate.user_id, score=max(candidate.score, 0.0) / best * 100)
        for candidate in items
    ]
