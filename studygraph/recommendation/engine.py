"""
Partner recommendation engine.

Reads its tuning from ConfigLoader once and exposes every scoring step as a
method, plus recommend_partners which combines them:

1. Content similarity of stated preferences (0-100)
2. Collaborative signal from the interaction log, normalized to 0-100
3. Hybrid blend of the two
4. Bonus per mutual connection in the social graph (capped)
5. Minimum score filter, ranking, then diversity re-ranking

The engine holds configuration only; every call works on the data passed in.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Any

from ..config import ConfigLoader
from ..graph.social_graph import SocialGraph
from ..logging_config import TRACE
from ..models import InteractionEvent, PartnerRecommendation, RecommendationCandidate, UserAttributes
from ..similarity import time_decay_factor, utcnow
from .collaborative import (
    InteractionWeights,
    collaborative_filtering,
    interaction_weight,
    normalize_collaborative_scores,
)
from .content import ContentWeights, ScoreBreakdown, content_score_breakdown, find_best_matches, match_quality_label
from .ranking import AttributeLookup, T, diversify_recommendations, hybrid_score

logger = logging.getLogger(__name__)


class RecommendationEngine:
    """Rule-based partner scorer configured from the config registry."""

    def __init__(self, config: Any | None = None):
        if config is None:
            config = ConfigLoader.get_instance()

        self.content_weights = ContentWeights.from_config(config)
        self.interaction_weights = InteractionWeights.from_config(config)
        self.half_life_days = config.get_float("similarity.time_decay.half_life_days")
        self.content_weight = config.get_float("hybrid.content_weight")
        self.lookahead_window = config.get_int("diversity.lookahead_window")
        self.diversity_factor = config.get_float("diversity.factor")
        self.collaborative_limit = config.get_int("collaborative.default_limit")
        self.min_score = config.get_float("recommendation.min_score")
        self.default_limit = config.get_int("recommendation.default_limit")
        self.mutual_bonus = config.get_float("recommendation.mutual_connection_bonus")
        self.mutual_bonus_cap = config.get_float("recommendation.mutual_connection_bonus_cap")

        logger.debug(
            f"RecommendationEngine configured: content_weight={self.content_weight}, "
            f"half_life_days={self.half_life_days}, window={self.lookahead_window}"
        )

    # ------------------------------------------------------------------
    # Individual signals
    # ------------------------------------------------------------------

    def content_based_score(self, user_a: UserAttributes, user_b: UserAttributes) -> int:
        return content_score_breakdown(user_a, user_b, self.content_weights).total_score

    def content_score_breakdown(self, user_a: UserAttributes, user_b: UserAttributes) -> ScoreBreakdown:
        return content_score_breakdown(user_a, user_b, self.content_weights)

    def find_best_matches(
        self,
        user: UserAttributes,
        candidates: Iterable[UserAttributes],
        limit: int | None = None,
        min_score: float | None = None,
    ) -> list[tuple[UserAttributes, ScoreBreakdown]]:
        return find_best_matches(
            user,
            candidates,
            limit=self.default_limit if limit is None else limit,
            min_score=self.min_score if min_score is None else min_score,
            weights=self.content_weights,
        )

    def interaction_weight(self, event: InteractionEvent) -> float:
        return interaction_weight(event, self.interaction_weights)

    def collaborative_filtering(
        self,
        interactions: Iterable[InteractionEvent],
        target_user: str,
        limit: int | None = None,
        *,
        decay: bool = False,
        now: datetime | None = None,
    ) -> list[RecommendationCandidate]:
        return collaborative_filtering(
            interactions,
            target_user,
            limit=self.collaborative_limit if limit is None else limit,
            weights=self.interaction_weights,
            half_life_days=self.half_life_days if decay else None,
            now=now,
        )

    def hybrid_score(
        self,
        content_score: float,
        collaborative_score: float,
        content_weight: float | None = None,
    ) -> int:
        weight = self.content_weight if content_weight is None else content_weight
        return hybrid_score(content_score, collaborative_score, weight)

    def diversify_recommendations(
        self,
        candidates: Sequence[T],
        attributes: AttributeLookup,
        diversity_factor: float | None = None,
    ) -> list[T]:
        return diversify_recommendations(
            candidates,
            attributes,
            diversity_factor=self.diversity_factor if diversity_factor is None else diversity_factor,
            lookahead_window=self.lookahead_window,
        )

    def time_decay_factor(self, event_time: datetime | date, *, now: datetime | None = None) -> float:
        return time_decay_factor(event_time, self.half_life_days, now=now)

    def apply_time_decay(self, score: float, event_time: datetime | date, *, now: datetime | None = None) -> float:
        return score * self.time_decay_factor(event_time, now=now)

    # ------------------------------------------------------------------
    # Combined ranking
    # ------------------------------------------------------------------

    def recommend_partners(
        self,
        user: UserAttributes,
        candidates: Iterable[UserAttributes],
        interactions: Iterable[InteractionEvent] = (),
        graph: SocialGraph | None = None,
        limit: int | None = None,
        now: datetime | None = None,
    ) -> list[PartnerRecommendation]:
        """Rank candidate partners for a user.

        Args:
            user: The user asking for partners
            candidates: Attribute snapshots of possible partners
            interactions: Interaction log for the collaborative signal
                (time-decayed against ``now``)
            graph: Optional social graph; existing connections are excluded
                and mutual connections earn a bonus
            limit: Maximum number of results (default from config)
            now: Reference time for decay (defaults to wall clock)

        Returns:
            Recommendations sorted by score, then diversified on subjects and
            interests. Equal scores keep candidate order.
        """
        limit = self.default_limit if limit is None else limit
        if limit <= 0:
            return []
        if now is None:
            now = utcnow()

        existing = graph.get_connections(user.id) if graph is not None else set()
        pool: list[UserAttributes] = []
        seen_ids: set[str] = set()
        for candidate in candidates:
            if candidate.id == user.id or candidate.id in existing or candidate.id in seen_ids:
                continue
            seen_ids.add(candidate.id)
            pool.append(candidate)

        if not pool:
            logger.debug(f"No eligible candidates for {user.id}")
            return []

        log = list(interactions)
        raw_collaborative = collaborative_filtering(
            log,
            user.id,
            limit=len(pool) + len(log),
            weights=self.interaction_weights,
            half_life_days=self.half_life_days,
            now=now,
        )
        collaborative = {c.user_id: c.score for c in normalize_collaborative_scores(raw_collaborative)}

        results: list[PartnerRecommendation] = []
        for candidate in pool:
            content = self.content_based_score(user, candidate)
            collaborative_score = collaborative.get(candidate.id, 0.0)
            blended = self.hybrid_score(content, collaborative_score)

            mutual = len(graph.get_mutual_connections(user.id, candidate.id)) if graph is not None else 0
            bonus = min(mutual * self.mutual_bonus, self.mutual_bonus_cap)
            final = min(max(blended + bonus, 0.0), 100.0)

            logger.log(
                TRACE,
                f"{user.id} -> {candidate.id}: content={content} collaborative={collaborative_score:.1f} "
                f"mutual={mutual} final={final}"
            )

            if final < self.min_score:
                continue

            results.append(
                PartnerRecommendation(
                    user_id=candidate.id,
                    score=final,
                    content_score=content,
                    collaborative_score=collaborative_score,
                    mutual_connections=mutual,
                    quality_label=match_quality_label(final),
                )
            )

        results.sort(key=lambda r: r.score, reverse=True)
        top = results[:limit]

        attributes = {c.id: c.subjects | c.interests for c in pool}
        ranked = self.diversify_recommendations(top, attributes)
        logger.info(f"Recommended {len(ranked)} partners for {user.id} from {len(pool)} candidates")
        return ranked
