"""
Partner recommendation scoring: content similarity, collaborative signal,
hybrid blending and diversity re-ranking.
"""

from .collaborative import (
    InteractionWeights,
    collaborative_filtering,
    interaction_weight,
    normalize_collaborative_scores,
)
from .content import (
    ContentWeights,
    ScoreBreakdown,
    content_based_score,
    content_score_breakdown,
    find_best_matches,
    match_quality_label,
)
from .engine import RecommendationEngine
from .ranking import apply_time_decay, diversify_recommendations, hybrid_score

__all__ = [
    "RecommendationEngine",
    "ContentWeights",
    "InteractionWeights",
    "ScoreBreakdown",
    "content_based_score",
    "content_score_breakdown",
    "find_best_matches",
    "match_quality_label",
    "interaction_weight",
    "collaborative_filtering",
    "normalize_collaborative_scores",
    "hybrid_score",
    "diversify_recommendations",
    "apply_time_decay",
]
