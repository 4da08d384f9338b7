"""Content-based partner scoring.

Scores two users' stated preferences on a 0-100 scale:
1. Subject overlap (Jaccard) - 40 points
2. Interest overlap (Jaccard) - 30 points
3. Same skill level - 15 points
4. Same study style - 15 points
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..models import UserAttributes
from ..similarity import jaccard, normalize_terms

logger = logging.getLogger(__name__)

MAX_SCORE = 100

QUALITY_LABELS: list[tuple[int, str]] = [
    (80, "Excellent Match"),
    (70, "Great Match"),
    (60, "Good Match"),
    (50, "Fair Match"),
    (40, "Possible Match"),
]


def round_score(value: float) -> int:
    """Round half away from zero (0.5 -> 1), unlike the builtin banker's rounding."""
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))


@dataclass(frozen=True)
class ContentWeights:
    """Points per component. The defaults sum to exactly 100."""

    subjects: float = 40.0
    interests: float = 30.0
    skill_level: float = 15.0
    study_style: float = 15.0

    @classmethod
    def from_config(cls, config: Any) -> ContentWeights:
        return cls(
            subjects=config.get_float("content.weight.subjects"),
            interests=config.get_float("content.weight.interests"),
            skill_level=config.get_float("content.weight.skill_level"),
            study_style=config.get_float("content.weight.study_style"),
        )


DEFAULT_CONTENT_WEIGHTS = ContentWeights()


@dataclass
class ScoreBreakdown:
    """Breakdown of content score components for transparency."""

    total_score: int
    subject_points: float
    interest_points: float
    skill_points: float
    style_points: float

    shared_subjects: list[str] = field(default_factory=list)
    shared_interests: list[str] = field(default_factory=list)


def _labels_match(a: str | None, b: str | None) -> bool:
    return a is not None and b is not None and a == b


def _shared(a: Iterable[str], b: Iterable[str]) -> list[str]:
    return sorted(normalize_terms(a) & normalize_terms(b))


def content_score_breakdown(
    user_a: UserAttributes,
    user_b: UserAttributes,
    weights: ContentWeights = DEFAULT_CONTENT_WEIGHTS,
) -> ScoreBreakdown:
    """Score two users and keep the per-component points."""
    subject_points = jaccard(user_a.subjects, user_b.subjects) * weights.subjects
    interest_points = jaccard(user_a.interests, user_b.interests) * weights.interests
    skill_points = weights.skill_level if _labels_match(user_a.skill_level, user_b.skill_level) else 0.0
    style_points = weights.study_style if _labels_match(user_a.study_style, user_b.study_style) else 0.0

    raw = subject_points + interest_points + skill_points + style_points
    total = min(max(round_score(raw), 0), MAX_SCORE)

    return ScoreBreakdown(
        total_score=total,
        subject_points=subject_points,
        interest_points=interest_points,
        skill_points=skill_points,
        style_points=style_points,
        shared_subjects=_shared(user_a.subjects, user_b.subjects),
        shared_interests=_shared(user_a.interests, user_b.interests),
    )


def content_based_score(
    user_a: UserAttributes,
    user_b: UserAttributes,
    weights: ContentWeights = DEFAULT_CONTENT_WEIGHTS,
) -> int:
    """Content similarity of two users, an integer in [0, 100]."""
    return content_score_breakdown(user_a, user_b, weights).total_score


def match_quality_label(score: float) -> str:
    for threshold, label in QUALITY_LABELS:
        if score >= threshold:
            return label
    return "Low Match"


def find_best_matches(
    user: UserAttributes,
    candidates: Iterable[UserAttributes],
    limit: int = 10,
    min_score: float = 40,
    weights: ContentWeights = DEFAULT_CONTENT_WEIGHTS,
) -> list[tuple[UserAttributes, ScoreBreakdown]]:
    """Best content matches for a user from a candidate pool.

    The user itself is skipped, candidates under ``min_score`` are dropped,
    and equal scores keep candidate order.
    """
    scored = []
    for candidate in candidates:
        if candidate.id == user.id:
            continue
        breakdown = content_score_breakdown(user, candidate, weights)
        if breakdown.total_score >= min_score:
            scored.append((candidate, breakdown))

    scored.sort(key=lambda item: item[1].total_score, reverse=True)
    logger.debug(f"Found {len(scored)} content matches for {user.id} at min_score={min_score}")
    return scored[: max(limit, 0)]
