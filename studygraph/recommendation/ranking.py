"""Score blending, recency decay and diversity re-ranking."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import date, datetime
from typing import Protocol, TypeVar

from ..similarity import DEFAULT_HALF_LIFE_DAYS, normalize_terms, time_decay_factor
from .content import round_score

logger = logging.getLogger(__name__)

DEFAULT_LOOKAHEAD_WINDOW = 5


class HasUserId(Protocol):
    @property
    def user_id(self) -> str: ...


T = TypeVar("T", bound=HasUserId | str)

AttributeLookup = Mapping[str, Iterable[str]] | Callable[[str], Iterable[str]]


def hybrid_score(content_score: float, collaborative_score: float, content_weight: float = 0.6) -> int:
    """Linear blend ``content * w + collaborative * (1 - w)``, rounded.

    The collaborative score must already be normalized to [0, 100] (see
    normalize_collaborative_scores); it is not rescaled here. ``content_weight``
    is clamped to [0, 1].
    """
    if not 0.0 <= content_weight <= 1.0:
        logger.debug(f"Clamping content_weight {content_weight} into [0, 1]")
        content_weight = min(max(content_weight, 0.0), 1.0)
    if not 0.0 <= collaborative_score <= 100.0:
        logger.warning(f"Collaborative score {collaborative_score} is outside [0, 100]; normalize before blending")

    return round_score(content_score * content_weight + collaborative_score * (1 - content_weight))


def apply_time_decay(
    score: float,
    event_time: datetime | date,
    half_life_days: float = DEFAULT_HALF_LIFE_DAYS,
    *,
    now: datetime | None = None,
) -> float:
    return score * time_decay_factor(event_time, half_life_days, now=now)


def _candidate_id(candidate: HasUserId | str) -> str:
    return candidate if isinstance(candidate, str) else candidate.user_id


def _lookup(attributes: AttributeLookup, user_id: str) -> set[str]:
    if callable(attributes):
        values = attributes(user_id)
    else:
        values = attributes.get(user_id, ())
    return normalize_terms(values or ())


def diversify_recommendations(
    candidates: Sequence[T],
    attributes: AttributeLookup,
    diversity_factor: float = 0.3,
    lookahead_window: int = DEFAULT_LOOKAHEAD_WINDOW,
) -> list[T]:
    """Greedy re-ranking that spreads attributes across the top of the list.

    The first candidate stays in place. Each following position is filled
    by whichever of the next ``lookahead_window`` unplaced candidates brings
    the largest share of attributes not yet seen; ties keep the earlier
    candidate. ``diversity_factor`` is accepted for future blending and does
    not change the ordering today.

    Args:
        candidates: Ranked candidates (objects with ``user_id`` or plain ids)
        attributes: Mapping or callable from user id to that user's attributes
        diversity_factor: Reserved tuning knob
        lookahead_window: How many unplaced candidates compete per position

    Returns:
        A new list with the same candidates reordered
    """
    items = list(candidates)
    if len(items) <= 1:
        return items

    window = max(lookahead_window, 1)
    cached: dict[str, set[str]] = {}

    def attrs_of(candidate: T) -> set[str]:
        user_id = _candidate_id(candidate)
        if user_id not in cached:
            cached[user_id] = _lookup(attributes, user_id)
        return cached[user_id]

    result = [items[0]]
    selected_attributes = set(attrs_of(items[0]))
    remaining = items[1:]

    while remaining:
        best_index = 0
        best_diversity = -1.0
        for index, candidate in enumerate(remaining[:window]):
            candidate_attrs = attrs_of(candidate)
            if candidate_attrs:
                diversity = len(candidate_attrs - selected_attributes) / len(candidate_attrs)
            else:
                diversity = 0.0
            if diversity > best_diversity:
                best_index, best_diversity = index, diversity

        chosen = remaining.pop(best_index)
        result.append(chosen)
        selected_attributes |= attrs_of(chosen)

    logger.debug(f"Diversified {len(result)} candidates (factor={diversity_factor}, window={window})")
    return result
