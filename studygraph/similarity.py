"""Similarity primitives shared by the graph and recommendation code.

- Jaccard overlap of preference sets (case-insensitive, whitespace-trimmed)
- Exponential time decay against a half-life
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from datetime import UTC, date, datetime

DEFAULT_HALF_LIFE_DAYS = 30.0


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


def normalize_terms(terms: Iterable[str]) -> set[str]:
    """Lowercase and trim every term, dropping ones that end up blank."""
    normalized = set()
    for term in terms:
        cleaned = term.strip().lower()
        if cleaned:
            normalized.add(cleaned)
    return normalized


def jaccard(set_a: Iterable[str], set_b: Iterable[str]) -> float:
    """Jaccard similarity of two preference sets in [0, 1].

    Two empty sets are identical (1.0) so users without stated preferences
    are not penalized against each other.
    """
    a = normalize_terms(set_a)
    b = normalize_terms(set_b)

    if not a and not b:
        return 1.0

    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def days_since(when: datetime | date, *, now: datetime | None = None) -> float:
    """Fractional days elapsed from `when` to `now` (default: wall clock).

    Naive datetimes are treated as UTC. Future instants give negative values.
    """
    if now is None:
        now = utcnow()
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    if isinstance(when, datetime):
        if when.tzinfo is None:
            when = when.replace(tzinfo=UTC)
        delta = now - when.astimezone(UTC)
        return delta.total_seconds() / 86400.0

    return float((now.date() - when).days)


def time_decay_factor(
    event_time: datetime | date,
    half_life_days: float = DEFAULT_HALF_LIFE_DAYS,
    *,
    now: datetime | None = None,
) -> float:
    """
    Half-life decay weight in (0, 1]:
    - 0 days ago            -> 1.0
    - half_life_days ago    -> 0.5
    - 2 * half_life_days    -> 0.25

    A non-positive half-life disables decay, and events in the future count
    as happening now. Very old events bottom out at the smallest positive
    float instead of underflowing to 0.
    """
    if half_life_days <= 0:
        return 1.0
    days = max(days_since(event_time, now=now), 0.0)
    return max(0.5 ** (days / half_life_days), sys.float_info.min)
