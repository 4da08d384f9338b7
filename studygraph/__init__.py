"""
studygraph - social graph queries and partner recommendation scoring.

Pure in-memory computation: callers pass connection pairs, interaction
events and attribute snapshots, and get plain records back.
"""

from .graph import RecommendationCache, SocialGraph, build_social_graph
from .models import (
    ConnectionPair,
    FriendOfFriend,
    GraphStats,
    InteractionEvent,
    InteractionType,
    PartnerRecommendation,
    RecommendationCandidate,
    UserAttributes,
)
from .recommendation import RecommendationEngine
from .similarity import jaccard, time_decay_factor

__all__ = [
    "SocialGraph",
    "build_social_graph",
    "RecommendationCache",
    "RecommendationEngine",
    "ConnectionPair",
    "FriendOfFriend",
    "GraphStats",
    "InteractionEvent",
    "InteractionType",
    "PartnerRecommendation",
    "RecommendationCandidate",
    "UserAttributes",
    "jaccard",
    "time_decay_factor",
]
