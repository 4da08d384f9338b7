"""
Social graph components for partner recommendations
"""

from .graph_builder import build_social_graph
from .result_cache import RecommendationCache, make_cache_key
from .social_graph import SocialGraph

__all__ = ["SocialGraph", "build_social_graph", "RecommendationCache", "make_cache_key"]
