"""Configuration schema registry.

Defines all valid configuration keys with their types, defaults and
validation rules. This is the single source of truth for engine tuning.
"""

from __future__ import annotations

from .types import ConfigKey, ConfigType

# =============================================================================
# CONFIGURATION SCHEMA REGISTRY
#
# All configuration keys must be defined here. Unknown keys will be rejected.
# =============================================================================

CONFIG_SCHEMA: dict[str, ConfigKey] = {
    # =========================================================================
    # SIMILARITY
    # =========================================================================
    "similarity.time_decay.half_life_days": ConfigKey(
        key="similarity.time_decay.half_life_days",
        config_type=ConfigType.FLOAT,
        default=30.0,
        description="Days after which an interaction counts half as much",
        min_value=0.001,
    ),
    # =========================================================================
    # CONTENT-BASED SCORING (points, sum to 100)
    # =========================================================================
    "content.weight.subjects": ConfigKey(
        key="content.weight.subjects",
        config_type=ConfigType.FLOAT,
        default=40.0,
        description="Points awarded for full subject overlap",
        min_value=0.0,
        max_value=100.0,
    ),
    "content.weight.interests": ConfigKey(
        key="content.weight.interests",
        config_type=ConfigType.FLOAT,
        default=30.0,
        description="Points awarded for full interest overlap",
        min_value=0.0,
        max_value=100.0,
    ),
    "content.weight.skill_level": ConfigKey(
        key="content.weight.skill_level",
        config_type=ConfigType.FLOAT,
        default=15.0,
        description="Points awarded when both skill levels are set and equal",
        min_value=0.0,
        max_value=100.0,
    ),
    "content.weight.study_style": ConfigKey(
        key="content.weight.study_style",
        config_type=ConfigType.FLOAT,
        default=15.0,
        description="Points awarded when both study styles are set and equal",
        min_value=0.0,
        max_value=100.0,
    ),
    # =========================================================================
    # COLLABORATIVE FILTERING - interaction weights by kind
    # =========================================================================
    "collaborative.weight.study_session": ConfigKey(
        key="collaborative.weight.study_session",
        config_type=ConfigType.FLOAT,
        default=3.0,
        description="Signal weight of a shared study session",
        min_value=0.0,
    ),
    "collaborative.weight.message": ConfigKey(
        key="collaborative.weight.message",
        config_type=ConfigType.FLOAT,
        default=2.0,
        description="Signal weight of a direct message",
        min_value=0.0,
    ),
    "collaborative.weight.connection": ConfigKey(
        key="collaborative.weight.connection",
        config_type=ConfigType.FLOAT,
        default=1.0,
        description="Signal weight of a bare connection",
        min_value=0.0,
    ),
    "collaborative.default_limit": ConfigKey(
        key="collaborative.default_limit",
        config_type=ConfigType.INT,
        default=10,
        description="Default number of collaborative candidates returned",
        min_value=1,
    ),
    # =========================================================================
    # HYBRID BLEND / DIVERSITY
    # =========================================================================
    "hybrid.content_weight": ConfigKey(
        key="hybrid.content_weight",
        config_type=ConfigType.FLOAT,
        default=0.6,
        description="Share of the content score in the hybrid blend",
        min_value=0.0,
        max_value=1.0,
    ),
    "diversity.lookahead_window": ConfigKey(
        key="diversity.lookahead_window",
        config_type=ConfigType.INT,
        default=5,
        description="Unplaced candidates examined per position when diversifying",
        min_value=1,
        max_value=100,
    ),
    "diversity.factor": ConfigKey(
        key="diversity.factor",
        config_type=ConfigType.FLOAT,
        default=0.3,
        description="Diversity factor passed to the re-ranker (reserved)",
        min_value=0.0,
        max_value=1.0,
    ),
    # =========================================================================
    # PARTNER RECOMMENDATION
    # =========================================================================
    "recommendation.min_score": ConfigKey(
        key="recommendation.min_score",
        config_type=ConfigType.FLOAT,
        default=40.0,
        description="Minimum final score for a partner recommendation",
        min_value=0.0,
        max_value=100.0,
    ),
    "recommendation.default_limit": ConfigKey(
        key="recommendation.default_limit",
        config_type=ConfigType.INT,
        default=10,
        description="Default number of partner recommendations",
        min_value=1,
    ),
    "recommendation.mutual_connection_bonus": ConfigKey(
        key="recommendation.mutual_connection_bonus",
        config_type=ConfigType.FLOAT,
        default=5.0,
        description="Points added per mutual connection in the social graph",
        min_value=0.0,
        max_value=100.0,
    ),
    "recommendation.mutual_connection_bonus_cap": ConfigKey(
        key="recommendation.mutual_connection_bonus_cap",
        config_type=ConfigType.FLOAT,
        default=15.0,
        description="Upper bound on the total mutual connection bonus",
        min_value=0.0,
        max_value=100.0,
    ),
    # =========================================================================
    # RESULT CACHE
    # =========================================================================
    "cache.ttl_seconds": ConfigKey(
        key="cache.ttl_seconds",
        config_type=ConfigType.INT,
        default=900,
        description="Time to live for memoized results",
        min_value=1,
    ),
    "cache.max_size": ConfigKey(
        key="cache.max_size",
        config_type=ConfigType.INT,
        default=100,
        description="Maximum number of memoized results",
        min_value=1,
    ),
}
