"""
Root test configuration and fixtures for studygraph.

Provides common fixtures for the unit tests:
- a mock ConfigLoader with the default tuning values
- a fixed "now" so time decay is deterministic
- a small sample graph and interaction log

Note: sys.path manipulation is handled here to ensure imports work correctly.
"""

from __future__ import annotations

import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


# =============================================================================
# Configuration Fixtures
# =============================================================================

# Default test configuration values matching the schema defaults
TEST_CONFIG: dict[str, object] = {
    "similarity.time_decay.half_life_days": 30.0,
    "content.weight.subjects": 40.0,
    "content.weight.interests": 30.0,
    "content.weight.skill_level": 15.0,
    "content.weight.study_style": 15.0,
    "collaborative.weight.study_session": 3.0,
    "collaborative.weight.message": 2.0,
    "collaborative.weight.connection": 1.0,
    "collaborative.default_limit": 10,
    "hybrid.content_weight": 0.6,
    "diversity.lookahead_window": 5,
    "diversity.factor": 0.3,
    "recommendation.min_score": 40.0,
    "recommendation.default_limit": 10,
    "recommendation.mutual_connection_bonus": 5.0,
    "recommendation.mutual_connection_bonus_cap": 15.0,
    "cache.ttl_seconds": 900,
    "cache.max_size": 100,
}


class MockConfigLoader:
    """Mock ConfigLoader for testing without environment influence."""

    def __init__(self, config: dict[str, object] | None = None):
        self._config = dict(TEST_CONFIG)
        if config:
            self._config.update(config)

    def get(self, key: str) -> object:
        return self._config.get(key)

    def get_int(self, key: str, default: int = 0) -> int:
        value = self._config.get(key)
        if value is not None and isinstance(value, (int, float, str)):
            return int(value)
        return default

    def get_float(self, key: str, default: float = 0.0) -> float:
        value = self._config.get(key)
        if value is not None and isinstance(value, (int, float, str)):
            return float(value)
        return default


@pytest.fixture
def mock_config():
    """
    Provide a mock ConfigLoader that is active as the singleton.

    Usage:
        def test_something(mock_config):
            from studygraph.config import ConfigLoader
            config = ConfigLoader.get_instance()
            assert config.get_int("diversity.lookahead_window") == 5
    """
    from studygraph.config import ConfigLoader

    mock_loader = MockConfigLoader()
    with ConfigLoader.use(mock_loader):  # type: ignore[arg-type]
        yield mock_loader


@pytest.fixture(autouse=True)
def reset_config_singleton():
    """Reset ConfigLoader singleton between tests."""
    yield
    from studygraph.config import ConfigLoader

    ConfigLoader.reset()


# =============================================================================
# Data Fixtures
# =============================================================================


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def sample_graph():
    """Graph with edges (A,B), (B,C), (A,D)."""
    from studygraph.graph import SocialGraph

    graph = SocialGraph()
    graph.add_connection("A", "B")
    graph.add_connection("B", "C")
    graph.add_connection("A", "D")
    return graph


@pytest.fixture
def sample_interactions():
    """A and C both studied with B; C also messaged D."""
    from studygraph.models import InteractionEvent, InteractionType

    yesterday = FIXED_NOW - timedelta(days=1)
    return [
        InteractionEvent(
            source_user_id="A",
            target_user_id="B",
            interaction_type=InteractionType.STUDY_SESSION,
            timestamp=yesterday,
        ),
        InteractionEvent(
            source_user_id="C",
            target_user_id="B",
            interaction_type=InteractionType.STUDY_SESSION,
            timestamp=yesterday,
        ),
        InteractionEvent(
            source_user_id="C",
            target_user_id="D",
            interaction_type=InteractionType.MESSAGE,
            timestamp=yesterday,
        ),
    ]
