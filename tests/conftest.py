"""
Lolos - Test Configuration and Fixtures

Common fixtures for all test modules. Card builders and canned states live
in ``tests/helpers.py``.
"""

import pytest

from src.config.settings import get_settings
from src.engine.base import GameConfig
from src.engine.randomness import SeededRandom


@pytest.fixture
def rng() -> SeededRandom:
    """Deterministic randomness source."""
    return SeededRandom(1234)


@pytest.fixture
def two_player_config() -> GameConfig:
    return GameConfig(player_names=("Ada", "Bo"))


@pytest.fixture
def three_player_config() -> GameConfig:
    return GameConfig(player_names=("Ada", "Bo", "Cy"), cards_per_player=7)


@pytest.fixture
def clean_settings():
    """Clear the cached settings before and after a test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
