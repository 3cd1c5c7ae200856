"""
Lolos - Application Settings

Loads configuration from environment variables using Pydantic Settings.
"""

from functools import lru_cache
from typing import Sequence

from pydantic import field_validator
from pydantic_settings import BaseSettings

from src.engine.base import Difficulty, GameConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Match defaults
    difficulty: str = "full"
    include_fractions: bool = True
    cards_per_player: int = 10
    show_possible_results: bool = True

    # Randomness
    rng_seed: int | None = None

    # Application
    debug: bool = False
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @field_validator("difficulty")
    @classmethod
    def _known_difficulty(cls, value: str) -> str:
        return Difficulty.from_name(value).name.lower()

    def to_game_config(self, player_names: Sequence[str]) -> GameConfig:
        """Build the engine's match configuration from these settings."""
        return GameConfig(
            player_names=tuple(player_names),
            difficulty=Difficulty.from_name(self.difficulty),
            include_fractions=self.include_fractions,
            cards_per_player=self.cards_per_player,
            show_possible_results=self.show_possible_results,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()
