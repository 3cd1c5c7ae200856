"""Tests for src/config: Settings, get_settings and configure_logging."""

import logging

import pytest
from pydantic import ValidationError

from src.config.logging_config import HANDLER_NAME, LOG_FORMAT, configure_logging
from src.config.settings import Settings, get_settings
from src.engine.base import Difficulty


class TestSettings:
    def test_defaults(self, clean_settings, monkeypatch):
        for key in ("DIFFICULTY", "CARDS_PER_PLAYER", "RNG_SEED", "LOG_LEVEL", "DEBUG"):
            monkeypatch.delenv(key, raising=False)
        settings = Settings(_env_file=None)
        assert settings.difficulty == "full"
        assert settings.include_fractions
        assert settings.cards_per_player == 10
        assert settings.show_possible_results
        assert settings.rng_seed is None
        assert settings.log_level == "INFO"

    def test_env_override(self, clean_settings, monkeypatch):
        monkeypatch.setenv("DIFFICULTY", "EASY")
        monkeypatch.setenv("INCLUDE_FRACTIONS", "false")
        monkeypatch.setenv("RNG_SEED", "42")
        settings = get_settings()
        assert settings.difficulty == "easy"
        assert not settings.include_fractions
        assert settings.rng_seed == 42

    def test_cached(self, clean_settings):
        assert get_settings() is get_settings()

    def test_unknown_difficulty(self, clean_settings, monkeypatch):
        monkeypatch.setenv("DIFFICULTY", "brutal")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_to_game_config(self, clean_settings):
        settings = Settings(_env_file=None, difficulty="easy", cards_per_player=7)
        config = settings.to_game_config(["Ada", "Bo", "Cy"])
        assert config.difficulty == Difficulty.EASY
        assert config.cards_per_player == 7
        assert config.player_names == ("Ada", "Bo", "Cy")

    def test_to_game_config_validates(self, clean_settings):
        with pytest.raises(ValueError, match="Player count"):
            Settings(_env_file=None).to_game_config(["Solo"])


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo root logger changes made by configure_logging."""
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestConfigureLogging:
    def test_explicit_level(self):
        root = configure_logging("debug")
        assert root.level == logging.DEBUG
        handlers = [h for h in root.handlers if h.get_name() == HANDLER_NAME]
        assert len(handlers) == 1
        assert handlers[0].formatter._fmt == LOG_FORMAT

    def test_idempotent(self):
        configure_logging("INFO")
        root = configure_logging("WARNING")
        handlers = [h for h in root.handlers if h.get_name() == HANDLER_NAME]
        assert len(handlers) == 1
        assert root.level == logging.WARNING

    def test_level_from_settings(self, clean_settings, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        monkeypatch.delenv("DEBUG", raising=False)
        assert configure_logging().level == logging.ERROR
