"""Tests for GameConfig validation, settings loading and log formatting."""

import json

import pytest

from game_session.config import ConfigurationError, GameConfig, load_game_config
from utils import settings_store
from utils.log_utils import deep_log, format_message, log

_ENV_NAMES = (
    "PEWPEW_INITIAL_AMMUNITION",
    "PEWPEW_TIME_LIMIT_SECONDS",
    "PEWPEW_DEFAULT_CHARACTER",
    "PEWPEW_TICK_INTERVAL",
    "PEWPEW_POINTS_PER_HIT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


class TestGameConfig:
    """Test suite for GameConfig."""

    def test_defaults(self):
        """Test that the default configuration is valid."""
        config = GameConfig()
        assert config.initial_ammunition == 10
        assert config.time_limit_seconds == 60
        assert config.default_character == "sheriff_beq"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"time_limit_seconds": 0},
            {"time_limit_seconds": -5},
            {"initial_ammunition": -1},
            {"tick_interval_seconds": 0},
            {"points_per_hit": -1},
            {"default_character": "  "},
        ],
    )
    def test_invalid_values_fail_construction(self, kwargs):
        """Test that undefined countdown or ammo settings are fatal."""
        with pytest.raises(ConfigurationError):
            GameConfig(**kwargs)

    def test_zero_ammunition_allowed(self):
        """Test that an empty magazine is a valid (if short) configuration."""
        assert GameConfig(initial_ammunition=0).initial_ammunition == 0


class TestLoadGameConfig:
    """Test suite for load_game_config."""

    def test_reads_game_section(self):
        """Test that values come from the 'game' settings section."""
        config = load_game_config({"game": {"initial_ammunition": 3, "time_limit_seconds": 30}})
        assert config.initial_ammunition == 3
        assert config.time_limit_seconds == 30
        assert config.default_character == "sheriff_beq"

    def test_missing_section_uses_defaults(self):
        """Test that an empty settings dict yields the defaults."""
        assert load_game_config({}) == GameConfig()

    def test_env_overrides_settings(self, monkeypatch):
        """Test that environment variables win over the settings file."""
        monkeypatch.setenv("PEWPEW_TIME_LIMIT_SECONDS", "90")
        monkeypatch.setenv("PEWPEW_DEFAULT_CHARACTER", "deputy_pew")
        config = load_game_config({"game": {"time_limit_seconds": 30}})
        assert config.time_limit_seconds == 90
        assert config.default_character == "deputy_pew"

    def test_unparseable_value_raises(self, monkeypatch):
        """Test that junk numbers surface as ConfigurationError."""
        monkeypatch.setenv("PEWPEW_INITIAL_AMMUNITION", "lots")
        with pytest.raises(ConfigurationError):
            load_game_config({})

    def test_invalid_section_type_raises(self):
        """Test that a non-object game section is rejected."""
        with pytest.raises(ConfigurationError):
            load_game_config({"game": [1, 2]})

    def test_reads_settings_file(self, tmp_path, monkeypatch):
        """Test loading through the cached settings store."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"game": {"initial_ammunition": 7}}))
        monkeypatch.setenv("PEWPEW_SETTINGS_PATH", str(path))

        settings_store.refresh_settings()
        config = load_game_config()

        assert config.initial_ammunition == 7

    def test_malformed_settings_file_raises_configuration_error(self, tmp_path, monkeypatch):
        """Test that invalid JSON surfaces as ConfigurationError, not a decode error."""
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        monkeypatch.setenv("PEWPEW_SETTINGS_PATH", str(path))
        settings_store.clear_settings()

        with pytest.raises(ConfigurationError):
            load_game_config()



class TestSettingsStore:
    """Test suite for the settings cache."""

    def test_missing_file_gives_empty_settings(self, tmp_path, monkeypatch):
        """Test that an absent settings file is treated as empty."""
        monkeypatch.setenv("PEWPEW_SETTINGS_PATH", str(tmp_path / "nope.json"))
        assert settings_store.refresh_settings() == {}

    def test_get_settings_returns_copy(self):
        """Test that callers cannot mutate the cache."""
        settings_store.override_settings({"log_level": "INFO"})
        copy = settings_store.get_settings()
        copy["log_level"] = "DEEP"
        assert settings_store.get_settings()["log_level"] == "INFO"

    def test_deep_logging_flag(self):
        """Test that only the DEEP level enables deep tracing."""
        settings_store.override_settings({"log_level": "deep"})
        assert settings_store.is_deep_logging() is True
        settings_store.override_settings({"log_level": "INFO"})
        assert settings_store.is_deep_logging() is False


class TestLogUtils:
    """Test suite for tag formatting."""

    def test_system_then_variant(self):
        """Test that [SYSTEM][variant] keeps its order."""
        assert format_message("[GAME][info] started") == "[GAME][INFO] started"

    def test_level_first_is_swapped(self):
        """Test that a leading level tag moves behind the system."""
        assert format_message("[WARN][CAPTURE] lost camera") == "[CAPTURE][WARN] lost camera"

    def test_untagged_defaults_to_game(self):
        """Test that messages without tags are attributed to GAME."""
        assert format_message("hello") == "[GAME] hello"

    def test_log_prints_timestamped_line(self, capsys):
        """Test that log() writes one timestamped line."""
        log("TIMER", "tick", "DEEP")
        out = capsys.readouterr().out
        assert out.startswith("[")
        assert "[TIMER][DEEP] tick" in out

    def test_deep_log_respects_settings(self, capsys):
        """Test that deep_log is silent unless deep tracing is on."""
        settings_store.override_settings({"log_level": "INFO"})
        deep_log("GAME", "hidden")
        assert capsys.readouterr().out == ""

        settings_store.override_settings({"log_level": "DEEP"})
        deep_log("GAME", "shown")
        assert "[GAME][DEEP] shown" in capsys.readouterr().out
