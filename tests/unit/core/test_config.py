"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from dnd_sheet.core.config import (
    RulesSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from dnd_sheet.core.constants import DEFAULT_HIT_DIE, MULTICLASS_MIN_SCORE
from dnd_sheet.core.exceptions import ConfigurationError


class TestRulesSettings:
    """Tests for RulesSettings configuration."""

    def test_default_values(self, isolated_env: Path) -> None:
        """Test default rule variants."""
        settings = RulesSettings()

        assert settings.legacy_warlock_short_rest is True
        assert settings.multiclass_min_score == 13
        assert settings.default_hit_die == "d8"

    def test_defaults_follow_constants(self, isolated_env: Path) -> None:
        """Test rule defaults come from the shared rules constants."""
        settings = RulesSettings()

        assert settings.multiclass_min_score == MULTICLASS_MIN_SCORE
        assert settings.default_hit_die == DEFAULT_HIT_DIE

    def test_env_override(self, isolated_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test rule variants read from the environment."""
        monkeypatch.setenv("DND_SHEET_RULES_LEGACY_WARLOCK_SHORT_REST", "false")
        monkeypatch.setenv("DND_SHEET_RULES_DEFAULT_HIT_DIE", "d10")

        settings = RulesSettings()

        assert settings.legacy_warlock_short_rest is False
        assert settings.default_hit_die == "d10"

    def test_min_score_bounds(self, isolated_env: Path) -> None:
        """Test that the multiclass minimum must be a valid ability score."""
        with pytest.raises(ValueError):
            RulesSettings(multiclass_min_score=31)


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(self, isolated_env: Path) -> None:
        """Test default settings initialization."""
        settings = Settings()

        assert settings.app_name == "D&D 2024 Character Rules Engine"
        assert settings.app_version == "0.1.0"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.log_json is False
        assert isinstance(settings.rules, RulesSettings)

    def test_debug_mode(self, isolated_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test debug mode setting."""
        monkeypatch.setenv("DND_SHEET_DEBUG", "true")

        settings = Settings()

        assert settings.debug is True

    def test_nested_rules_override(
        self,
        isolated_env: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test nested rule settings via the double-underscore delimiter."""
        monkeypatch.setenv("DND_SHEET_RULES__MULTICLASS_MIN_SCORE", "15")

        settings = Settings()

        assert settings.rules.multiclass_min_score == 15

    def test_env_file(self, isolated_env: Path) -> None:
        """Test settings read from a .env file in the working directory."""
        (isolated_env / ".env").write_text("DND_SHEET_LOG_LEVEL=DEBUG\n", encoding="utf-8")

        settings = Settings()

        assert settings.log_level == "DEBUG"


class TestGetSettings:
    """Tests for get_settings singleton function."""

    def test_returns_settings_instance(self, isolated_env: Path) -> None:
        """Test that get_settings returns a Settings instance."""
        assert isinstance(get_settings(), Settings)

    def test_caching(self, isolated_env: Path) -> None:
        """Test that settings are cached."""
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

    def test_cache_clear(self, isolated_env: Path) -> None:
        """Test that cache can be cleared."""
        settings1 = get_settings()
        clear_settings_cache()
        settings2 = get_settings()

        assert settings1 is not settings2

    def test_invalid_env_raises_configuration_error(
        self,
        isolated_env: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that invalid values surface as ConfigurationError."""
        monkeypatch.setenv("DND_SHEET_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()

        assert "original_error" in exc_info.value.details
