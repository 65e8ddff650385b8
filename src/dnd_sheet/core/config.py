"""Configuration management for the D&D 2024 character rules engine.

This module provides centralized configuration using pydantic-settings,
supporting environment variables, .env files, and runtime overrides.

Example:
    >>> from dnd_sheet.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.rules.legacy_warlock_short_rest
    True

Environment Variables:
    DND_SHEET_DEBUG: Enable debug mode
    DND_SHEET_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    DND_SHEET_LOG_JSON: Emit JSON log lines instead of console output
    DND_SHEET_RULES_LEGACY_WARLOCK_SHORT_REST: Restore regular slots for
        single-class Warlocks on a short rest
    DND_SHEET_RULES_MULTICLASS_MIN_SCORE: Ability score needed to multiclass
    DND_SHEET_RULES_DEFAULT_HIT_DIE: Hit die for classes without one
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dnd_sheet.core.constants import (
    DEFAULT_HIT_DIE,
    MAX_ABILITY_SCORE,
    MIN_ABILITY_SCORE,
    MULTICLASS_MIN_SCORE,
)
from dnd_sheet.core.exceptions import ConfigurationError


class RulesSettings(BaseSettings):
    """Configuration for rule variants the engine supports.

    Attributes:
        legacy_warlock_short_rest: Single-class Warlocks also refill their
            regular spell slots on a short rest (sheets created before Pact
            Magic became a separate pool store it there).
        multiclass_min_score: Minimum ability score for multiclass
            prerequisite advice.
        default_hit_die: Hit die assumed when a class does not name one.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_SHEET_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    legacy_warlock_short_rest: bool = Field(
        default=True,
        description="Refill regular slots for single-class Warlocks on short rest",
    )
    multiclass_min_score: int = Field(
        default=MULTICLASS_MIN_SCORE,
        ge=MIN_ABILITY_SCORE,
        le=MAX_ABILITY_SCORE,
        description="Ability score required by multiclass prerequisites",
    )
    default_hit_die: Literal["d6", "d8", "d10", "d12"] = Field(
        default=DEFAULT_HIT_DIE,
        description="Hit die used when a class does not specify one",
    )


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        log_json: Render logs as JSON lines.
        rules: Rule variant settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_SHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="D&D 2024 Character Rules Engine",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON",
    )

    rules: RulesSettings = Field(default_factory=RulesSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Example:
        >>> clear_settings_cache()
        >>> settings = get_settings()  # Reloads from environment
    """
    get_settings.cache_clear()


__all__ = [
    "RulesSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
