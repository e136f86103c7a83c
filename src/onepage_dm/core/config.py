"""Configuration management for the One Page DM adventure engine.

This module provides centralized configuration management using pydantic-settings,
supporting environment variables, .env files, and runtime configuration overrides.
The narration API key is handled securely using SecretStr.

Example:
    >>> from onepage_dm.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.app_name)
    'One Page DM'

Environment Variables:
    ONEPAGE_DM_API_KEY: API key for the narration provider
    ONEPAGE_DM_BASE_URL: OpenAI-compatible endpoint (OpenRouter by default)
    ONEPAGE_DM_NARRATION_MODEL: Model used as dungeon master
    ONEPAGE_DM_PORTRAIT_MODEL: Model used for character portraits
    ONEPAGE_DM_GAME_STARTING_GOLD_DIE: Size of the starting gold die
    ONEPAGE_DM_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from onepage_dm.core.constants import (
    ENCOUNTER_DICE_COUNT,
    ENCOUNTER_DIE_SIDES,
    MONSTER_ATTACK_EVENT_ID,
    NARRATION_TEMPERATURE,
    RANDOM_EVENT_COUNT,
    STARTING_GOLD_DIE,
    WIZARD_STARTING_SPELLS,
)
from onepage_dm.core.exceptions import ConfigurationError


class AIProviderSettings(BaseSettings):
    """Configuration for the narration and portrait collaborators.

    Attributes:
        api_key: API key for the OpenAI-compatible provider.
        base_url: Endpoint of the provider.
        narration_model: Model that narrates the adventure.
        portrait_model: Model that renders character portraits.
        narration_temperature: Sampling temperature for narration.
        max_tokens: Maximum tokens per narration reply.
        max_retries: Maximum number of API retry attempts.
        timeout_seconds: API request timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="ONEPAGE_DM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: SecretStr | None = Field(
        default=None,
        description="Narration provider API key",
    )
    base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="OpenAI-compatible API endpoint",
    )
    narration_model: str = Field(
        default="google/gemini-2.5-flash",
        description="Dungeon master model",
    )
    portrait_model: str = Field(
        default="google/gemini-2.5-flash-image",
        description="Portrait model",
    )
    narration_temperature: float = Field(
        default=NARRATION_TEMPERATURE,
        ge=0.0,
        le=2.0,
        description="Narration sampling temperature",
    )
    max_tokens: int = Field(
        default=2048,
        ge=64,
        le=32768,
        description="Maximum tokens per reply",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Maximum API retry attempts",
    )
    timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        le=300,
        description="API request timeout",
    )

    @property
    def has_api_key(self) -> bool:
        """Check whether an API key is configured.

        Returns:
            True if a non-empty key is set.
        """
        return bool(self.api_key and self.api_key.get_secret_value())


class GameSettings(BaseSettings):
    """Configuration for the rules engine.

    Attributes:
        starting_gold_die: Starting gold is rolled uniformly in 1..this value.
        wizard_spell_count: Spells a new Wizard learns.
        encounter_dice_count: Dice summed for the size of a monster encounter.
        encounter_die_sides: Faces on each encounter die.
        monster_event_id: Random event row that triggers an encounter.
    """

    model_config = SettingsConfigDict(
        env_prefix="ONEPAGE_DM_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    starting_gold_die: int = Field(
        default=STARTING_GOLD_DIE,
        ge=1,
        description="Starting gold die size",
    )
    wizard_spell_count: int = Field(
        default=WIZARD_STARTING_SPELLS,
        ge=0,
        le=6,
        description="Spells known by a new Wizard",
    )
    encounter_dice_count: int = Field(
        default=ENCOUNTER_DICE_COUNT,
        ge=1,
        le=10,
        description="Dice summed for an encounter size",
    )
    encounter_die_sides: int = Field(
        default=ENCOUNTER_DIE_SIDES,
        ge=1,
        description="Faces on each encounter die",
    )
    monster_event_id: int = Field(
        default=MONSTER_ATTACK_EVENT_ID,
        description="Random event id that spawns monsters",
    )

    @model_validator(mode="after")
    def validate_monster_event(self) -> "GameSettings":
        """Ensure the monster event id exists in the random event table.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If the id is outside the event table.
        """
        if not 1 <= self.monster_event_id <= RANDOM_EVENT_COUNT:
            raise ConfigurationError(
                f"monster_event_id must be between 1 and {RANDOM_EVENT_COUNT}",
                config_key="monster_event_id",
            )
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        log_json: Emit JSON logs instead of console output.
        ai: Narration provider settings.
        game: Rules engine settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="ONEPAGE_DM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="One Page DM",
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
        description="Emit JSON logs",
    )

    ai: AIProviderSettings = Field(default_factory=AIProviderSettings)
    game: GameSettings = Field(default_factory=GameSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if not in debug mode.
        """
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If required configuration is missing or invalid.
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

    This is primarily useful for testing or when environment variables
    have changed at runtime.
    """
    get_settings.cache_clear()


__all__ = [
    "AIProviderSettings",
    "GameSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
