"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        OnePageError: Base exception for all application errors.
        GameEngineError: Rules engine and builder errors.
        NarrationError: Narration collaborator failures.
        ConfigurationError: Configuration-related errors.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        unbind_context: Remove keys from logging context.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from onepage_dm.core.config import (
    AIProviderSettings,
    GameSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from onepage_dm.core.exceptions import (
    ConfigurationError,
    DiceRollError,
    GameEngineError,
    InvalidBuildStateError,
    NarrationConnectionError,
    NarrationError,
    NarrationRateLimitError,
    NarrationResponseError,
    OnePageError,
    RulesLookupError,
    ValidationError,
)
from onepage_dm.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


__all__ = [
    # Base exception
    "OnePageError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidBuildStateError",
    "DiceRollError",
    "RulesLookupError",
    # Narration exceptions
    "NarrationError",
    "NarrationConnectionError",
    "NarrationResponseError",
    "NarrationRateLimitError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "AIProviderSettings",
    "GameSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
]
