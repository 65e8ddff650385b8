"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        DndSheetError: Base exception for all application errors.
        RulesEngineError: Base for engine boundary errors.
        CharacterDataError: A stored character document cannot be read.
        ConfigurationError: Configuration-related errors.

    Configuration:
        Settings: Main application settings class.
        RulesSettings: Rule variant settings.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        bound_context: Add context for one block.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from dnd_sheet.core.config import (
    RulesSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from dnd_sheet.core.exceptions import (
    CharacterDataError,
    ConfigurationError,
    DndSheetError,
    RulesEngineError,
)
from dnd_sheet.core.logging import (
    bind_context,
    bound_context,
    clear_context,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)


__all__ = [
    # Exceptions
    "DndSheetError",
    "RulesEngineError",
    "CharacterDataError",
    "ConfigurationError",
    # Configuration
    "Settings",
    "RulesSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "bind_context",
    "bound_context",
    "clear_context",
]
