"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        SheetError: Base exception for all application errors.
        EngineError, PersistenceError, CatalogError and their subclasses.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        configure_from_settings: Apply the logging settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from dh_sheet.core.config import (
    CatalogSettings,
    DiceSettings,
    Settings,
    SheetSettings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from dh_sheet.core.exceptions import (
    ActionError,
    ActionNotFoundError,
    CatalogError,
    ConfigurationError,
    DiceRollError,
    EngineError,
    PersistenceError,
    SheetError,
    SheetImportError,
    StorageError,
    UnknownActionError,
    ValidationError,
)
from dh_sheet.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "SheetError",
    # Engine exceptions
    "EngineError",
    "DiceRollError",
    "ActionError",
    "UnknownActionError",
    "ActionNotFoundError",
    # Persistence exceptions
    "PersistenceError",
    "SheetImportError",
    "StorageError",
    "CatalogError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "StorageSettings",
    "CatalogSettings",
    "DiceSettings",
    "SheetSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_from_settings",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
