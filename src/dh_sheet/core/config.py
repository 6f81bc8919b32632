"""Configuration management for the Daggerheart sheet editor.

Settings are loaded with pydantic-settings from environment variables
and an optional ``.env`` file. Nested sections use ``__`` as delimiter.

Example:
    >>> from dh_sheet.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.dice.trait_die
    12

Environment Variables:
    DH_SHEET_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    DH_SHEET_DATABASE_PATH: Path to the SQLite sheet store
    DH_SHEET_CATALOG_URL: URL of an external class catalog (JSON)
    DH_SHEET_CATALOG_PATH: Local path of an external class catalog (JSON)
    DH_SHEET_DICE_TRAIT_DIE: Die size used for trait rolls
    DH_SHEET_SHEET_DEFAULT_CLASS: Class used when no sheet is stored yet
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dh_sheet.core.exceptions import ConfigurationError


class StorageSettings(BaseSettings):
    """Configuration for the persisted sheet store.

    Attributes:
        database_path: Path to the SQLite database file.
        key_prefix: Namespace prepended to every sheet id.
    """

    model_config = SettingsConfigDict(
        env_prefix="DH_SHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/dh_sheet.db"),
        description="Path to SQLite database",
    )
    key_prefix: str = Field(
        default="dh-sheet",
        min_length=1,
        description="Namespace for persisted sheet keys",
    )

    @field_validator("key_prefix", mode="after")
    @classmethod
    def reject_separator(cls, value: str) -> str:
        """Keep the ``prefix:id`` key layout unambiguous.

        Raises:
            ConfigurationError: If the prefix contains a colon.
        """
        if ":" in value:
            raise ConfigurationError(
                "key_prefix must not contain ':'",
                config_key="key_prefix",
            )
        return value


class CatalogSettings(BaseSettings):
    """Configuration for the external class catalog.

    Attributes:
        url: HTTP(S) location of a catalog JSON object.
        path: Local catalog JSON file, used when no URL is set.
        timeout_seconds: Fetch timeout.
    """

    model_config = SettingsConfigDict(
        env_prefix="DH_SHEET_CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str | None = Field(default=None, description="Catalog URL")
    path: Path | None = Field(default=None, description="Catalog file path")
    timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="Catalog fetch timeout",
    )


class DiceSettings(BaseSettings):
    """Configuration for dice.

    Attributes:
        trait_die: Die size for trait rolls.
        seed: Optional seed for reproducible rolls.
    """

    model_config = SettingsConfigDict(
        env_prefix="DH_SHEET_DICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    trait_die: int = Field(default=12, ge=2, le=100, description="Trait roll die")
    seed: int | None = Field(default=None, description="Random seed")


class SheetSettings(BaseSettings):
    """Configuration for the working sheet.

    Attributes:
        sheet_id: Identifier of the sheet opened at startup.
        default_class: Class used to default-construct a new sheet.
        log_limit: Activity log bound, at most the 20 a document keeps.
    """

    model_config = SettingsConfigDict(
        env_prefix="DH_SHEET_SHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    sheet_id: str = Field(default="default", min_length=1)
    default_class: str = Field(default="Rogue", min_length=1)
    log_limit: int = Field(default=20, ge=1, le=20)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Emit JSON log lines instead of console output.
        log_file: Optional file that also receives log records.
        storage: Sheet store settings.
        catalog: External class catalog settings.
        dice: Dice settings.
        sheet: Working sheet settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="DH_SHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Daggerheart Digital Sheet",
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
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file",
    )

    storage: StorageSettings = Field(default_factory=StorageSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    dice: DiceSettings = Field(default_factory=DiceSettings)
    sheet: SheetSettings = Field(default_factory=SheetSettings)

    @model_validator(mode="after")
    def debug_forces_debug_logs(self) -> "Settings":
        """Lower the log level to DEBUG when debug mode is on."""
        if self.debug and self.log_level == "INFO":
            self.log_level = "DEBUG"
        return self


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
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "StorageSettings",
    "CatalogSettings",
    "DiceSettings",
    "SheetSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
