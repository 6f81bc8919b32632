"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from dh_sheet.core.config import (
    CatalogSettings,
    DiceSettings,
    Settings,
    SheetSettings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from dh_sheet.core.exceptions import ConfigurationError


class TestStorageSettings:
    """Tests for StorageSettings configuration."""

    def test_default_values(self) -> None:
        """Test default storage location and key prefix."""
        settings = StorageSettings()

        assert settings.database_path == Path("data/dh_sheet.db")
        assert settings.key_prefix == "dh-sheet"

    def test_custom_path(self, tmp_path: Path) -> None:
        settings = StorageSettings(database_path=tmp_path / "custom.db")

        assert settings.database_path == tmp_path / "custom.db"

    def test_prefix_with_separator_rejected(self) -> None:
        """Test that a key prefix may not contain the ':' separator."""
        with pytest.raises(ConfigurationError) as exc_info:
            StorageSettings(key_prefix="dh:sheet")

        assert "key_prefix" in str(exc_info.value)


class TestSectionSettings:
    """Tests for the catalog, dice and sheet sections."""

    def test_catalog_defaults(self) -> None:
        settings = CatalogSettings()

        assert settings.url is None
        assert settings.path is None
        assert settings.timeout_seconds == 5.0

    def test_dice_defaults(self) -> None:
        settings = DiceSettings()

        assert settings.trait_die == 12
        assert settings.seed is None

    def test_trait_die_bounds(self) -> None:
        """Test that a one-sided trait die is rejected."""
        with pytest.raises(ValueError):
            DiceSettings(trait_die=1)

    def test_sheet_defaults(self) -> None:
        settings = SheetSettings()

        assert settings.sheet_id == "default"
        assert settings.default_class == "Rogue"
        assert settings.log_limit == 20

    @pytest.mark.parametrize("limit", [0, 21, 200])
    def test_log_limit_bounds(self, limit: int) -> None:
        """Test that the log limit cannot exceed the document bound."""
        with pytest.raises(ValueError):
            SheetSettings(log_limit=limit)

    def test_catalog_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DH_SHEET_CATALOG_URL", "https://example.test/classes.json")

        settings = CatalogSettings()

        assert settings.url == "https://example.test/classes.json"


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default settings initialization."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.app_name == "Daggerheart Digital Sheet"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.dice.trait_die == 12

    def test_env_overrides(self, mock_env_vars: dict[str, str]) -> None:
        """Test that environment variables reach every section."""
        settings = Settings()

        assert settings.storage.database_path == Path(mock_env_vars["DH_SHEET_DATABASE_PATH"])
        assert settings.dice.trait_die == 20
        assert settings.sheet.default_class == "Warrior"

    def test_debug_lowers_log_level(self, mock_env_vars: dict[str, str]) -> None:
        settings = Settings()

        assert settings.debug is True
        assert settings.log_level == "DEBUG"

    def test_explicit_level_kept_in_debug(self) -> None:
        settings = Settings(debug=True, log_level="WARNING")

        assert settings.log_level == "WARNING"


class TestGetSettings:
    """Tests for the get_settings singleton."""

    def test_cached(self) -> None:
        """Test that get_settings returns the same instance."""
        assert get_settings() is get_settings()

    def test_cache_clear(self, monkeypatch: pytest.MonkeyPatch) -> None:
        first = get_settings()
        monkeypatch.setenv("DH_SHEET_SHEET_LOG_LIMIT", "5")
        clear_settings_cache()

        second = get_settings()

        assert second is not first
        assert second.sheet.log_limit == 5

    def test_invalid_env_wrapped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that invalid values surface as ConfigurationError."""
        monkeypatch.setenv("DH_SHEET_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()

        assert "Failed to load application settings" in exc_info.value.message
