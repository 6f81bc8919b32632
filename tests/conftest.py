"""Pytest configuration and shared fixtures.

This module provides common fixtures for the sheet editor test suite.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import pytest

from dh_sheet.engine.dice import DiceRoller


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# =============================================================================
# Dice
# =============================================================================


class ScriptedRoller(DiceRoller):
    """DiceRoller returning predetermined faces, in order.

    Attributes:
        requested: Die sizes asked for, in call order.
    """

    def __init__(self, faces: list[int]) -> None:
        super().__init__()
        self._faces = list(faces)
        self.requested: list[int] = []

    def roll_die(self, sides: int) -> int:
        self.requested.append(sides)
        if not self._faces:
            raise AssertionError("ScriptedRoller ran out of faces")
        return self._faces.pop(0)


@pytest.fixture
def scripted_roller() -> Callable[..., ScriptedRoller]:
    """Factory for rollers with fixed faces: ``scripted_roller(4, 11)``."""

    def factory(*faces: int) -> ScriptedRoller:
        return ScriptedRoller(list(faces))

    return factory


@pytest.fixture
def dice_roller() -> DiceRoller:
    """Create a DiceRoller with a fixed seed for reproducible tests."""
    return DiceRoller(seed=42)


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from dh_sheet.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> dict[str, str]:
    """Set up environment variables for testing."""
    env_vars = {
        "DH_SHEET_DEBUG": "true",
        "DH_SHEET_DATABASE_PATH": str(tmp_path / "env.db"),
        "DH_SHEET_DICE_TRAIT_DIE": "20",
        "DH_SHEET_SHEET_DEFAULT_CLASS": "Warrior",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def library() -> Any:
    """Built-in class library without an external catalog."""
    from dh_sheet.library import ClassLibrary

    return ClassLibrary()


@pytest.fixture
def rogue_sheet(library: Any) -> Any:
    """A freshly default-constructed Rogue sheet."""
    from dh_sheet.models import new_document

    return new_document("Rogue", library)


@pytest.fixture
def named_sheet(rogue_sheet: Any) -> Any:
    """A Rogue sheet with a name and two experiences, one active."""
    from dh_sheet.engine import editing

    doc = editing.set_meta(rogue_sheet, "name", "Vex")
    first, second = doc.experiences
    doc = editing.update_experience(doc, first.id, text="Silver Tongue", bonus=2, active=True)
    return editing.update_experience(doc, second.id, text="Cat Burglar", bonus=3)


@pytest.fixture
def sample_catalog() -> dict[str, Any]:
    """External catalog payload overriding Rogue and adding a class."""
    return {
        "Rogue": {
            "startEvasion": 13,
            "base": {"hpMax": 7, "stressMax": 5},
            "suggested": {"agility": 2, "finesse": 2},
            "actions": [
                {"id": "vanish", "label": "Vanish", "type": "note"},
            ],
        },
        "Wizard": {
            "startEvasion": 11,
            "base": {"hpMax": 5, "stressMax": 6},
            "suggestedTraits": {"knowledge": 2},
            "actions": [
                {"id": "study", "label": "Study (d8)", "type": "roll", "die": 8},
            ],
        },
    }


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def sheet_store(tmp_path: Path) -> Any:
    """A SheetStore in a temporary directory."""
    from dh_sheet.storage import SheetStore

    return SheetStore(tmp_path / "data" / "sheets.db")


@pytest.fixture
def persistence(sheet_store: Any, library: Any) -> Any:
    from dh_sheet.storage import SheetPersistence

    return SheetPersistence(sheet_store, library)


@pytest.fixture
def make_session(persistence: Any) -> Callable[..., Any]:
    """Factory for sessions over the temporary store."""
    from dh_sheet.engine.session import SheetSession

    def factory(roller: DiceRoller | None = None, **kwargs: Any) -> SheetSession:
        return SheetSession(persistence, roller or DiceRoller(seed=7), **kwargs)

    return factory
