"""Daggerheart Digital Sheet.

An editable character sheet for the Daggerheart tabletop RPG, with
class actions, trait rolls, an activity log and local persistence.

Example:
    >>> from dh_sheet import SheetSession
    >>> session = SheetSession.from_settings()
    >>> session.open().class_key
    'Rogue'
    >>> session.roll_trait("agility", advantage=True).line
    'Agility (advantage): 4/9 +0 = 9'

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas for the sheet and class definitions.
    library: Built-in classes merged with an external catalog.
    engine: Dice, trait rolls, class actions, edits, and the session.
    storage: SQLite store, import and export.
    ui: Streamlit front end.
"""

from __future__ import annotations

from dh_sheet.core.config import Settings, get_settings
from dh_sheet.core.exceptions import SheetError
from dh_sheet.core.logging import configure_logging, get_logger
from dh_sheet.engine import DiceRoller, SheetSession
from dh_sheet.library import ClassLibrary
from dh_sheet.models import CharacterDocument, ClassDefinition, new_document


__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Core
    "Settings",
    "get_settings",
    "SheetError",
    "configure_logging",
    "get_logger",
    # Models
    "CharacterDocument",
    "ClassDefinition",
    "new_document",
    # Library
    "ClassLibrary",
    # Engine
    "DiceRoller",
    "SheetSession",
]
