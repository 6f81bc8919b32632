"""Pydantic V2 schemas for the character sheet.

Modules:
    sheet: CharacterDocument and its parts, default construction.
    actions: The closed ClassAction tagged union.
    classes: ClassDefinition seed data schema.
"""

from __future__ import annotations

from dh_sheet.models.actions import (
    ACTION_TYPES,
    CLASS_ACTION_ADAPTER,
    ActionBase,
    BuffAction,
    ClassAction,
    NoteAction,
    PromptAction,
    RollAction,
    ToggleAction,
)
from dh_sheet.models.classes import ClassBase, ClassDefinition
from dh_sheet.models.sheet import (
    DEFAULT_BUFFS,
    LOG_LIMIT,
    ArmorBlock,
    BuffValue,
    CharacterDocument,
    DamageThresholds,
    Experience,
    SheetMeta,
    Track,
    Trait,
    TraitSet,
    Weapon,
    WeaponSlots,
    new_document,
)


__all__ = [
    # Actions
    "ACTION_TYPES",
    "CLASS_ACTION_ADAPTER",
    "ActionBase",
    "BuffAction",
    "ClassAction",
    "NoteAction",
    "PromptAction",
    "RollAction",
    "ToggleAction",
    # Classes
    "ClassBase",
    "ClassDefinition",
    # Sheet
    "DEFAULT_BUFFS",
    "LOG_LIMIT",
    "ArmorBlock",
    "BuffValue",
    "CharacterDocument",
    "DamageThresholds",
    "Experience",
    "SheetMeta",
    "Track",
    "Trait",
    "TraitSet",
    "Weapon",
    "WeaponSlots",
    "new_document",
]
