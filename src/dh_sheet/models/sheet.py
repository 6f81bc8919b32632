"""Pydantic V2 schemas for the character document.

The CharacterDocument is the aggregate root of the editor. It is
frozen: every change produces a new document through
:meth:`CharacterDocument.patch` (copy-on-write), which keeps write-through
persistence trivial.

Example:
    >>> from dh_sheet.library import ClassLibrary
    >>> doc = new_document("Rogue", ClassLibrary())
    >>> doc.evasion, doc.hp.max
    (12, 6)
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from pydantic import Field, field_validator

from dh_sheet.core.exceptions import ValidationError
from dh_sheet.models.base import SheetModel


if TYPE_CHECKING:
    from dh_sheet.models.classes import ClassDefinition


BuffValue = bool | int | float | str

DEFAULT_BUFFS: dict[str, BuffValue] = {
    "evadeBuff": 0,
    "attackBuff": 0,
    "unstoppable": False,
}

DEFAULT_INVENTORY = "torch, 50ft rope, basic supplies"
DEFAULT_EXPERIENCE_BONUS = 2
MAX_EXPERIENCE_BONUS = 10
BLANK_EXPERIENCE_SLOTS = 2
LOG_LIMIT = 20


def _new_id() -> str:
    return uuid4().hex


class Trait(StrEnum):
    """The six Daggerheart traits."""

    AGILITY = "agility"
    STRENGTH = "strength"
    FINESSE = "finesse"
    INSTINCT = "instinct"
    PRESENCE = "presence"
    KNOWLEDGE = "knowledge"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class TraitSet(SheetModel):
    """Trait values. All six keys are always present."""

    agility: int = 0
    strength: int = 0
    finesse: int = 0
    instinct: int = 0
    presence: int = 0
    knowledge: int = 0

    def get(self, trait: Trait | str) -> int:
        return getattr(self, Trait(trait).value)


class Weapon(SheetModel):
    """A free-text weapon entry."""

    name: str = ""
    trait: str = ""
    range: str = ""
    damage: str = ""
    feature: str = ""


class WeaponSlots(SheetModel):
    primary: Weapon = Field(default_factory=Weapon)
    secondary: Weapon = Field(default_factory=Weapon)


class ArmorBlock(SheetModel):
    """Equipped armor; every field is free text."""

    name: str = ""
    thresholds: str = ""
    base: str = ""
    feature: str = ""


class SheetMeta(SheetModel):
    name: str = ""
    pronouns: str = ""
    heritage: str = ""
    subclass: str = ""
    level: int = 1


class DamageThresholds(SheetModel):
    minor: int = 6
    major: int = 12
    severe: int = 18


class Track(SheetModel):
    """A current/max resource such as HP or Stress.

    Bounds are enforced where the value is edited, not here, so an
    imported document is taken as it is.
    """

    current: int = 0
    max: int = 0


class Experience(SheetModel):
    """A player-authored descriptor granting a flat bonus when active.

    Attributes:
        id: Unique identifier within the document.
        text: Free-form description.
        bonus: Bonus added to trait rolls, clamped to [0, 10].
        active: Whether the bonus applies to the next trait rolls.
    """

    id: str = Field(default_factory=_new_id, min_length=1)
    text: str = ""
    bonus: int = DEFAULT_EXPERIENCE_BONUS
    active: bool = False

    @field_validator("bonus", mode="after")
    @classmethod
    def clamp_bonus(cls, value: int) -> int:
        return max(0, min(MAX_EXPERIENCE_BONUS, value))


class CharacterDocument(SheetModel):
    """The full character record.

    Attributes:
        id: Stable unique identifier.
        class_key: Key into the class library (may not resolve).
        meta: Name, pronouns, heritage, subclass and level.
        traits: The six trait values.
        evasion: Base evasion; buffs are added on display.
        armor: Armor slots.
        damage_thresholds: Minor/major/severe thresholds.
        hp: Hit points track.
        stress: Stress track.
        hope: Hope (0-9 when edited).
        experience_points: Experience points.
        weapons: Primary and secondary weapon.
        armor_block: Equipped armor text.
        inventory: Free text.
        notes: Free text.
        buffs: Keyed buff values (number, boolean or text).
        experiences: Ordered experiences.
        activity_log: Most-recent-first narration, bounded.
    """

    id: str = Field(default_factory=_new_id)
    class_key: str
    meta: SheetMeta = Field(default_factory=SheetMeta)
    traits: TraitSet = Field(default_factory=TraitSet)
    evasion: int = 0
    armor: int = 0
    damage_thresholds: DamageThresholds = Field(default_factory=DamageThresholds)
    hp: Track = Field(default_factory=Track)
    stress: Track = Field(default_factory=Track)
    hope: int = 0
    experience_points: int = 0
    weapons: WeaponSlots = Field(default_factory=WeaponSlots)
    armor_block: ArmorBlock = Field(default_factory=ArmorBlock)
    inventory: str = ""
    notes: str = ""
    buffs: dict[str, BuffValue] = Field(default_factory=dict)
    experiences: list[Experience] = Field(default_factory=list)
    activity_log: list[str] = Field(default_factory=list)

    @field_validator("experiences", mode="before")
    @classmethod
    def coerce_missing_experiences(cls, value: Any) -> Any:
        """Older sheets have no experiences; treat null as empty."""
        if value is None:
            return []
        return value

    @field_validator("experiences", mode="after")
    @classmethod
    def unique_experience_ids(cls, value: list[Experience]) -> list[Experience]:
        """Give repeated experience ids a fresh id; the first keeps it."""
        seen: set[str] = set()
        unique: list[Experience] = []
        for exp in value:
            if exp.id in seen:
                exp = exp.model_copy(update={"id": _new_id()})
            seen.add(exp.id)
            unique.append(exp)
        return unique

    @field_validator("activity_log", mode="after")
    @classmethod
    def bound_activity_log(cls, value: list[str]) -> list[str]:
        return value[:LOG_LIMIT]

    @property
    def display_name(self) -> str:
        """Character name for log lines, ``Character`` when blank."""
        return self.meta.name or "Character"

    def patch(self, **changes: Any) -> CharacterDocument:
        """Return a new document with ``changes`` shallow-merged in.

        Nested models and containers must be passed as replacements;
        the original document is never modified.
        """
        unknown = set(changes) - set(type(self).model_fields)
        if unknown:
            raise ValidationError(
                "Unknown document field",
                field_name=", ".join(sorted(unknown)),
            )
        return self.model_copy(update=changes)


def new_document(
    class_key: str,
    library: Mapping[str, ClassDefinition],
) -> CharacterDocument:
    """Default-construct a document for ``class_key``.

    Evasion, HP and Stress maxima come from the class definition. When
    the key does not resolve, the stats of ``Rogue`` (or the first class
    in the library) are used while ``class_key`` is still recorded.

    Raises:
        ValidationError: If the library holds no classes at all.
    """
    definition = library.get(class_key)
    if definition is None:
        fallback = "Rogue" if "Rogue" in library else next(iter(library), None)
        if fallback is None:
            raise ValidationError("Class library is empty", field_name="class_key", invalid_value=class_key)
        definition = library[fallback]

    return CharacterDocument(
        class_key=class_key,
        evasion=definition.start_evasion,
        hp=Track(current=definition.base.hp_max, max=definition.base.hp_max),
        stress=Track(current=0, max=definition.base.stress_max),
        buffs=dict(DEFAULT_BUFFS),
        inventory=DEFAULT_INVENTORY,
        experiences=[Experience() for _ in range(BLANK_EXPERIENCE_SLOTS)],
    )


__all__ = [
    "BuffValue",
    "DEFAULT_BUFFS",
    "LOG_LIMIT",
    "Trait",
    "TraitSet",
    "Weapon",
    "WeaponSlots",
    "ArmorBlock",
    "SheetMeta",
    "DamageThresholds",
    "Track",
    "Experience",
    "CharacterDocument",
    "new_document",
]
