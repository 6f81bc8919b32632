"""Trait roll resolution.

A trait roll is one die (d12 by default) plus the trait value plus the
bonus of every active experience. Advantage and disadvantage roll a
second die and keep the higher or lower face. When both are set they
cancel out and a single die is rolled.

Example:
    >>> doc, result = roll_trait(doc, Trait.AGILITY, DiceRoller())
    >>> doc.activity_log[0] == result.line
    True
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from dh_sheet.core.exceptions import ValidationError
from dh_sheet.core.logging import get_logger
from dh_sheet.engine.activity import LOG_LIMIT, append_log
from dh_sheet.engine.dice import DiceRoller
from dh_sheet.models.sheet import CharacterDocument, Trait


logger = get_logger(__name__)

TRAIT_DIE = 12
EXPERIENCE_PLACEHOLDER = "exp"


class RollMode(StrEnum):
    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"


@dataclass(frozen=True)
class RollModifiers:
    """Advantage/disadvantage signal, e.g. derived from held keys."""

    advantage: bool = False
    disadvantage: bool = False

    @property
    def mode(self) -> RollMode:
        if self.advantage and not self.disadvantage:
            return RollMode.ADVANTAGE
        if self.disadvantage and not self.advantage:
            return RollMode.DISADVANTAGE
        return RollMode.NORMAL


@dataclass(frozen=True)
class TraitRoll:
    """Resolved trait roll.

    Attributes:
        label: Trait label used in the log line.
        mode: Normal, advantage or disadvantage.
        faces: Rolled faces, one or two.
        picked: The face that counts.
        modifier: Trait value added to the die.
        experience_bonus: Sum of active experience bonuses.
        experiences: Text (or placeholder) of each active experience.
        total: picked + modifier + experience_bonus.
        line: The activity log line.
    """

    label: str
    mode: RollMode
    faces: tuple[int, ...]
    picked: int
    modifier: int
    experience_bonus: int
    experiences: tuple[str, ...]
    total: int
    line: str


def active_experience_bonus(document: CharacterDocument) -> tuple[int, tuple[str, ...]]:
    """Return the summed bonus and labels of the active experiences."""
    active = [exp for exp in document.experiences if exp.active]
    labels = tuple(exp.text.strip() or EXPERIENCE_PLACEHOLDER for exp in active)
    return sum(exp.bonus for exp in active), labels


def format_trait_roll(
    label: str,
    mode: RollMode,
    faces: tuple[int, ...],
    modifier: int,
    experience_bonus: int,
    experiences: tuple[str, ...],
    total: int,
) -> str:
    tag = "" if mode is RollMode.NORMAL else f" ({mode.value})"
    dice = "/".join(str(face) for face in faces)
    line = f"{label}{tag}: {dice} {modifier:+d}"
    if experience_bonus:
        line += f" +{experience_bonus} ({', '.join(experiences)})"
    return f"{line} = {total}"


def resolve_trait_roll(
    document: CharacterDocument,
    label: str,
    modifier: int,
    roller: DiceRoller,
    *,
    modifiers: RollModifiers | None = None,
    die_sides: int = TRAIT_DIE,
    log_limit: int = LOG_LIMIT,
) -> tuple[CharacterDocument, TraitRoll]:
    """Roll, total and log a trait roll.

    Args:
        document: Current document.
        label: Trait label for the log line.
        modifier: Current trait value.
        roller: Dice source.
        modifiers: Advantage/disadvantage signal.
        die_sides: Trait die size.
        log_limit: Activity log bound.

    Returns:
        The document with the line prepended to its log, and the roll.
    """
    mode = (modifiers or RollModifiers()).mode

    first = roller.roll_die(die_sides)
    if mode is RollMode.NORMAL:
        faces: tuple[int, ...] = (first,)
        picked = first
    else:
        second = roller.roll_die(die_sides)
        faces = (first, second)
        picked = max(faces) if mode is RollMode.ADVANTAGE else min(faces)

    bonus, experiences = active_experience_bonus(document)
    total = picked + modifier + bonus
    line = format_trait_roll(label, mode, faces, modifier, bonus, experiences, total)

    logger.debug(
        "Trait rolled",
        trait=label,
        mode=mode.value,
        faces=list(faces),
        total=total,
    )
    result = TraitRoll(
        label=label,
        mode=mode,
        faces=faces,
        picked=picked,
        modifier=modifier,
        experience_bonus=bonus,
        experiences=experiences,
        total=total,
        line=line,
    )
    return append_log(document, line, limit=log_limit), result


def roll_trait(
    document: CharacterDocument,
    trait: Trait | str,
    roller: DiceRoller,
    *,
    modifiers: RollModifiers | None = None,
    die_sides: int = TRAIT_DIE,
    log_limit: int = LOG_LIMIT,
) -> tuple[CharacterDocument, TraitRoll]:
    """Roll ``trait`` using its current value on the sheet.

    Raises:
        ValidationError: If ``trait`` is not one of the six traits.
    """
    try:
        trait = Trait(trait)
    except ValueError as exc:
        raise ValidationError("Unknown trait", field_name="trait", invalid_value=trait) from exc
    return resolve_trait_roll(
        document,
        trait.label,
        document.traits.get(trait),
        roller,
        modifiers=modifiers,
        die_sides=die_sides,
        log_limit=log_limit,
    )


__all__ = [
    "RollMode",
    "RollModifiers",
    "TraitRoll",
    "active_experience_bonus",
    "format_trait_roll",
    "resolve_trait_roll",
    "roll_trait",
]
