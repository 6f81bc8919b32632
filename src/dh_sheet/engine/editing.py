"""Field edits for the sheet form.

Every function takes a document and returns a new one. Out-of-range
numbers are clamped to the nearest bound, never rejected; this is where
the HP and Stress track invariants are enforced.
"""

from __future__ import annotations

from typing import Any

from dh_sheet.core.exceptions import ValidationError
from dh_sheet.models.sheet import (
    MAX_EXPERIENCE_BONUS,
    CharacterDocument,
    Experience,
    Trait,
)


TRAIT_RANGE = (-10, 30)
LEVEL_RANGE = (1, 10)
EVASION_RANGE = (0, 99)
ARMOR_RANGE = (0, 10)
THRESHOLD_RANGE = (1, 99)
TRACK_MAX_RANGE = (1, 30)
HOPE_RANGE = (0, 9)
EXPERIENCE_POINTS_RANGE = (0, 999)

META_TEXT_FIELDS = ("name", "pronouns", "heritage", "subclass")
THRESHOLDS = ("minor", "major", "severe")
WEAPON_SLOTS = ("primary", "secondary")


def clamp(value: int, low: int, high: int) -> int:
    """Clamp ``value`` into [low, high]."""
    return max(low, min(high, value))


def _check_fields(model: Any, fields: dict[str, Any], what: str) -> None:
    unknown = set(fields) - set(type(model).model_fields)
    if unknown:
        raise ValidationError(f"Unknown {what} field", field_name=", ".join(sorted(unknown)))


# =============================================================================
# Identity & traits
# =============================================================================


def set_meta(document: CharacterDocument, field: str, value: str | int) -> CharacterDocument:
    """Edit a meta field. Level is clamped to [1, 10].

    Args:
        document: The document to edit.
        field: ``level`` or one of name, pronouns, heritage, subclass.
        value: New value; text fields are stored as given.

    Returns:
        The edited document.

    Raises:
        ValidationError: If ``field`` is not a meta field.
    """
    if field == "level":
        value = clamp(int(value), *LEVEL_RANGE)
    elif field in META_TEXT_FIELDS:
        value = str(value)
    else:
        raise ValidationError("Unknown meta field", field_name=field)
    return document.patch(meta=document.meta.model_copy(update={field: value}))


def set_trait(document: CharacterDocument, trait: Trait | str, value: int) -> CharacterDocument:
    """Set one trait value, clamped to [-10, 30].

    Args:
        document: The document to edit.
        trait: Trait or its lowercase name.
        value: New trait value.

    Returns:
        The edited document.

    Raises:
        ValidationError: If ``trait`` is not one of the six traits.
    """
    try:
        trait = Trait(trait)
    except ValueError as exc:
        raise ValidationError("Unknown trait", field_name="trait", invalid_value=trait) from exc
    traits = document.traits.model_copy(update={trait.value: clamp(value, *TRAIT_RANGE)})
    return document.patch(traits=traits)


# =============================================================================
# Defense
# =============================================================================


def set_evasion(document: CharacterDocument, value: int) -> CharacterDocument:
    """Set base evasion, clamped to [0, 99]. Buffs are not touched."""
    return document.patch(evasion=clamp(value, *EVASION_RANGE))


def set_armor(document: CharacterDocument, value: int) -> CharacterDocument:
    """Set armor slots, clamped to [0, 10]."""
    return document.patch(armor=clamp(value, *ARMOR_RANGE))


def set_threshold(document: CharacterDocument, which: str, value: int) -> CharacterDocument:
    """Set one damage threshold, clamped to [1, 99].

    Args:
        document: The document to edit.
        which: ``minor``, ``major`` or ``severe``.
        value: New threshold.

    Returns:
        The edited document.

    Raises:
        ValidationError: If ``which`` names no threshold.
    """
    if which not in THRESHOLDS:
        raise ValidationError("Unknown damage threshold", field_name=which)
    thresholds = document.damage_thresholds.model_copy(
        update={which: clamp(value, *THRESHOLD_RANGE)}
    )
    return document.patch(damage_thresholds=thresholds)


# =============================================================================
# Vitals
# =============================================================================


def track_click(current: int, index: int) -> int:
    """Value after clicking box ``index`` (0-based) of a track.

    Clicking the last filled box empties it; any other box fills the
    track up to and including it.
    """
    return index if index + 1 == current else index + 1


def set_hp_current(document: CharacterDocument, value: int) -> CharacterDocument:
    """Set current HP, clamped to [0, max HP].

    Args:
        document: The document to edit.
        value: New current HP, usually from :func:`track_click`.

    Returns:
        The edited document.
    """
    hp = document.hp.model_copy(update={"current": clamp(value, 0, document.hp.max)})
    return document.patch(hp=hp)


def set_hp_max(document: CharacterDocument, value: int) -> CharacterDocument:
    """Change max HP; current HP is pulled into [1, max]."""
    maximum = clamp(value, *TRACK_MAX_RANGE)
    hp = document.hp.model_copy(
        update={"max": maximum, "current": clamp(document.hp.current, 1, maximum)}
    )
    return document.patch(hp=hp)


def set_stress_current(document: CharacterDocument, value: int) -> CharacterDocument:
    """Set current Stress, clamped to [0, max Stress]."""
    stress = document.stress.model_copy(
        update={"current": clamp(value, 0, document.stress.max)}
    )
    return document.patch(stress=stress)


def set_stress_max(document: CharacterDocument, value: int) -> CharacterDocument:
    """Change max Stress; current Stress is pulled into [0, max]."""
    maximum = clamp(value, *TRACK_MAX_RANGE)
    stress = document.stress.model_copy(
        update={"max": maximum, "current": clamp(document.stress.current, 0, maximum)}
    )
    return document.patch(stress=stress)


def set_hope(document: CharacterDocument, value: int) -> CharacterDocument:
    """Set Hope, clamped to [0, 9]."""
    return document.patch(hope=clamp(value, *HOPE_RANGE))


def set_experience_points(document: CharacterDocument, value: int) -> CharacterDocument:
    """Set experience points, clamped to [0, 999]."""
    return document.patch(experience_points=clamp(value, *EXPERIENCE_POINTS_RANGE))


# =============================================================================
# Equipment & free text
# =============================================================================


def set_weapon(document: CharacterDocument, slot: str, **fields: str) -> CharacterDocument:
    """Edit text fields of one weapon.

    Args:
        document: The document to edit.
        slot: ``primary`` or ``secondary``.
        **fields: Any of name, trait, range, damage, feature.

    Returns:
        The edited document.

    Raises:
        ValidationError: If the slot or a field name is unknown.
    """
    if slot not in WEAPON_SLOTS:
        raise ValidationError("Unknown weapon slot", field_name=slot)
    weapon = getattr(document.weapons, slot)
    _check_fields(weapon, fields, "weapon")
    weapons = document.weapons.model_copy(update={slot: weapon.model_copy(update=fields)})
    return document.patch(weapons=weapons)


def set_armor_block(document: CharacterDocument, **fields: str) -> CharacterDocument:
    """Edit the equipped armor text (name, thresholds, base, feature).

    Raises:
        ValidationError: If a field name is unknown.
    """
    _check_fields(document.armor_block, fields, "armor")
    return document.patch(armor_block=document.armor_block.model_copy(update=fields))


def set_inventory(document: CharacterDocument, text: str) -> CharacterDocument:
    return document.patch(inventory=text)


def set_notes(document: CharacterDocument, text: str) -> CharacterDocument:
    return document.patch(notes=text)


# =============================================================================
# Experiences
# =============================================================================


def add_experience(
    document: CharacterDocument,
    text: str = "",
    bonus: int = 2,
    *,
    active: bool = False,
) -> CharacterDocument:
    """Append an experience with a fresh id.

    Args:
        document: The document to edit.
        text: Description of the experience.
        bonus: Roll bonus, clamped to [0, 10] by the model.
        active: Whether the bonus applies right away.

    Returns:
        The edited document.
    """
    taken = {exp.id for exp in document.experiences}
    experience = Experience(text=text, bonus=bonus, active=active)
    while experience.id in taken:
        experience = Experience(text=text, bonus=bonus, active=active)
    return document.patch(experiences=[*document.experiences, experience])


def update_experience(
    document: CharacterDocument,
    experience_id: str,
    *,
    text: str | None = None,
    bonus: int | None = None,
    active: bool | None = None,
) -> CharacterDocument:
    """Edit one experience by id. Bonus is clamped to [0, 10].

    Raises:
        ValidationError: If no experience has ``experience_id``.
    """
    changes: dict[str, Any] = {}
    if text is not None:
        changes["text"] = text
    if bonus is not None:
        changes["bonus"] = clamp(bonus, 0, MAX_EXPERIENCE_BONUS)
    if active is not None:
        changes["active"] = active

    found = False
    experiences = []
    for exp in document.experiences:
        if exp.id == experience_id:
            found = True
            exp = exp.model_copy(update=changes)
        experiences.append(exp)
    if not found:
        raise ValidationError("Unknown experience", field_name="experience_id", invalid_value=experience_id)
    return document.patch(experiences=experiences)


def toggle_experience(document: CharacterDocument, experience_id: str) -> CharacterDocument:
    """Flip the ``active`` flag of one experience.

    Raises:
        ValidationError: If no experience has ``experience_id``.
    """
    for exp in document.experiences:
        if exp.id == experience_id:
            return update_experience(document, experience_id, active=not exp.active)
    raise ValidationError("Unknown experience", field_name="experience_id", invalid_value=experience_id)


def remove_experience(document: CharacterDocument, experience_id: str) -> CharacterDocument:
    """Drop an experience; unknown ids are ignored."""
    return document.patch(
        experiences=[exp for exp in document.experiences if exp.id != experience_id]
    )


__all__ = [
    "clamp",
    "track_click",
    "set_meta",
    "set_trait",
    "set_evasion",
    "set_armor",
    "set_threshold",
    "set_hp_current",
    "set_hp_max",
    "set_stress_current",
    "set_stress_max",
    "set_hope",
    "set_experience_points",
    "set_weapon",
    "set_armor_block",
    "set_inventory",
    "set_notes",
    "add_experience",
    "update_experience",
    "toggle_experience",
    "remove_experience",
]
