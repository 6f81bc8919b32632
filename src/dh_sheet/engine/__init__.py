"""Sheet engine: dice, trait rolls, class actions, edits and the session.

Modules:
    dice: d20-backed die rolls.
    activity: Bounded most-recent-first activity log.
    trait_roll: Trait roll resolution with advantage and experiences.
    actions: Class action dispatch, buffs and evasion.
    editing: Clamped field edits.
    session: The persisted working sheet.
"""

from __future__ import annotations

from dh_sheet.engine.actions import (
    ActionOutcome,
    PendingPrompt,
    clear_buffs,
    effective_evasion,
    execute_action,
)
from dh_sheet.engine.activity import LOG_LIMIT, append_log
from dh_sheet.engine.dice import DiceResult, DiceRoller
from dh_sheet.engine.editing import clamp
from dh_sheet.engine.session import SheetSession
from dh_sheet.engine.trait_roll import (
    RollMode,
    RollModifiers,
    TraitRoll,
    resolve_trait_roll,
    roll_trait,
)


__all__ = [
    # Dice
    "DiceResult",
    "DiceRoller",
    # Activity log
    "LOG_LIMIT",
    "append_log",
    # Trait rolls
    "RollMode",
    "RollModifiers",
    "TraitRoll",
    "resolve_trait_roll",
    "roll_trait",
    # Class actions
    "ActionOutcome",
    "PendingPrompt",
    "clear_buffs",
    "effective_evasion",
    "execute_action",
    # Editing
    "clamp",
    # Session
    "SheetSession",
]
