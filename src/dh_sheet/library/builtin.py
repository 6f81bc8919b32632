"""Built-in Daggerheart class table.

Seed data for the eight core classes. Entries are stored as plain
wire-format dicts and validated into ClassDefinition on demand.
"""

from __future__ import annotations

from typing import Any

from dh_sheet.models.classes import ClassDefinition


# =============================================================================
# Class Definitions
# =============================================================================

BUILTIN_CLASS_DATA: dict[str, dict[str, Any]] = {
    "Bard": {
        "startEvasion": 10,
        "base": {"hpMax": 6, "stressMax": 6},
        "suggestedTraits": {
            "agility": 0, "strength": -1, "finesse": 1,
            "instinct": 0, "presence": 2, "knowledge": 1,
        },
        "actions": [
            {"id": "rally", "label": "Rally (give a Rally Die)", "type": "note"},
            {"id": "make_scene", "label": "Make a Scene (distract)", "type": "note"},
        ],
    },
    "Druid": {
        "startEvasion": 9,
        "base": {"hpMax": 6, "stressMax": 6},
        "suggestedTraits": {
            "agility": 1, "strength": 0, "finesse": 1,
            "instinct": 2, "presence": -1, "knowledge": 0,
        },
        "actions": [
            {"id": "beastform", "label": "Beastform (mark Stress)", "type": "note"},
            {"id": "evolution", "label": "Evolution (spend Hope)", "type": "note"},
        ],
    },
    "Guardian": {
        "startEvasion": 9,
        "base": {"hpMax": 6, "stressMax": 6},
        "suggestedTraits": {
            "agility": 1, "strength": 2, "finesse": -1,
            "instinct": 0, "presence": 1, "knowledge": 0,
        },
        "actions": [
            {"id": "unstoppable", "label": "Unstoppable (toggle)", "type": "toggle", "key": "unstoppable"},
            {"id": "tank", "label": "Frontline Tank (spend Hope)", "type": "note"},
        ],
    },
    "Ranger": {
        "startEvasion": 12,
        "base": {"hpMax": 6, "stressMax": 6},
        "suggestedTraits": {
            "agility": 2, "strength": 0, "finesse": 1,
            "instinct": 1, "presence": -1, "knowledge": 0,
        },
        "actions": [
            {"id": "focus", "label": "Ranger Focus (set target)", "type": "prompt", "key": "focusTarget"},
            {"id": "hold", "label": "Hold Them Off (spend Hope)", "type": "note"},
        ],
    },
    "Rogue": {
        "startEvasion": 12,
        "base": {"hpMax": 6, "stressMax": 6},
        "suggestedTraits": {
            "agility": 1, "strength": -1, "finesse": 2,
            "instinct": 0, "presence": 1, "knowledge": 0,
        },
        "actions": [
            {
                "id": "dodge",
                "label": "+2 Evasion until hit (spend Hope)",
                "type": "buff",
                "key": "evadeBuff",
                "value": 2,
            },
            {"id": "sneak", "label": "Sneak Attack (log bonus)", "type": "note"},
        ],
    },
    "Seraph": {
        "startEvasion": 10,
        "base": {"hpMax": 6, "stressMax": 6},
        "suggestedTraits": {
            "agility": 0, "strength": 2, "finesse": 0,
            "instinct": 1, "presence": 1, "knowledge": -1,
        },
        "actions": [
            {"id": "prayer", "label": "Spend Prayer Die (d4)", "type": "roll", "die": 4},
            {"id": "life_support", "label": "Life Support (spend Hope)", "type": "note"},
        ],
    },
    "Sorcerer": {
        "startEvasion": 10,
        "base": {"hpMax": 6, "stressMax": 6},
        "suggestedTraits": {
            "agility": 0, "strength": -1, "finesse": 1,
            "instinct": 2, "presence": 1, "knowledge": 0,
        },
        "actions": [
            {"id": "illusion", "label": "Minor Illusion", "type": "note"},
            {"id": "volatile", "label": "Volatile (reroll dmg)", "type": "note"},
        ],
    },
    "Warrior": {
        "startEvasion": 11,
        "base": {"hpMax": 6, "stressMax": 6},
        "suggestedTraits": {
            "agility": 2, "strength": 1, "finesse": 0,
            "instinct": 1, "presence": -1, "knowledge": 0,
        },
        "actions": [
            {"id": "aoo", "label": "Attack of Opportunity", "type": "note"},
            {"id": "no_mercy", "label": "No Mercy (+1 to attacks)", "type": "toggle", "key": "attackBuff"},
        ],
    },
}


def builtin_classes() -> dict[str, ClassDefinition]:
    """Validate the built-in table into class definitions."""
    return {
        name: ClassDefinition.model_validate(data)
        for name, data in BUILTIN_CLASS_DATA.items()
    }


__all__ = ["BUILTIN_CLASS_DATA", "builtin_classes"]
