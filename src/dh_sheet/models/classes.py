"""Class definition schema.

A class definition is immutable seed data: starting evasion, HP and
Stress maxima, suggested traits and the ordered class actions.
"""

from __future__ import annotations

from pydantic import AliasChoices, Field

from dh_sheet.models.actions import ClassAction
from dh_sheet.models.base import SheetModel
from dh_sheet.models.sheet import TraitSet


class ClassBase(SheetModel):
    hp_max: int = Field(ge=1, description="Starting HP maximum")
    stress_max: int = Field(ge=1, description="Starting Stress maximum")


class ClassDefinition(SheetModel):
    """Template describing a class's starting stats and actions.

    Catalog files written for older versions of the sheet use the key
    ``suggested`` for the trait suggestion; it is accepted on input.
    """

    start_evasion: int
    base: ClassBase
    suggested_traits: TraitSet = Field(
        default_factory=TraitSet,
        validation_alias=AliasChoices("suggestedTraits", "suggested_traits", "suggested"),
    )
    actions: list[ClassAction] = Field(default_factory=list)

    def find_action(self, action_id: str) -> ClassAction | None:
        """Return the action with ``action_id``, or None."""
        for action in self.actions:
            if action.id == action_id:
                return action
        return None


__all__ = ["ClassBase", "ClassDefinition"]
