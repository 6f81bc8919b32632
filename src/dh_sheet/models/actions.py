"""Class action variants.

A class action is a closed tagged union discriminated by ``type``.
Five kinds exist: note, roll, buff, toggle and prompt. Parsing goes
through :data:`CLASS_ACTION_ADAPTER`, so an unknown tag never becomes a
model instance.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter

from dh_sheet.models.base import SheetModel


class ActionBase(SheetModel):
    """Fields shared by every class action."""

    id: str = Field(min_length=1, description="Action identifier, unique per class")
    label: str = Field(description="Button label, also used in log lines")


class NoteAction(ActionBase):
    """Logs a fixed phrase; never changes the sheet."""

    type: Literal["note"] = "note"


class RollAction(ActionBase):
    """Flavor roll of a single die."""

    type: Literal["roll"] = "roll"
    die: int = Field(default=6, ge=1, le=1000, description="Die size")


class BuffAction(ActionBase):
    """Adds ``value`` to the numeric buff named ``key``."""

    type: Literal["buff"] = "buff"
    key: str = Field(min_length=1)
    value: int | float = 0


class ToggleAction(ActionBase):
    """Flips the boolean buff named ``key``."""

    type: Literal["toggle"] = "toggle"
    key: str = Field(min_length=1)


class PromptAction(ActionBase):
    """Asks for free text and stores it under ``key``."""

    type: Literal["prompt"] = "prompt"
    key: str = Field(min_length=1)


ClassAction = Annotated[
    Union[NoteAction, RollAction, BuffAction, ToggleAction, PromptAction],
    Field(discriminator="type"),
]

CLASS_ACTION_ADAPTER: TypeAdapter[ClassAction] = TypeAdapter(ClassAction)

ACTION_TYPES: tuple[str, ...] = ("note", "roll", "buff", "toggle", "prompt")


__all__ = [
    "ActionBase",
    "NoteAction",
    "RollAction",
    "BuffAction",
    "ToggleAction",
    "PromptAction",
    "ClassAction",
    "CLASS_ACTION_ADAPTER",
    "ACTION_TYPES",
]
