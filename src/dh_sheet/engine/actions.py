"""Class action execution.

Each class offers a handful of actions: notes, flavor rolls, numeric
buffs, boolean toggles and prompted text. :func:`execute_action`
dispatches on the action variant, returns the updated document and the
log line, and fails loudly on anything it does not recognise.

The ``prompt`` variant needs user input. Callers with a blocking prompt
pass it as ``prompt``; otherwise the outcome carries a
:class:`PendingPrompt` that is resumed once the input arrives.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, NoReturn

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from dh_sheet.core.exceptions import ActionError, UnknownActionError
from dh_sheet.core.logging import get_logger
from dh_sheet.engine.activity import LOG_LIMIT, append_log
from dh_sheet.engine.dice import DiceRoller
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
from dh_sheet.models.sheet import DEFAULT_BUFFS, BuffValue, CharacterDocument


logger = get_logger(__name__)

PromptCallback = Callable[[str], "str | None"]


# =============================================================================
# Outcomes
# =============================================================================


@dataclass(frozen=True)
class ActionOutcome:
    """Result of executing a class action.

    Attributes:
        document: The document after the action (unchanged if nothing happened).
        line: The log line written, or None.
        pending: Set when a prompt action is waiting for input.
    """

    document: CharacterDocument
    line: str | None = None
    pending: PendingPrompt | None = None


@dataclass(frozen=True)
class PendingPrompt:
    """A prompt action suspended until the user answers."""

    action: PromptAction
    log_limit: int = LOG_LIMIT

    @property
    def message(self) -> str:
        return f"{self.action.label}: enter value"

    def resume(self, document: CharacterDocument, value: str | None) -> ActionOutcome:
        """Complete the action with the user's answer.

        Empty or cancelled (None) input changes nothing and logs nothing.
        """
        return _store_prompt_value(self.action, document, value, self.log_limit)


# =============================================================================
# Helpers
# =============================================================================


def numeric_buff(value: BuffValue | None) -> int | float:
    """Read a buff as a number; absent or non-numeric values count as 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def _describe(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True)
    return payload


def _unhandled(action: NoReturn) -> NoReturn:
    payload = _describe(action)
    raise UnknownActionError(
        f"Unhandled ClassAction variant: {json.dumps(payload, default=repr)}",
        payload=payload,
    )


def coerce_action(payload: ClassAction | Mapping[str, Any]) -> ClassAction:
    """Turn a raw mapping into a ClassAction.

    Raises:
        UnknownActionError: If the ``type`` tag is not a known variant.
        ActionError: If the tag is known but the payload is malformed.
    """
    if isinstance(payload, ActionBase):
        return payload  # type: ignore[return-value]
    if not isinstance(payload, Mapping):
        _unhandled(payload)  # type: ignore[arg-type]

    if payload.get("type") not in ACTION_TYPES:
        _unhandled(payload)  # type: ignore[arg-type]
    try:
        return CLASS_ACTION_ADAPTER.validate_python(dict(payload))
    except PydanticValidationError as exc:
        raise ActionError(
            "Malformed class action",
            action_id=str(payload.get("id") or ""),
            details={"payload": dict(payload), "errors": exc.error_count()},
        ) from exc


def _with_buff(document: CharacterDocument, key: str, value: BuffValue) -> CharacterDocument:
    return document.patch(buffs={**document.buffs, key: value})


def _store_prompt_value(
    action: PromptAction,
    document: CharacterDocument,
    value: str | None,
    log_limit: int,
) -> ActionOutcome:
    if not value:
        logger.debug("Prompt cancelled", action_id=action.id)
        return ActionOutcome(document=document)
    line = f"{action.label}: {value}"
    updated = append_log(_with_buff(document, action.key, value), line, limit=log_limit)
    return ActionOutcome(document=updated, line=line)


# =============================================================================
# Execution
# =============================================================================


def execute_action(
    action: ClassAction | Mapping[str, Any],
    document: CharacterDocument,
    roller: DiceRoller,
    *,
    prompt: PromptCallback | None = None,
    log_limit: int = LOG_LIMIT,
) -> ActionOutcome:
    """Execute a class action against ``document``.

    Args:
        action: The action, or its raw wire mapping.
        document: Current document; never modified.
        roller: Dice source for ``roll`` actions.
        prompt: Blocking input callback for ``prompt`` actions.
        log_limit: Activity log bound.

    Returns:
        The outcome holding the new document and log line.

    Raises:
        UnknownActionError: For any variant the engine does not handle.
    """
    action = coerce_action(action)
    name = document.display_name

    match action:
        case NoteAction():
            line = f"{name} uses {action.label}."
            updated = document

        case RollAction():
            result = roller.roll_die(action.die)
            line = f"{name} rolls d{action.die} → {result} ({action.label})."
            updated = document

        case BuffAction():
            current = numeric_buff(document.buffs.get(action.key))
            updated = _with_buff(document, action.key, current + action.value)
            line = f"{name} gains {action.value} from {action.label}."

        case ToggleAction():
            enabled = not bool(document.buffs.get(action.key))
            updated = _with_buff(document, action.key, enabled)
            line = f"{action.label}: {'ON' if enabled else 'OFF'}"

        case PromptAction():
            pending = PendingPrompt(action=action, log_limit=log_limit)
            if prompt is None:
                return ActionOutcome(document=document, pending=pending)
            return pending.resume(document, prompt(pending.message))

        case _:
            _unhandled(action)

    logger.debug("Action executed", action_id=action.id, action_type=action.type)
    return ActionOutcome(document=append_log(updated, line, limit=log_limit), line=line)


def clear_buffs(document: CharacterDocument) -> CharacterDocument:
    """Reset the conventional buff keys; other keys are left alone."""
    return document.patch(buffs={**document.buffs, **DEFAULT_BUFFS})


def effective_evasion(document: CharacterDocument) -> int | float:
    """Base evasion plus the ``evadeBuff`` buff."""
    return document.evasion + numeric_buff(document.buffs.get("evadeBuff"))


__all__ = [
    "ActionOutcome",
    "PendingPrompt",
    "PromptCallback",
    "clear_buffs",
    "coerce_action",
    "effective_evasion",
    "execute_action",
    "numeric_buff",
]
