"""The working sheet session.

A SheetSession owns the one document being edited. It routes form edits,
class actions and trait rolls to the engine, and writes every resulting
document through to storage before returning.

Example:
    >>> session = SheetSession.from_settings()
    >>> session.open()
    >>> session.run_action("dodge")
    >>> session.effective_evasion
    14
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from dh_sheet.core.exceptions import ActionError, ActionNotFoundError
from dh_sheet.core.logging import bind_context, get_logger
from dh_sheet.engine import actions as action_engine
from dh_sheet.engine.activity import LOG_LIMIT
from dh_sheet.engine.dice import DiceRoller
from dh_sheet.engine.trait_roll import TRAIT_DIE, RollModifiers, TraitRoll, roll_trait
from dh_sheet.library.registry import ClassLibrary
from dh_sheet.models.classes import ClassDefinition
from dh_sheet.models.sheet import CharacterDocument, Trait, new_document
from dh_sheet.storage.database import SheetStore
from dh_sheet.storage.persistence import (
    SheetPersistence,
    export_bytes,
    export_filename,
    import_bytes,
)


if TYPE_CHECKING:
    from dh_sheet.core.config import Settings
    from dh_sheet.engine.actions import ActionOutcome, PendingPrompt, PromptCallback
    from dh_sheet.models.actions import ClassAction


logger = get_logger(__name__)


class SheetSession:
    """Controller for a single persisted sheet.

    Args:
        persistence: Keyed load/save adapter (also holds the class library).
        roller: Dice source for trait rolls and class rolls.
        sheet_id: Identifier of the edited sheet.
        default_class: Class used when no sheet is stored.
        trait_die: Trait roll die size.
        log_limit: Activity log bound.
    """

    def __init__(
        self,
        persistence: SheetPersistence,
        roller: DiceRoller,
        *,
        sheet_id: str = "default",
        default_class: str = "Rogue",
        trait_die: int = TRAIT_DIE,
        log_limit: int = LOG_LIMIT,
    ) -> None:
        self.persistence = persistence
        self.roller = roller
        self.sheet_id = sheet_id
        self.default_class = default_class
        self.trait_die = trait_die
        self.log_limit = log_limit
        self._document: CharacterDocument | None = None
        self._pending: PendingPrompt | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> SheetSession:
        """Build a session from application settings."""
        if settings is None:
            from dh_sheet.core.config import get_settings

            settings = get_settings()

        library = ClassLibrary.from_settings(settings.catalog)
        store = SheetStore(settings.storage.database_path)
        persistence = SheetPersistence(store, library, key_prefix=settings.storage.key_prefix)
        return cls(
            persistence,
            DiceRoller(seed=settings.dice.seed),
            sheet_id=settings.sheet.sheet_id,
            default_class=settings.sheet.default_class,
            trait_die=settings.dice.trait_die,
            log_limit=settings.sheet.log_limit,
        )

    # =========================================================================
    # State
    # =========================================================================

    @property
    def library(self) -> Mapping[str, ClassDefinition]:
        return self.persistence.library

    @property
    def document(self) -> CharacterDocument:
        if self._document is None:
            return self.open()
        return self._document

    @property
    def class_definition(self) -> ClassDefinition | None:
        """Definition of the sheet's class, None if it does not resolve."""
        return self.library.get(self.document.class_key)

    @property
    def pending_prompt(self) -> PendingPrompt | None:
        return self._pending

    @property
    def effective_evasion(self) -> int | float:
        return action_engine.effective_evasion(self.document)

    def open(self) -> CharacterDocument:
        """Load the stored sheet, or create and store the default one."""
        bind_context(sheet_id=self.sheet_id)
        document = self.persistence.load(self.sheet_id, self.default_class)
        return self._commit(document)

    def _commit(self, document: CharacterDocument) -> CharacterDocument:
        self._document = document
        self.persistence.save(self.sheet_id, document)
        return document

    # =========================================================================
    # Edits
    # =========================================================================

    def update(
        self,
        edit: Callable[..., CharacterDocument],
        *args: Any,
        **kwargs: Any,
    ) -> CharacterDocument:
        """Apply an editing function and persist the result.

        Example:
            >>> session.update(editing.set_hope, 3)
        """
        return self._commit(edit(self.document, *args, **kwargs))

    def clear_buffs(self) -> CharacterDocument:
        return self._commit(action_engine.clear_buffs(self.document))

    def switch_class(self, class_key: str) -> CharacterDocument:
        """Replace the sheet with a fresh default for ``class_key``.

        This discards traits, resources and the log; nothing is merged.
        """
        self._pending = None
        logger.info("Switching class", class_key=class_key)
        return self._commit(new_document(class_key, self.library))

    # =========================================================================
    # Actions & rolls
    # =========================================================================

    def execute(
        self,
        action: ClassAction | Mapping[str, Any],
        *,
        prompt: PromptCallback | None = None,
    ) -> ActionOutcome:
        """Execute an action payload against the sheet."""
        outcome = action_engine.execute_action(
            action,
            self.document,
            self.roller,
            prompt=prompt,
            log_limit=self.log_limit,
        )
        self._pending = outcome.pending
        if outcome.document is not self._document:
            self._commit(outcome.document)
        return outcome

    def run_action(self, action_id: str, *, prompt: PromptCallback | None = None) -> ActionOutcome:
        """Execute one of the current class's actions by id.

        Raises:
            ActionNotFoundError: If the class does not resolve or has no
                such action.
        """
        definition = self.class_definition
        action = definition.find_action(action_id) if definition else None
        if action is None:
            raise ActionNotFoundError(
                "Action not available for this class",
                action_id=action_id,
                details={"class_key": self.document.class_key},
            )
        return self.execute(action, prompt=prompt)

    def answer_prompt(self, value: str | None) -> ActionOutcome:
        """Resume the pending prompt action with the user's answer.

        Raises:
            ActionError: If no prompt is pending.
        """
        if self._pending is None:
            raise ActionError("No prompt is pending")
        pending, self._pending = self._pending, None
        outcome = pending.resume(self.document, value)
        if outcome.document is not self._document:
            self._commit(outcome.document)
        return outcome

    def roll_trait(
        self,
        trait: Trait | str,
        *,
        advantage: bool = False,
        disadvantage: bool = False,
    ) -> TraitRoll:
        document, result = roll_trait(
            self.document,
            trait,
            self.roller,
            modifiers=RollModifiers(advantage=advantage, disadvantage=disadvantage),
            die_sides=self.trait_die,
            log_limit=self.log_limit,
        )
        self._commit(document)
        return result

    # =========================================================================
    # Import / export / reset
    # =========================================================================

    def import_bytes(self, raw: bytes) -> CharacterDocument:
        """Replace the sheet with an imported one.

        Raises:
            SheetImportError: If the bytes are not a valid sheet; the
                current sheet is kept as it was.
        """
        document = import_bytes(raw)
        self._pending = None
        return self._commit(document)

    def export(self) -> tuple[str, bytes]:
        """Return the suggested filename and JSON bytes of the sheet."""
        document = self.document
        return export_filename(document), export_bytes(document)

    def reset(self) -> CharacterDocument:
        """Clear all persisted state and start over with the default sheet."""
        self.persistence.reset_all()
        self._pending = None
        logger.info("Sheet reset", default_class=self.default_class)
        return self._commit(new_document(self.default_class, self.library))


__all__ = ["SheetSession"]
