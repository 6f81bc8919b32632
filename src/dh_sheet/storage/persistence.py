"""Persistence adapter for character documents.

Load and save by sheet id, export to and import from portable JSON
bytes, and reset everything. A corrupt stored record is replaced by a
default document without raising; a bad import raises
:class:`SheetImportError` and leaves the caller's document untouched.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping

from pydantic import ValidationError as PydanticValidationError

from dh_sheet.core.exceptions import SheetImportError, StorageError
from dh_sheet.core.logging import get_logger
from dh_sheet.models.classes import ClassDefinition
from dh_sheet.models.sheet import CharacterDocument, new_document
from dh_sheet.storage.database import SheetStore


logger = get_logger(__name__)

EXPORT_INDENT = 2
_UNSAFE_FILENAME = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


# =============================================================================
# Serialization
# =============================================================================


def serialize(document: CharacterDocument) -> str:
    """Full indented JSON of ``document`` with wire keys."""
    return json.dumps(document.to_json_dict(), indent=EXPORT_INDENT, ensure_ascii=False)


def parse_document(text: str) -> CharacterDocument:
    """Parse JSON text into a document.

    Raises:
        SheetImportError: If the text is not JSON or not a valid document.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SheetImportError("Invalid JSON", reason=exc.msg) from exc

    if not isinstance(data, dict):
        raise SheetImportError(
            "Sheet must be a JSON object",
            reason=f"got {type(data).__name__}",
        )
    try:
        return CharacterDocument.model_validate(data)
    except PydanticValidationError as exc:
        raise SheetImportError(
            "JSON is not a character sheet",
            reason=f"{exc.error_count()} validation error(s)",
            details={"errors": [error["loc"] for error in exc.errors()]},
        ) from exc


def export_bytes(document: CharacterDocument) -> bytes:
    return serialize(document).encode("utf-8")


def export_filename(document: CharacterDocument) -> str:
    """Suggested export name: ``<character name or class key>.json``."""
    stem = _UNSAFE_FILENAME.sub("_", document.meta.name or document.class_key).strip()
    return f"{stem or 'sheet'}.json"


def import_bytes(raw: bytes) -> CharacterDocument:
    """Parse imported file bytes into a document (all-or-nothing).

    Raises:
        SheetImportError: If the bytes are not a UTF-8 JSON character sheet.
    """
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SheetImportError("File is not UTF-8 text", reason=str(exc)) from exc
    document = parse_document(text)
    logger.info("Sheet imported", sheet_id=document.id, class_key=document.class_key)
    return document


# =============================================================================
# Keyed persistence
# =============================================================================


class SheetPersistence:
    """Load/save documents in a SheetStore under ``<prefix>:<id>`` keys.

    Args:
        store: The backing key-value store.
        library: Classes used to default-construct missing sheets.
        key_prefix: Namespace for storage keys.
    """

    def __init__(
        self,
        store: SheetStore,
        library: Mapping[str, ClassDefinition],
        *,
        key_prefix: str = "dh-sheet",
    ) -> None:
        self.store = store
        self.library = library
        self.key_prefix = key_prefix

    def storage_key(self, sheet_id: str) -> str:
        return f"{self.key_prefix}:{sheet_id}"

    def load(self, sheet_id: str, default_class: str) -> CharacterDocument:
        """Load a sheet, or default-construct one for ``default_class``.

        An absent or unreadable record is never an error, and neither is
        a store that fails to read.
        """
        key = self.storage_key(sheet_id)
        try:
            record = self.store.get(key)
        except StorageError as exc:
            logger.warning("Sheet store unreadable, using default", key=key, error=exc.message)
            return new_document(default_class, self.library)
        if record is None:
            logger.info("No stored sheet, creating default", key=key, class_key=default_class)
            return new_document(default_class, self.library)

        try:
            return parse_document(record.payload)
        except SheetImportError as exc:
            logger.warning(
                "Persisted sheet unreadable, using default",
                key=key,
                error=exc.message,
            )
            return new_document(default_class, self.library)

    def save(self, sheet_id: str, document: CharacterDocument) -> None:
        self.store.put(self.storage_key(sheet_id), serialize(document))
        logger.debug("Sheet saved", sheet_id=sheet_id)

    def reset_all(self) -> None:
        """Drop all persisted state, not just this prefix."""
        self.store.clear()


__all__ = [
    "SheetPersistence",
    "export_bytes",
    "export_filename",
    "import_bytes",
    "parse_document",
    "serialize",
]
