"""Storage module for sheet persistence.

Provides:
- SheetStore: SQLite key-value records
- SheetPersistence: load/save/reset by sheet id
- JSON import/export of single sheets
"""

from dh_sheet.storage.database import SheetRecord, SheetStore
from dh_sheet.storage.persistence import (
    SheetPersistence,
    export_bytes,
    export_filename,
    import_bytes,
    parse_document,
    serialize,
)

__all__ = [
    "SheetPersistence",
    "SheetRecord",
    "SheetStore",
    "export_bytes",
    "export_filename",
    "import_bytes",
    "parse_document",
    "serialize",
]
