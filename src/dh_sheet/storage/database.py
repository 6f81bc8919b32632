"""SQLite key-value store for persisted sheets.

Every sheet is one JSON record under a namespaced key. This module is
the only place that touches the storage medium; the engine goes
through :class:`dh_sheet.storage.persistence.SheetPersistence`.

Default location: data/dh_sheet.db (see StorageSettings).
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Generator

from dh_sheet.core.exceptions import StorageError
from dh_sheet.core.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class SheetRecord:
    """A stored sheet record.

    Attributes:
        key: Namespaced storage key.
        payload: Serialized document JSON.
        updated_at: When the record was last written.
    """

    key: str
    payload: str
    updated_at: datetime

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> SheetRecord:
        """Create from database row."""
        return cls(
            key=row[0],
            payload=row[1],
            updated_at=datetime.fromisoformat(row[2]),
        )


# =============================================================================
# Store Class
# =============================================================================


class SheetStore:
    """SQLite-backed key-value store for sheet JSON."""

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path) -> None:
        """Initialize the store, creating the schema if needed.

        Args:
            db_path: Path to the database file.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()
        logger.info("Sheet store initialized", path=str(self.db_path))

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open sheet store: {exc}") from exc
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        try:
            with self._get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS schema_version (
                        version INTEGER PRIMARY KEY
                    )
                """)
                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS sheets (
                        key TEXT PRIMARY KEY,
                        payload TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                """)
                cursor.execute("""
                    INSERT OR REPLACE INTO schema_version (version) VALUES (?)
                """, (self.SCHEMA_VERSION,))
        except sqlite3.Error as exc:
            raise StorageError(
                f"Cannot initialize sheet store: {exc}",
                details={"path": str(self.db_path)},
            ) from exc

    # =========================================================================
    # Record Operations
    # =========================================================================

    def get(self, key: str) -> SheetRecord | None:
        """Get the record stored under ``key``.

        Returns:
            The record if present, None otherwise.
        """
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT key, payload, updated_at FROM sheets WHERE key = ?",
                    (key,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Read failed: {exc}", key=key) from exc
        return SheetRecord.from_row(tuple(row)) if row else None

    def put(self, key: str, payload: str) -> SheetRecord:
        """Insert or replace the record under ``key``."""
        now = datetime.now()
        try:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT INTO sheets (key, payload, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        payload = excluded.payload,
                        updated_at = excluded.updated_at
                """, (key, payload, now.isoformat()))
        except sqlite3.Error as exc:
            raise StorageError(f"Write failed: {exc}", key=key) from exc
        return SheetRecord(key=key, payload=payload, updated_at=now)

    def clear(self) -> int:
        """Delete every record, whatever its key.

        Returns:
            Number of records removed.
        """
        try:
            with self._get_connection() as conn:
                removed = conn.execute("DELETE FROM sheets").rowcount
        except sqlite3.Error as exc:
            raise StorageError(f"Clear failed: {exc}") from exc
        logger.info("Sheet store cleared", removed=removed)
        return removed

    def keys(self) -> list[str]:
        """List stored keys, most recently written first."""
        try:
            with self._get_connection() as conn:
                rows = conn.execute("SELECT key FROM sheets ORDER BY updated_at DESC").fetchall()
        except sqlite3.Error as exc:
            raise StorageError(f"Listing keys failed: {exc}") from exc
        return [row[0] for row in rows]


__all__ = ["SheetRecord", "SheetStore"]
