"""Bounded, most-recent-first activity log."""

from __future__ import annotations

from dh_sheet.models.sheet import LOG_LIMIT, CharacterDocument


def append_log(
    document: CharacterDocument,
    line: str,
    *,
    limit: int = LOG_LIMIT,
) -> CharacterDocument:
    """Prepend ``line`` and keep the first ``limit`` entries.

    Entries beyond the limit (the oldest) are dropped silently.
    """
    return document.patch(activity_log=[line, *document.activity_log][:limit])


__all__ = ["LOG_LIMIT", "append_log"]
