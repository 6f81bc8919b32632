"""The active class library.

Built-in classes merged with an external catalog. On a key collision
the external entry wins; keys only present externally are added.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

from dh_sheet.core.logging import get_logger
from dh_sheet.library.builtin import builtin_classes
from dh_sheet.library.catalog import load_catalog
from dh_sheet.models.classes import ClassDefinition


if TYPE_CHECKING:
    from dh_sheet.core.config import CatalogSettings


logger = get_logger(__name__)


class ClassLibrary(Mapping[str, ClassDefinition]):
    """Read-only mapping of class name to definition.

    Example:
        >>> library = ClassLibrary()
        >>> library.resolve("Rogue").start_evasion
        12
        >>> library.resolve("Necromancer") is None
        True
    """

    def __init__(self, external: Mapping[str, ClassDefinition] | None = None) -> None:
        self._classes: dict[str, ClassDefinition] = {**builtin_classes(), **(external or {})}

    @classmethod
    def from_settings(cls, settings: CatalogSettings) -> ClassLibrary:
        """Build the library, merging the configured external catalog."""
        external = load_catalog(
            url=settings.url,
            path=settings.path,
            timeout=settings.timeout_seconds,
        )
        library = cls(external)
        logger.info("Class library ready", classes=len(library), external=len(external))
        return library

    def resolve(self, key: str) -> ClassDefinition | None:
        return self._classes.get(key)

    def merged(self, external: Mapping[str, ClassDefinition]) -> ClassLibrary:
        """Return a new library with ``external`` layered on top."""
        library = ClassLibrary()
        library._classes = {**self._classes, **external}
        return library

    def __getitem__(self, key: str) -> ClassDefinition:
        return self._classes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._classes)

    def __len__(self) -> int:
        return len(self._classes)


__all__ = ["ClassLibrary"]
