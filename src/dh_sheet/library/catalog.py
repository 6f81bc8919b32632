"""External class catalog provider.

The catalog is a JSON object mapping class name to class definition,
fetched over HTTP or read from a local file. Any failure degrades to an
empty mapping so the library falls back to the built-in classes; the
user never sees an error for it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import requests
from pydantic import ValidationError as PydanticValidationError

from dh_sheet.core.exceptions import CatalogError
from dh_sheet.core.logging import get_logger
from dh_sheet.models.classes import ClassDefinition


logger = get_logger(__name__)


def _fetch_url(url: str, timeout: float) -> Any:
    """GET the catalog JSON.

    Raises:
        CatalogError: On any request failure or a non-JSON body.
    """
    try:
        response = requests.get(
            url,
            headers={"Accept": "application/json"},
            timeout=timeout,
        )
        response.raise_for_status()
        return response.json()
    except requests.RequestException as exc:
        raise CatalogError(f"Catalog request failed: {exc}", source=url) from exc
    except ValueError as exc:
        raise CatalogError("Catalog response is not JSON", source=url) from exc


def _read_file(path: Path) -> Any:
    """Read the catalog JSON from disk.

    Raises:
        CatalogError: If the file is unreadable or not JSON.
    """
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CatalogError(f"Catalog file unreadable: {exc}", source=str(path)) from exc
    except ValueError as exc:
        raise CatalogError("Catalog file is not JSON", source=str(path)) from exc


def parse_catalog(raw: Any, *, source: str = "<memory>") -> dict[str, ClassDefinition]:
    """Validate a raw catalog payload entry by entry.

    Invalid entries are skipped with a warning; the rest are kept.

    Args:
        raw: Decoded JSON payload.
        source: URL or path, for log context.

    Returns:
        Mapping of class name to validated definition.

    Raises:
        CatalogError: If the payload is not a JSON object.
    """
    if not isinstance(raw, dict):
        raise CatalogError(
            "Catalog must be a JSON object",
            source=source,
            details={"payload_type": type(raw).__name__},
        )

    classes: dict[str, ClassDefinition] = {}
    for name, data in raw.items():
        try:
            classes[str(name)] = ClassDefinition.model_validate(data)
        except PydanticValidationError as exc:
            logger.warning(
                "Skipping invalid catalog class",
                class_key=name,
                source=source,
                errors=exc.error_count(),
            )
    return classes


def load_catalog(
    *,
    url: str | None = None,
    path: Path | str | None = None,
    timeout: float = 5.0,
) -> dict[str, ClassDefinition]:
    """Load the external class catalog.

    Args:
        url: Catalog URL, takes precedence over ``path``.
        path: Local catalog JSON file.
        timeout: HTTP timeout in seconds.

    Returns:
        Mapping of class name to definition; empty when no source is
        configured or the source is unavailable.
    """
    if not url and not path:
        return {}

    source = url or str(path)
    try:
        raw = _fetch_url(url, timeout) if url else _read_file(Path(path))
        classes = parse_catalog(raw, source=source)
    except CatalogError as exc:
        logger.warning("Class catalog unavailable", source=source, error=exc.message)
        return {}

    logger.info("Class catalog loaded", source=source, classes=len(classes))
    return classes


__all__ = ["load_catalog", "parse_catalog"]
