"""Class library: built-in classes merged with an external catalog."""

from dh_sheet.library.builtin import BUILTIN_CLASS_DATA, builtin_classes
from dh_sheet.library.catalog import load_catalog, parse_catalog
from dh_sheet.library.registry import ClassLibrary

__all__ = [
    "BUILTIN_CLASS_DATA",
    "ClassLibrary",
    "builtin_classes",
    "load_catalog",
    "parse_catalog",
]
