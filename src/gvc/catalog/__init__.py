"""Version catalog document model."""

from .document import load_catalog, dump_catalog, save_catalog, parse_catalog
from .entries import (
    LibraryEntry,
    LiteralVersion,
    PluginEntry,
    VersionAlias,
    VersionReference,
)

__all__ = [
    "load_catalog",
    "dump_catalog",
    "save_catalog",
    "parse_catalog",
    "LibraryEntry",
    "LiteralVersion",
    "PluginEntry",
    "VersionAlias",
    "VersionReference",
]
