"""Reading and editing catalog entries in every shape they may take.

A library may be written as

- a coordinate string: ``lib = "group:artifact:1.0"``
- a table with a module: ``lib = { module = "group:artifact", version = "1.0" }``
- a table with group and name: ``lib = { group = "group", name = "artifact", version.ref = "core" }``

and a plugin as ``{ id = "...", version = "..." }`` or ``"id:1.0"``. Tables may
be inline or standard (``[libraries.lib]``). Readers try the shapes in the
order above; the first that parses wins. Writers keep whatever shape an entry
already uses and touch nothing but its version.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple, Union

import tomlkit

from gvc.constants import CatalogSections
from gvc.errors import UnsupportedShapeError
from gvc.registry.models import Coordinate


@dataclass(frozen=True)
class LiteralVersion:
    """A version written directly on the entry."""
    value: str


@dataclass(frozen=True)
class VersionReference:
    """A ``{ ref = "<alias>" }`` pointer into the versions section."""
    alias: str


VersionSlot = Union[LiteralVersion, VersionReference]


@dataclass(frozen=True)
class LibraryEntry:
    name: str
    coordinate: Coordinate
    version: Optional[VersionSlot]


@dataclass(frozen=True)
class PluginEntry:
    name: str
    plugin_id: str
    version: Optional[VersionSlot]


@dataclass(frozen=True)
class VersionAlias:
    name: str
    value: str


CatalogEntry = Union[LibraryEntry, PluginEntry, VersionAlias]


def parse_coordinate(text: str) -> Optional[Tuple[str, str, Optional[str]]]:
    """Split ``group:artifact[:version]``; None for anything else."""
    parts = str(text).split(":")
    if len(parts) not in (2, 3) or not parts[0] or not parts[1]:
        return None
    version = parts[2] if len(parts) == 3 and parts[2] else None
    return parts[0], parts[1], version


def _text(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, str) else None


def _version_slot(table: Mapping) -> Optional[VersionSlot]:
    version = table.get("version")
    if isinstance(version, str):
        return LiteralVersion(str(version))
    if isinstance(version, Mapping):
        ref = _text(version.get("ref"))
        if ref:
            return VersionReference(ref)
    return None


def _read_library(item: Any) -> Optional[Tuple[Coordinate, Optional[VersionSlot]]]:
    if isinstance(item, str):
        parsed = parse_coordinate(item)
        if parsed is None:
            return None
        group, artifact, version = parsed
        return Coordinate(group, artifact), LiteralVersion(version) if version else None

    if not isinstance(item, Mapping):
        return None

    module = _text(item.get("module"))
    if module is not None:
        parsed = parse_coordinate(module)
        if parsed is not None:
            return Coordinate(parsed[0], parsed[1]), _version_slot(item)

    group, name = _text(item.get("group")), _text(item.get("name"))
    if group and name:
        return Coordinate(group, name), _version_slot(item)
    return None


def _read_plugin(item: Any) -> Optional[Tuple[str, Optional[VersionSlot]]]:
    if isinstance(item, str):
        plugin_id, _, version = str(item).partition(":")
        if not plugin_id:
            return None
        return plugin_id, LiteralVersion(version) if version else None
    if isinstance(item, Mapping):
        plugin_id = _text(item.get("id"))
        if plugin_id:
            return plugin_id, _version_slot(item)
    return None


def extract_coordinate(item: Any) -> Optional[Coordinate]:
    """``(group, artifact)`` of a library item, or None."""
    read = _read_library(item)
    return read[0] if read else None


def extract_literal_version(item: Any) -> Optional[str]:
    """The literal version written on a library item, or None."""
    read = _read_library(item)
    if read and isinstance(read[1], LiteralVersion):
        return read[1].value
    return None


def extract_version_reference(item: Any) -> Optional[str]:
    """The alias name a library item points to, or None."""
    read = _read_library(item)
    if read and isinstance(read[1], VersionReference):
        return read[1].alias
    return None


def uses_reference(item: Any, alias_name: str) -> bool:
    return extract_version_reference(item) == alias_name


def extract_plugin_id(item: Any) -> Optional[str]:
    read = _read_plugin(item)
    return read[0] if read else None


def extract_plugin_literal_version(item: Any) -> Optional[str]:
    read = _read_plugin(item)
    if read and isinstance(read[1], LiteralVersion):
        return read[1].value
    return None


def read_library(name: str, item: Any) -> Optional[LibraryEntry]:
    read = _read_library(item)
    if read is None:
        return None
    return LibraryEntry(name=name, coordinate=read[0], version=read[1])


def read_plugin(name: str, item: Any) -> Optional[PluginEntry]:
    read = _read_plugin(item)
    if read is None:
        return None
    return PluginEntry(name=name, plugin_id=read[0], version=read[1])


def _string_like(previous: Any, text: str):
    """A TOML string for ``text`` using the quote style of ``previous``."""
    literal = False
    if previous is not None and hasattr(previous, "as_string"):
        literal = previous.as_string().startswith("'")
    return tomlkit.string(text, literal=literal)


def mutate_version(container: Any, key: str, new_version: str, *, plugin: bool = False) -> bool:
    """Rewrite the version of ``container[key]`` in its current shape.

    A coordinate string is rewritten as a whole (``group:artifact:new``, or
    ``id:new`` for plugins); a table only gets its ``version`` field replaced.

    Returns:
        True when the document changed, False when it already held ``new_version``.

    Raises:
        UnsupportedShapeError: when the entry is missing or has no recognised shape.
    """
    item = container.get(key) if isinstance(container, Mapping) else None
    if item is None:
        raise UnsupportedShapeError(key, "entry not found")

    if isinstance(item, str):
        if plugin:
            plugin_id = str(item).partition(":")[0]
            if not plugin_id:
                raise UnsupportedShapeError(key, f"cannot parse plugin string '{item}'")
            new_text = f"{plugin_id}:{new_version}"
        else:
            parsed = parse_coordinate(item)
            if parsed is None:
                raise UnsupportedShapeError(key, f"cannot parse coordinate '{item}'")
            new_text = f"{parsed[0]}:{parsed[1]}:{new_version}"
        if new_text == str(item):
            return False
        container[key] = _string_like(item, new_text)
        return True

    if isinstance(item, Mapping):
        recognised = _read_plugin(item) if plugin else _read_library(item)
        if recognised is None:
            raise UnsupportedShapeError(key, "table has no recognised coordinate fields")
        current = item.get("version")
        if isinstance(current, str):
            if str(current) == new_version:
                return False
            item["version"] = _string_like(current, new_version)
        else:
            item["version"] = tomlkit.string(new_version)
        return True

    raise UnsupportedShapeError(key, f"unexpected value type {type(item).__name__}")


def mutate_alias(versions: Any, name: str, new_version: str) -> bool:
    """Replace the value of a version alias; True when it changed."""
    current = versions.get(name) if isinstance(versions, Mapping) else None
    if not isinstance(current, str):
        raise UnsupportedShapeError(name, "version alias is not a string")
    if str(current) == new_version:
        return False
    versions[name] = _string_like(current, new_version)
    return True


def section(doc: Any, name: Union[CatalogSections, str]) -> Optional[Mapping]:
    """Top-level section as a mapping; None when absent or not a table."""
    key = name.value if isinstance(name, CatalogSections) else name
    value = doc.get(key) if isinstance(doc, Mapping) else None
    return value if isinstance(value, Mapping) else None


def iter_aliases(doc: Any) -> Iterator[VersionAlias]:
    """Version aliases with string values, in declaration order."""
    versions = section(doc, CatalogSections.VERSIONS)
    if versions is None:
        return
    for name, value in versions.items():
        if isinstance(value, str):
            yield VersionAlias(name=str(name), value=str(value))


def iter_libraries(doc: Any) -> Iterator[Tuple[str, Any]]:
    """Raw ``(name, item)`` pairs of the libraries section, in declaration order."""
    libraries = section(doc, CatalogSections.LIBRARIES)
    if libraries is None:
        return
    for name, item in libraries.items():
        yield str(name), item


def iter_plugins(doc: Any) -> Iterator[Tuple[str, Any]]:
    """Raw ``(name, item)`` pairs of the plugins section, in declaration order."""
    plugins = section(doc, CatalogSections.PLUGINS)
    if plugins is None:
        return
    for name, item in plugins.items():
        yield str(name), item


def find_representative(doc: Any, alias_name: str) -> Optional[Coordinate]:
    """Coordinate of the first library referencing ``alias_name``."""
    for _, item in iter_libraries(doc):
        if uses_reference(item, alias_name):
            coordinate = extract_coordinate(item)
            if coordinate is not None:
                return coordinate
    return None
