"""Adding new libraries and plugins to a catalog.

New entries always use the ``version.ref`` form: the version goes into
``[versions]`` under a generated (or given) alias and the entry points at it::

    squareup-okhttp3-okhttp = { module = "com.squareup.okhttp3:okhttp", version = { ref = "squareup-okhttp3" } }

Missing sections are created; nothing else in the document is touched.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

import tomlkit

from gvc.constants import CatalogSections, Constants
from gvc.errors import ValidationError
from gvc.registry.base import RepositoryClient
from gvc.registry.models import Coordinate
from gvc.versioning.version import Version

from . import entries
from .document import PathLike, load_catalog, save_catalog

logger = logging.getLogger(__name__)


class AddTarget(Enum):
    LIBRARY = "library"
    PLUGIN = "plugin"


@dataclass(frozen=True)
class AddResult:
    target: AddTarget
    alias: str
    version_alias: str
    version: str
    alias_updated: bool


def parse_library_coordinate(text: str) -> Tuple[str, str, Optional[str]]:
    """Split ``group:artifact[:version]``.

    Raises:
        ValidationError: for any other number of parts or an empty part.
    """
    parts = [part.strip() for part in text.split(":")]
    if len(parts) not in (2, 3):
        raise ValidationError(
            f"Invalid library coordinate '{text}'. Expected format group:artifact[:version]"
        )
    if not all(parts):
        raise ValidationError(
            f"Invalid library coordinate '{text}'. None of group, artifact, version may be empty"
        )
    version = parts[2] if len(parts) == 3 else None
    return parts[0], parts[1], version


def parse_plugin_coordinate(text: str) -> Tuple[str, Optional[str]]:
    """Split ``plugin.id[:version]``.

    Raises:
        ValidationError: for more than one ``:`` or an empty part.
    """
    parts = [part.strip() for part in text.split(":")]
    if len(parts) not in (1, 2):
        raise ValidationError(
            f"Invalid plugin coordinate '{text}'. Expected format plugin.id[:version]"
        )
    if not all(parts):
        raise ValidationError(
            f"Invalid plugin coordinate '{text}'. Plugin id and version may not be empty"
        )
    version = parts[1] if len(parts) == 2 else None
    return parts[0], version


def _id_tokens(dotted: str) -> List[str]:
    tokens = []
    for part in dotted.split("."):
        if part in Constants.ALIAS_SKIPPED_PREFIXES:
            continue
        cleaned = "".join(ch for ch in part if ch.isascii() and ch.isalnum())
        if cleaned:
            tokens.append(cleaned)
    return tokens


def normalize_tokens(tokens: Iterable[str]) -> str:
    """Lower-case, drop empties and repeated neighbours, join with ``-``."""
    normalized: List[str] = []
    for token in tokens:
        lowered = token.lower()
        if not lowered or (normalized and normalized[-1] == lowered):
            continue
        normalized.append(lowered)
    return "-".join(normalized)


def sanitize_alias(raw: str) -> str:
    return normalize_tokens([raw.strip()])


def library_alias(group: str, artifact: str) -> str:
    tokens = _id_tokens(group)
    for part in artifact.replace(".", "-").split("-"):
        tokens.append(part)
    return normalize_tokens(tokens)


def plugin_alias(plugin_id: str) -> str:
    return normalize_tokens(_id_tokens(plugin_id))


def _version_alias(tokens: List[str], fallback: str) -> str:
    if not tokens:
        return fallback
    if len(tokens) >= 3:
        return f"{normalize_tokens(tokens[:2])}-version"
    return normalize_tokens(tokens)


def library_version_alias(group: str) -> str:
    """``org.jetbrains.compose.components`` becomes ``jetbrains-compose-version``."""
    return _version_alias(_id_tokens(group), "version")


def plugin_version_alias(plugin_id: str) -> str:
    return _version_alias(_id_tokens(plugin_id), "plugin-version")


def library_exists(libraries: Any, coordinate: Coordinate) -> bool:
    """True when any library, in any shape, already declares ``coordinate``."""
    return any(entries.extract_coordinate(item) == coordinate for item in libraries.values())


def plugin_exists(plugins: Any, plugin_id: str) -> bool:
    return any(entries.extract_plugin_id(item) == plugin_id for item in plugins.values())


def ensure_section(doc: Any, name: CatalogSections) -> Any:
    """The section table, appended to the document when missing."""
    table = entries.section(doc, name)
    if table is None:
        if name.value in doc:
            raise ValidationError(f"[{name.value}] exists but is not a table")
        doc[name.value] = tomlkit.table()
        table = doc[name.value]
    return table


def upsert_version_alias(versions: Any, name: str, version: str) -> bool:
    """Set ``versions[name]``; True when it was added or changed.

    Raises:
        ValidationError: when the alias exists but is not a plain string.
    """
    if name not in versions:
        versions[name] = version
        return True
    if not isinstance(versions[name], str):
        raise ValidationError(f"Version alias '{name}' already exists but is not a string")
    return entries.mutate_alias(versions, name, version)


def _version_ref(alias: str):
    ref = tomlkit.inline_table()
    ref["ref"] = alias
    return ref


def add_library(
    doc: Any,
    coordinate: Coordinate,
    version: str,
    alias: Optional[str] = None,
    version_alias: Optional[str] = None,
) -> AddResult:
    """Insert a library entry and its version alias into ``doc``.

    Raises:
        ValidationError: when the alias or the coordinate is already declared.
    """
    alias = sanitize_alias(alias) if alias else library_alias(coordinate.group, coordinate.artifact)
    version_alias = sanitize_alias(version_alias) if version_alias else library_version_alias(coordinate.group)

    if not alias or not version_alias:
        raise ValidationError(f"Cannot derive an alias for '{coordinate}'; pass one explicitly")

    versions = ensure_section(doc, CatalogSections.VERSIONS)
    libraries = ensure_section(doc, CatalogSections.LIBRARIES)
    if alias in libraries:
        raise ValidationError(f"Library alias '{alias}' already exists in [libraries]")
    if library_exists(libraries, coordinate):
        raise ValidationError(f"Library '{coordinate}' already exists in [libraries]")

    updated = upsert_version_alias(versions, version_alias, version)

    entry = tomlkit.inline_table()
    entry["module"] = str(coordinate)
    entry["version"] = _version_ref(version_alias)
    libraries[alias] = entry
    return AddResult(AddTarget.LIBRARY, alias, version_alias, version, updated)


def add_plugin(
    doc: Any,
    plugin_id: str,
    version: str,
    alias: Optional[str] = None,
    version_alias: Optional[str] = None,
) -> AddResult:
    """Insert a plugin entry and its version alias into ``doc``.

    Raises:
        ValidationError: when the alias or the plugin id is already declared.
    """
    alias = sanitize_alias(alias) if alias else plugin_alias(plugin_id)
    version_alias = sanitize_alias(version_alias) if version_alias else plugin_version_alias(plugin_id)

    if not alias or not version_alias:
        raise ValidationError(f"Cannot derive an alias for plugin '{plugin_id}'; pass one explicitly")

    versions = ensure_section(doc, CatalogSections.VERSIONS)
    plugins = ensure_section(doc, CatalogSections.PLUGINS)
    if alias in plugins:
        raise ValidationError(f"Plugin alias '{alias}' already exists in [plugins]")
    if plugin_exists(plugins, plugin_id):
        raise ValidationError(f"Plugin '{plugin_id}' already exists in [plugins]")

    updated = upsert_version_alias(versions, version_alias, version)

    entry = tomlkit.inline_table()
    entry["id"] = plugin_id
    entry["version"] = _version_ref(version_alias)
    plugins[alias] = entry
    return AddResult(AddTarget.PLUGIN, alias, version_alias, version, updated)


def resolve_version(
    client: RepositoryClient,
    coordinate: Coordinate,
    requested: Optional[str],
    stable_only: bool = False,
) -> str:
    """Check a requested version exists remotely, or pick the newest one.

    Raises:
        ValidationError: when the version is unknown or nothing is published.
    """
    if requested is None:
        latest = client.fetch_latest_version(coordinate, stable_only)
        if latest is None:
            raise ValidationError(f"No versions of '{coordinate}' found in the configured repositories")
        logger.info("Resolved %s to %s", coordinate, latest)
        return latest

    available = client.fetch_available_versions(coordinate)
    if requested not in available:
        raise ValidationError(
            f"Version '{requested}' for '{coordinate}' not found in the configured repositories"
        )
    if not Version.parse(requested).is_stable:
        logger.warning("%s %s is a pre-release", coordinate, requested)
    return requested


class CatalogEditor:
    """File-level add: load, insert, save."""

    def __init__(self, catalog_path: PathLike):
        self.catalog_path = catalog_path

    def add_library(self, coordinate: Coordinate, version: str,
                    alias: Optional[str] = None, version_alias: Optional[str] = None) -> AddResult:
        doc = load_catalog(self.catalog_path)
        result = add_library(doc, coordinate, version, alias, version_alias)
        save_catalog(self.catalog_path, doc)
        return result

    def add_plugin(self, plugin_id: str, version: str,
                   alias: Optional[str] = None, version_alias: Optional[str] = None) -> AddResult:
        doc = load_catalog(self.catalog_path)
        result = add_plugin(doc, plugin_id, version, alias, version_alias)
        save_catalog(self.catalog_path, doc)
        return result
