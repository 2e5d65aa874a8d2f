"""Per-section update handlers.

All three sections go through one loop, ``SectionHandler.run``; what differs
between them (where the current version comes from, which coordinate to ask
about, how to write the result back) lives in a small ``SectionAdapter``.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple

from gvc.catalog import entries
from gvc.constants import CatalogSections
from gvc.registry.base import RepositoryClient
from gvc.registry.models import Coordinate
from gvc.versioning.strategy import VersionStrategy

from .interaction import UpdateCategory, UpdateInteraction
from .report import UpdateReport

logger = logging.getLogger(__name__)

Target = Tuple[Coordinate, str]


class SectionAdapter(ABC):
    """Section-specific behaviour plugged into the generic handler."""

    section: CatalogSections
    category: UpdateCategory

    def __init__(self, client: RepositoryClient):
        self.client = client

    @abstractmethod
    def target(self, doc: Any, name: str, item: Any) -> Optional[Target]:
        """Coordinate to query and current literal version, or None to skip."""

    @abstractmethod
    def apply(self, table: Any, name: str, new_version: str) -> bool:
        """Write ``new_version`` into ``table[name]``."""


class VersionAliasAdapter(SectionAdapter):
    """``[versions]``: an alias is checked through the first library using it.

    Aliases that no library references are never checked.
    """

    section = CatalogSections.VERSIONS
    category = UpdateCategory.VERSION

    def target(self, doc: Any, name: str, item: Any) -> Optional[Target]:
        if not isinstance(item, str):
            return None
        representative = entries.find_representative(doc, name)
        if representative is None:
            logger.debug("Version alias %s is not referenced by any library; skipping", name)
            return None
        return representative, str(item)

    def apply(self, table: Any, name: str, new_version: str) -> bool:
        return entries.mutate_alias(table, name, new_version)


class LibraryAdapter(SectionAdapter):
    """``[libraries]``: entries pointing at an alias are left to the alias."""

    section = CatalogSections.LIBRARIES
    category = UpdateCategory.LIBRARY

    def target(self, doc: Any, name: str, item: Any) -> Optional[Target]:
        library = entries.read_library(name, item)
        if library is None or not isinstance(library.version, entries.LiteralVersion):
            return None
        return library.coordinate, library.version.value

    def apply(self, table: Any, name: str, new_version: str) -> bool:
        return entries.mutate_version(table, name, new_version)


class PluginAdapter(SectionAdapter):
    """``[plugins]``: looked up by plugin id on the plugin client."""

    section = CatalogSections.PLUGINS
    category = UpdateCategory.PLUGIN

    def target(self, doc: Any, name: str, item: Any) -> Optional[Target]:
        plugin = entries.read_plugin(name, item)
        if plugin is None or not isinstance(plugin.version, entries.LiteralVersion):
            return None
        return Coordinate.plugin(plugin.plugin_id), plugin.version.value

    def apply(self, table: Any, name: str, new_version: str) -> bool:
        return entries.mutate_version(table, name, new_version, plugin=True)


class SectionHandler:
    """Check, and optionally update, every entry of one section."""

    def __init__(
        self,
        adapter: SectionAdapter,
        strategy: VersionStrategy,
        interaction: UpdateInteraction,
    ):
        self.adapter = adapter
        self.strategy = strategy
        self.interaction = interaction

    def run(self, doc: Any, stable_only: bool, apply: bool) -> UpdateReport:
        """Walk the section in declaration order.

        With ``apply`` False nothing is confirmed or written and the report
        lists what would change.
        """
        report = UpdateReport()
        table = entries.section(doc, self.adapter.section)
        if table is None:
            return report

        names = [str(name) for name in table.keys()]
        logger.info("Checking %s updates (%d entries)...", self.adapter.section.value, len(names))

        for name in names:
            target = self.adapter.target(doc, name, table.get(name))
            if target is None:
                continue
            coordinate, current = target

            latest = self.adapter.client.fetch_latest_version(coordinate, stable_only)
            if latest is None:
                logger.debug("No versions found for %s (%s)", name, coordinate)
                continue
            if latest == current or not self.strategy.is_upgrade(current, latest):
                continue

            if apply:
                if not self.interaction.confirm(self.adapter.category, name, current, latest):
                    continue
                self.adapter.apply(table, name, latest)

            report.add(self.adapter.category, name, current, latest)

        return report
