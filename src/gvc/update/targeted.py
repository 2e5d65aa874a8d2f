"""Targeted, pattern-driven update of a single catalog entry."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from gvc.catalog import entries
from gvc.constants import CatalogSections, Constants
from gvc.errors import UnsupportedShapeError, UserCancelledError, ValidationError
from gvc.registry.base import RepositoryClient
from gvc.registry.models import Coordinate
from gvc.versioning.strategy import VersionStrategy
from gvc.versioning.version import Version

from .interaction import UpdateCategory, UpdateInteraction
from .pattern import PatternMatcher
from .report import UpdateReport

logger = logging.getLogger(__name__)


def _parse_choice(answer: str, upper: int) -> Optional[int]:
    """1-based menu number in ``1..upper``, or None."""
    try:
        choice = int(answer)
    except ValueError:
        return None
    return choice if 1 <= choice <= upper else None


class TargetKind(Enum):
    VERSION_ALIAS = "version alias"
    LIBRARY = "library"
    PLUGIN = "plugin"


@dataclass(frozen=True)
class TargetCandidate:
    name: str
    current_version: str
    kind: TargetKind
    coordinate: Coordinate

    @property
    def category(self) -> UpdateCategory:
        if self.kind is TargetKind.VERSION_ALIAS:
            return UpdateCategory.VERSION
        if self.kind is TargetKind.LIBRARY:
            return UpdateCategory.LIBRARY
        return UpdateCategory.PLUGIN

    def display_name(self) -> str:
        if self.kind is TargetKind.PLUGIN:
            return f"plugin '{self.name}' ({self.coordinate.group})"
        return f"{self.kind.value} '{self.name}' ({self.coordinate})"

    def describe_with_version(self) -> str:
        return f"{self.display_name()} - current version {self.current_version}"


@dataclass(frozen=True)
class VersionEntry:
    value: str
    is_stable: bool
    is_current: bool


class TargetedHandler:
    """Find entries by name pattern, pick one, pick a version, apply it."""

    def __init__(
        self,
        library_client: RepositoryClient,
        plugin_client: RepositoryClient,
        strategy: VersionStrategy,
        interaction: UpdateInteraction,
    ):
        self.library_client = library_client
        self.plugin_client = plugin_client
        self.strategy = strategy
        self.interaction = interaction

    def update(self, doc: Any, stable_only: bool, pattern: str) -> UpdateReport:
        """Run the targeted flow against ``doc``; the report is empty when nothing changes.

        Raises:
            InvalidPatternError: for an empty pattern.
            ValidationError: when several entries match and no one can choose.
            UserCancelledError: when the user quits at any prompt.
        """
        matcher = PatternMatcher(pattern)
        candidates = self.collect_candidates(doc, matcher)
        if not candidates:
            self.interaction.echo(f"No dependencies matched pattern '{pattern}'.")
            return UpdateReport()

        candidate = self.choose_candidate(candidates, pattern)

        version_entries = self.fetch_version_entries(candidate, stable_only)
        if not version_entries:
            self.interaction.echo(f"No versions found for {candidate.display_name()}.")
            return UpdateReport()

        if self.interaction.is_enabled():
            chosen = self.select_version(candidate, version_entries)
        else:
            chosen = self.auto_select_version(candidate, version_entries)
            if chosen is None:
                self.interaction.echo(
                    f"{candidate.display_name()} is already up to date ({candidate.current_version})."
                )
                return UpdateReport()

        if chosen == candidate.current_version:
            self.interaction.echo("Selected version matches the current version; nothing to update.")
            return UpdateReport()

        report = UpdateReport()
        self.apply_update(doc, candidate, chosen)
        report.add(candidate.category, candidate.name, candidate.current_version, chosen)
        self.interaction.echo(
            f"Updated {candidate.display_name()}: {candidate.current_version} -> {chosen}"
        )
        return report

    def collect_candidates(self, doc: Any, matcher: PatternMatcher) -> List[TargetCandidate]:
        """Matching entries across all sections, sorted by display name."""
        candidates: List[TargetCandidate] = []

        for name, item in entries.iter_libraries(doc):
            if not matcher.matches(name):
                continue
            library = entries.read_library(name, item)
            if library is not None and isinstance(library.version, entries.LiteralVersion):
                candidates.append(TargetCandidate(
                    name=name,
                    current_version=library.version.value,
                    kind=TargetKind.LIBRARY,
                    coordinate=library.coordinate,
                ))

        for alias in entries.iter_aliases(doc):
            if not matcher.matches(alias.name):
                continue
            representative = entries.find_representative(doc, alias.name)
            if representative is not None:
                candidates.append(TargetCandidate(
                    name=alias.name,
                    current_version=alias.value,
                    kind=TargetKind.VERSION_ALIAS,
                    coordinate=representative,
                ))

        for name, item in entries.iter_plugins(doc):
            if not matcher.matches(name):
                continue
            plugin = entries.read_plugin(name, item)
            if plugin is not None and isinstance(plugin.version, entries.LiteralVersion):
                candidates.append(TargetCandidate(
                    name=name,
                    current_version=plugin.version.value,
                    kind=TargetKind.PLUGIN,
                    coordinate=Coordinate.plugin(plugin.plugin_id),
                ))

        candidates.sort(key=lambda c: c.display_name())
        return candidates

    def choose_candidate(self, candidates: List[TargetCandidate], pattern: str) -> TargetCandidate:
        if len(candidates) == 1:
            self.interaction.echo(f"Found one match: {candidates[0].describe_with_version()}")
            return candidates[0]

        if not self.interaction.is_enabled():
            names = ", ".join(c.name for c in candidates)
            raise ValidationError(
                f"Pattern '{pattern}' matched {len(candidates)} entries ({names}); "
                "use a more specific pattern or interactive mode"
            )

        self.interaction.echo(f"Found {len(candidates)} matching dependencies:")
        for idx, candidate in enumerate(candidates, start=1):
            self.interaction.echo(f"  {idx:>2}) {candidate.describe_with_version()}")

        while True:
            answer = self.interaction.ask(
                f"Select dependency to update [1-{len(candidates)}] (or 'q' to cancel): "
            ).strip()
            if answer.lower() in ("q", "quit"):
                raise UserCancelledError()
            choice = _parse_choice(answer, len(candidates))
            if choice is not None:
                return candidates[choice - 1]
            self.interaction.echo("Invalid selection. Please try again.")

    def fetch_version_entries(self, candidate: TargetCandidate, stable_only: bool) -> List[VersionEntry]:
        """Available versions, newest first, minus unstable ones when asked."""
        client = self.plugin_client if candidate.kind is TargetKind.PLUGIN else self.library_client
        version_entries = []
        for raw in client.fetch_available_versions(candidate.coordinate):
            stable = Version.parse(raw).is_stable
            if stable_only and not stable:
                continue
            version_entries.append(VersionEntry(
                value=raw,
                is_stable=stable,
                is_current=raw == candidate.current_version,
            ))
        return version_entries

    def auto_select_version(
        self, candidate: TargetCandidate, version_entries: List[VersionEntry]
    ) -> Optional[str]:
        """First non-current entry, accepted only if it is an upgrade."""
        for entry in version_entries:
            if entry.is_current:
                continue
            if self.strategy.is_upgrade(candidate.current_version, entry.value):
                return entry.value
            logger.info(
                "%s is already at or above the newest available version %s",
                candidate.display_name(), entry.value,
            )
            return None
        return None

    def select_version(self, candidate: TargetCandidate, version_entries: List[VersionEntry]) -> str:
        """Let the user page through versions and pick one.

        Returns the current version when the user skips.
        """
        echo = self.interaction.echo
        echo(f"\nAvailable versions for {candidate.display_name()}:")
        page = Constants.VERSION_PAGE_SIZE
        limit = min(len(version_entries), page)

        while True:
            for idx, entry in enumerate(version_entries[:limit], start=1):
                labels = ["stable" if entry.is_stable else "pre-release"]
                if entry.is_current:
                    labels.append("current")
                echo(f"  {idx:>2}) {entry.value} ({', '.join(labels)})")
            if limit < len(version_entries):
                echo("  m ) Show more versions")
            echo("  s ) Skip update")
            echo("  q ) Cancel")

            answer = self.interaction.ask(f"Select version [1-{limit} | m/s/q]: ").strip().lower()
            if answer == "q":
                raise UserCancelledError()
            if answer == "s":
                return candidate.current_version
            if answer == "m":
                if limit >= len(version_entries):
                    echo("All versions are already displayed.")
                else:
                    limit = min(limit + page, len(version_entries))
                continue
            choice = _parse_choice(answer, limit)
            if choice is None:
                echo("Invalid selection. Please try again.")
                continue

            entry = version_entries[choice - 1]
            if entry.is_current:
                return entry.value
            if not self.strategy.is_upgrade(candidate.current_version, entry.value):
                echo(
                    f"Version {entry.value} is not a valid upgrade from "
                    f"{candidate.current_version}."
                )
                continue
            if self.interaction.confirm(
                candidate.category, candidate.display_name(), candidate.current_version, entry.value
            ):
                return entry.value

    def apply_update(self, doc: Any, candidate: TargetCandidate, new_version: str) -> None:
        if candidate.kind is TargetKind.VERSION_ALIAS:
            section_name = CatalogSections.VERSIONS
        elif candidate.kind is TargetKind.LIBRARY:
            section_name = CatalogSections.LIBRARIES
        else:
            section_name = CatalogSections.PLUGINS

        table = entries.section(doc, section_name)
        if table is None:
            raise UnsupportedShapeError(candidate.name, f"missing [{section_name.value}] section")

        if candidate.kind is TargetKind.VERSION_ALIAS:
            entries.mutate_alias(table, candidate.name, new_version)
        else:
            entries.mutate_version(
                table, candidate.name, new_version, plugin=candidate.kind is TargetKind.PLUGIN
            )
