"""Top-level update entry points.

Each file-level call loads the catalog fresh, runs the handlers against the
in-memory document and writes it back once at the end, only when something
changed. Any exception raised while handling entries (including user
cancellation) escapes before the write, leaving the file untouched.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from gvc.catalog.document import PathLike, load_catalog, save_catalog
from gvc.registry import factory
from gvc.registry.base import RepositoryClient
from gvc.registry.models import Repository
from gvc.versioning.strategy import DefaultVersionStrategy, VersionStrategy

from .handlers import LibraryAdapter, PluginAdapter, SectionHandler, VersionAliasAdapter
from .interaction import Echo, Prompt, UpdateInteraction
from .report import UpdateReport
from .targeted import TargetedHandler

logger = logging.getLogger(__name__)


class DependencyUpdater:
    """Checks and updates a version catalog against remote repositories."""

    def __init__(
        self,
        library_client: RepositoryClient,
        plugin_client: RepositoryClient,
        strategy: Optional[VersionStrategy] = None,
        *,
        prompt: Prompt = input,
        echo: Echo = print,
    ):
        self.library_client = library_client
        self.plugin_client = plugin_client
        self.strategy = strategy or DefaultVersionStrategy()
        self._prompt = prompt
        self._echo = echo

    @classmethod
    def with_repositories(
        cls,
        repositories: Optional[Sequence[Repository]] = None,
        *,
        timeout: Optional[float] = None,
        max_bytes: Optional[int] = None,
        **kwargs: Any,
    ) -> "DependencyUpdater":
        """Build an updater with Maven and Plugin Portal clients.

        Raises:
            InsecureRepositoryError: if a repository URL is rejected.
        """
        return cls(
            factory.create_maven(repositories, timeout=timeout, max_bytes=max_bytes),
            factory.create_plugin_portal(timeout=timeout, max_bytes=max_bytes),
            **kwargs,
        )

    def _interaction(self, interactive: bool) -> UpdateInteraction:
        return UpdateInteraction(interactive, prompt=self._prompt, echo=self._echo)

    def _section_handlers(self, interaction: UpdateInteraction):
        return [
            SectionHandler(VersionAliasAdapter(self.library_client), self.strategy, interaction),
            SectionHandler(LibraryAdapter(self.library_client), self.strategy, interaction),
            SectionHandler(PluginAdapter(self.plugin_client), self.strategy, interaction),
        ]

    def _run_sections(self, doc: Any, stable_only: bool, interactive: bool, apply: bool) -> UpdateReport:
        interaction = self._interaction(interactive)
        report = UpdateReport()
        for handler in self._section_handlers(interaction):
            report.merge(handler.run(doc, stable_only, apply))
        return report

    # Document-level operations

    def check_document(self, doc: Any, stable_only: bool) -> UpdateReport:
        """Report available updates without touching ``doc``."""
        return self._run_sections(doc, stable_only, interactive=False, apply=False)

    def update_document(self, doc: Any, stable_only: bool, interactive: bool = False) -> UpdateReport:
        """Apply updates to ``doc`` in place: aliases, then libraries, then plugins."""
        return self._run_sections(doc, stable_only, interactive, apply=True)

    def update_targeted(
        self, doc: Any, stable_only: bool, interactive: bool, pattern: str
    ) -> UpdateReport:
        """Update the single entry selected by ``pattern`` in place."""
        handler = TargetedHandler(
            self.library_client,
            self.plugin_client,
            self.strategy,
            self._interaction(interactive),
        )
        return handler.update(doc, stable_only, pattern)

    # File-level operations

    def check_for_updates(self, path: PathLike, stable_only: bool = False) -> UpdateReport:
        """Dry run over the catalog at ``path``; never writes."""
        doc = load_catalog(path)
        report = self.check_document(doc, stable_only)
        logger.info("Found %d available update(s)", report.total_updates())
        return report

    def update_version_catalog(
        self, path: PathLike, stable_only: bool = False, interactive: bool = False
    ) -> UpdateReport:
        """Update every section of the catalog at ``path`` and save it if changed."""
        doc = load_catalog(path)
        report = self.update_document(doc, stable_only, interactive)
        self._save_if_changed(path, doc, report)
        return report

    def update_targeted_dependency(
        self,
        path: PathLike,
        stable_only: bool = False,
        interactive: bool = False,
        pattern: str = "",
    ) -> UpdateReport:
        """Update the entry matching ``pattern`` in the catalog at ``path``."""
        doc = load_catalog(path)
        report = self.update_targeted(doc, stable_only, interactive, pattern)
        self._save_if_changed(path, doc, report)
        return report

    @staticmethod
    def _save_if_changed(path: PathLike, doc: Any, report: UpdateReport) -> None:
        if report.is_empty():
            logger.info("No updates applied; catalog left unchanged")
            return
        save_catalog(path, doc)
        logger.info("Wrote %d update(s) to %s", report.total_updates(), path)
