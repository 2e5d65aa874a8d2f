"""Command workflows: validate the project, resolve repositories, run, print."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

from gvc.catalog import editor, entries
from gvc.catalog.document import load_catalog
from gvc.config import GvcConfig
from gvc.errors import ValidationError
from gvc.project.gradle_config import GradleConfigParser
from gvc.project.scanner import ProjectInfo, ProjectScanner
from gvc.registry.models import Coordinate, Repository
from gvc.update.report import UpdateReport
from gvc.update.updater import DependencyUpdater
from gvc.versioning.version import Version

logger = logging.getLogger(__name__)

UpdaterFactory = Callable[[List[Repository]], DependencyUpdater]


def _default_updater(repositories: List[Repository]) -> DependencyUpdater:
    return DependencyUpdater.with_repositories(repositories)


def _validate(project_path: str) -> ProjectInfo:
    print("\n1. Validating project structure...")
    info = ProjectScanner(project_path).validate()
    print("✓ Project structure is valid")
    return info


def resolve_repositories(info: ProjectInfo, config: GvcConfig) -> List[Repository]:
    """Repositories from the config file, else from the project's build scripts."""
    if config.repositories:
        logger.info("Using %d repositories from %s", len(config.repositories), config.source)
        return list(config.repositories)
    return GradleConfigParser(info.project_path).parse().repositories


def _print_repositories(repositories: List[Repository]) -> None:
    print(f"\n2. Using {len(repositories)} repositories:")
    for repo in repositories:
        print(f"   • {repo.name} ({repo.url})")


def _stability(version: str) -> str:
    return "stable" if Version.parse(version).is_stable else "pre-release"


def _print_changes(title: str, changes: Dict[str, Tuple[str, str]], with_stability: bool = False) -> None:
    if not changes:
        return
    print(f"\n{title}:")
    for name, (old, new) in changes.items():
        suffix = f" ({_stability(new)})" if with_stability else ""
        print(f"  • {name} {old} → {new}{suffix}")


def print_update_report(report: UpdateReport) -> None:
    if report.is_empty():
        print("\nNo updates were applied")
        return
    print("\nUpdate Summary:")
    print(f"Applied {report.total_updates()} update(s)")
    _print_changes("Version updates", report.version_updates)
    _print_changes("Library updates", report.library_updates)
    _print_changes("Plugin updates", report.plugin_updates)


def print_available_updates(report: UpdateReport, stable_only: bool) -> None:
    if report.is_empty():
        print("\n✨ All dependencies are up to date!")
        return
    print("\n📦 Available Updates:")
    print(f"Found {report.total_updates()} update(s)")
    if stable_only:
        print("   (showing stable versions only)")
    else:
        print("   (showing all versions including pre-releases)")
    _print_changes("Version updates", report.version_updates, with_stability=True)
    _print_changes("Library updates", report.library_updates, with_stability=True)
    _print_changes("Plugin updates", report.plugin_updates, with_stability=True)
    print("\nTo apply these updates, run:")
    print("  gvc update --stable-only" if stable_only else "  gvc update")


def execute_update(
    project_path: str,
    config: GvcConfig,
    *,
    stable_only: bool = False,
    interactive: bool = False,
    pattern: Optional[str] = None,
    updater_factory: Optional[UpdaterFactory] = None,
) -> UpdateReport:
    """Update the project's catalog, either fully or for one filtered entry."""
    print("Starting dependency update process...")
    info = _validate(project_path)
    repositories = resolve_repositories(info, config)
    _print_repositories(repositories)

    updater = (updater_factory or _default_updater)(repositories)
    print("\n3. Updating dependencies...")
    if pattern:
        report = updater.update_targeted_dependency(info.toml_path, stable_only, interactive, pattern)
    else:
        report = updater.update_version_catalog(info.toml_path, stable_only, interactive)
    print("✓ Update completed")
    print_update_report(report)
    return report


def execute_check(
    project_path: str,
    config: GvcConfig,
    *,
    stable_only: bool = False,
    updater_factory: Optional[UpdaterFactory] = None,
) -> UpdateReport:
    """Report available updates without writing the catalog."""
    print("Checking for available updates...")
    info = _validate(project_path)
    repositories = resolve_repositories(info, config)
    _print_repositories(repositories)

    updater = (updater_factory or _default_updater)(repositories)
    print("\n3. Checking for available updates...")
    report = updater.check_for_updates(info.toml_path, stable_only)
    print("✓ Check completed")
    print_available_updates(report, stable_only)
    return report


def _library_line(library: entries.LibraryEntry, aliases: Dict[str, str]) -> str:
    slot = library.version
    if isinstance(slot, entries.LiteralVersion):
        return f"{library.coordinate}:{slot.value}"
    if isinstance(slot, entries.VersionReference):
        return f"{library.coordinate}:{aliases.get(slot.alias, '${' + slot.alias + '}')}"
    return f"{library.coordinate} (version unknown)"


def _plugin_line(plugin: entries.PluginEntry, aliases: Dict[str, str]) -> str:
    slot = plugin.version
    if isinstance(slot, entries.LiteralVersion):
        return f"{plugin.plugin_id}:{slot.value}"
    if isinstance(slot, entries.VersionReference):
        return f"{plugin.plugin_id}:{aliases.get(slot.alias, '${' + slot.alias + '}')}"
    return f"{plugin.plugin_id} (version unknown)"


def execute_list(project_path: str) -> None:
    """Print aliases, libraries and plugins sorted by entry name."""
    print("Listing catalog dependencies...")
    info = _validate(project_path)
    print("\n2. Reading version catalog...")
    doc = load_catalog(info.toml_path)
    print("✓ Catalog loaded")

    aliases = {alias.name: alias.value for alias in entries.iter_aliases(doc)}
    print("\n📦 Dependencies:")

    if aliases:
        print("\nVersions:")
        for name in sorted(aliases):
            print(f"  {name} = {aliases[name]}")

    libraries = sorted(entries.iter_libraries(doc), key=lambda pair: pair[0])
    if libraries:
        print("\nLibraries:")
        for name, item in libraries:
            library = entries.read_library(name, item)
            if library is None:
                print(f"  {name} (coordinate unknown)")
            else:
                print(f"  {_library_line(library, aliases)}")

    plugins = sorted(entries.iter_plugins(doc), key=lambda pair: pair[0])
    if plugins:
        print("\nPlugins:")
        for name, item in plugins:
            plugin = entries.read_plugin(name, item)
            if plugin is None:
                print(f"  {name} (id unknown)")
            else:
                print(f"  {_plugin_line(plugin, aliases)}")

    print("\nSummary:")
    print(f"  {len(aliases)} versions")
    print(f"  {len(libraries)} libraries")
    print(f"  {len(plugins)} plugins")


def print_add_result(result: editor.AddResult) -> None:
    if result.alias_updated:
        print(f"   Set version alias '{result.version_alias}' to '{result.version}'")
    kind = "Library" if result.target is editor.AddTarget.LIBRARY else "Plugin"
    print(f"✓ {kind} '{result.alias}' added with version alias '{result.version_alias}'")


def execute_add(
    project_path: str,
    config: GvcConfig,
    coordinate: str,
    *,
    plugin: bool = False,
    alias: Optional[str] = None,
    version_alias: Optional[str] = None,
    stable_only: bool = False,
    updater_factory: Optional[UpdaterFactory] = None,
) -> editor.AddResult:
    """Add a library or plugin, checking or resolving its version remotely."""
    if not coordinate.strip():
        raise ValidationError("Coordinate is required. Example: gvc add group:artifact:version")

    print("Adding entry to Gradle version catalog...")
    info = _validate(project_path)
    if plugin:
        plugin_id, requested = editor.parse_plugin_coordinate(coordinate)
        lookup = Coordinate.plugin(plugin_id)
        label = f"plugin {plugin_id}"
    else:
        group, artifact, requested = editor.parse_library_coordinate(coordinate)
        lookup = Coordinate(group, artifact)
        label = str(lookup)

    repositories = resolve_repositories(info, config)
    _print_repositories(repositories)
    updater = (updater_factory or _default_updater)(repositories)
    client = updater.plugin_client if plugin else updater.library_client

    print("\n3. Validating coordinate against remote repositories...")
    version = editor.resolve_version(client, lookup, requested, stable_only)
    print(f"   ✓ {label} @ {version}")

    print("\n4. Writing to version catalog...")
    catalog = editor.CatalogEditor(info.toml_path)
    if plugin:
        result = catalog.add_plugin(lookup.group, version, alias, version_alias)
    else:
        result = catalog.add_library(lookup, version, alias, version_alias)
    print_add_result(result)
    print("\n✨ Entry added successfully!")
    return result
