"""Repository discovery from Gradle build scripts.

This is a text scan, not a Gradle evaluation: well-known repository calls
and literal ``maven`` URLs are recognised, everything else is ignored.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from gvc.constants import Constants
from gvc.registry.models import Repository, default_repositories

logger = logging.getLogger(__name__)

# Kotlin DSL: maven { url = uri("...") } and maven("...")
KOTLIN_MAVEN_URI = re.compile(r"""maven\s*\{\s*url\s*=\s*uri\s*\(\s*["']([^"']+)["']\s*\)\s*\}""")
KOTLIN_MAVEN_CALL = re.compile(r"""maven\s*\(\s*["']([^"']+)["']\s*\)""")
# Groovy DSL: maven { url '...' } and maven { url = '...' }
GROOVY_MAVEN_URL = re.compile(r"""maven\s*\{\s*url\s+['"]([^'"]+)['"]""")
GROOVY_MAVEN_URL_EQUALS = re.compile(r"""maven\s*\{\s*url\s*=\s*['"]([^'"]+)['"]""")


@dataclass
class GradleConfig:
    repositories: List[Repository] = field(default_factory=list)


def shorten_url(url: str) -> str:
    """Host part of ``url`` for display."""
    if "://" not in url:
        return url
    return url.split("://", 1)[1].split("/", 1)[0]


def _custom(url: str) -> Repository:
    return Repository(name=f"Custom ({shorten_url(url)})", url=url)


def _maven_central() -> Repository:
    return Repository(name="Maven Central", url=Constants.MAVEN_CENTRAL_URL)


def _google() -> Repository:
    return Repository(
        name="Google Maven",
        url=Constants.GOOGLE_MAVEN_URL,
        group_filters=list(Constants.GOOGLE_GROUP_FILTERS),
    )


def extract_repositories_kotlin(content: str) -> List[Repository]:
    repositories = []
    if "mavenCentral()" in content:
        repositories.append(_maven_central())
    if "google()" in content:
        repositories.append(_google())
    if "gradlePluginPortal()" in content:
        repositories.append(Repository(name="Gradle Plugin Portal", url=Constants.PLUGIN_PORTAL_URL))
    for regex in (KOTLIN_MAVEN_URI, KOTLIN_MAVEN_CALL):
        repositories.extend(_custom(m.group(1)) for m in regex.finditer(content))
    return repositories


def extract_repositories_groovy(content: str) -> List[Repository]:
    repositories = []
    if "mavenCentral()" in content:
        repositories.append(_maven_central())
    if "google()" in content:
        repositories.append(_google())
    if "jcenter()" in content:
        repositories.append(Repository(name="JCenter (Deprecated)", url=Constants.JCENTER_URL))
    for regex in (GROOVY_MAVEN_URL, GROOVY_MAVEN_URL_EQUALS):
        repositories.extend(_custom(m.group(1)) for m in regex.finditer(content))
    return repositories


def deduplicate_repositories(repositories: List[Repository]) -> List[Repository]:
    """Keep the first repository per URL, ignoring trailing slashes."""
    seen = set()
    unique = []
    for repo in repositories:
        url = repo.url.rstrip("/")
        if url in seen:
            continue
        seen.add(url)
        unique.append(Repository(name=repo.name, url=url, group_filters=list(repo.group_filters)))
    return unique


class GradleConfigParser:
    """Collects repositories declared in a project's settings and build scripts."""

    def __init__(self, project_path: Union[str, Path]):
        self.project_path = Path(project_path)

    def parse(self) -> GradleConfig:
        repositories: List[Repository] = []
        for script in Constants.BUILD_SCRIPTS:
            path = self.project_path / script
            if not path.is_file():
                continue
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Could not read %s: %s", path, exc)
                continue
            if script.endswith(".kts"):
                found = extract_repositories_kotlin(content)
            else:
                found = extract_repositories_groovy(content)
            logger.debug("Found %d repositories in %s", len(found), script)
            repositories.extend(found)

        if not repositories:
            logger.warning("No repositories found in Gradle config, using defaults")
            repositories = default_repositories()

        return GradleConfig(repositories=deduplicate_repositories(repositories))
