"""Maven repository client resolving versions from maven-metadata.xml.

Repositories are tried in the configured order. A repository whose group
filters do not match is skipped; the first repository returning a non-empty
version list wins and the others are never consulted. Network and parse
failures count as "no versions from this source".
"""
from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import List, Optional, Pattern, Sequence, Tuple

from gvc.common.http_client import robust_get
from gvc.common.logging_utils import extra_context, safe_url
from gvc.constants import Constants
from gvc.versioning.version import latest, sort_descending

from .base import RepositoryClient
from .models import Coordinate, Repository, default_repositories
from .validation import validate_repository_url

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_metadata_versions(text: str) -> List[str]:
    """Extract ``versioning/versions/version`` values from a metadata document.

    Raises:
        ET.ParseError: when the document is not well-formed XML.
    """
    root = ET.fromstring(text)
    versions: List[str] = []
    for element in root.iter():
        if _local_name(element.tag) != "versions":
            continue
        for child in element:
            if _local_name(child.tag) == "version" and child.text and child.text.strip():
                versions.append(child.text.strip())
    return versions


def metadata_url(base_url: str, coordinate: Coordinate) -> str:
    """Conventional metadata location for ``coordinate`` under ``base_url``."""
    group_path = coordinate.group.replace(".", "/")
    return f"{base_url.rstrip('/')}/{group_path}/{coordinate.artifact}/{Constants.METADATA_FILE}"


class MavenRepositoryClient(RepositoryClient):
    """Multi-source resolver over Maven-layout repositories."""

    def __init__(
        self,
        repositories: Optional[Sequence[Repository]] = None,
        *,
        timeout: Optional[float] = None,
        max_bytes: Optional[int] = None,
    ):
        """Validate every repository URL up front.

        Args:
            repositories: Ordered repositories; defaults to Maven Central and
                Google Maven when empty or None.
            timeout: Per-request timeout override.
            max_bytes: Response size ceiling override.

        Raises:
            InsecureRepositoryError: if any repository URL is not acceptable.
        """
        repos = list(repositories) if repositories else default_repositories()
        self.repositories: List[Repository] = []
        self._filters: List[Tuple[Repository, List[Pattern[str]]]] = []
        for repo in repos:
            checked = Repository(
                name=repo.name,
                url=validate_repository_url(repo.url),
                group_filters=list(repo.group_filters),
            )
            self.repositories.append(checked)
            self._filters.append((checked, self._compile_filters(checked)))
        self.timeout = timeout
        self.max_bytes = max_bytes

    @staticmethod
    def _compile_filters(repo: Repository) -> List[Pattern[str]]:
        compiled = []
        for pattern in repo.group_filters:
            try:
                compiled.append(re.compile(pattern))
            except re.error as exc:
                logger.warning("Ignoring invalid group filter %r for %s: %s", pattern, repo.name, exc)
        return compiled

    @staticmethod
    def _matches_filters(group: str, repo: Repository, filters: List[Pattern[str]]) -> bool:
        if not repo.group_filters:
            return True
        return any(f.search(group) for f in filters)

    def lookup_coordinate(self, coordinate: Coordinate) -> Coordinate:
        """Map a caller coordinate to the coordinate stored in the repository."""
        return coordinate

    def fetch_versions_from_repository(self, repo: Repository, coordinate: Coordinate) -> List[str]:
        """Fetch versions from one repository; [] on any failure."""
        url = metadata_url(repo.url, coordinate)
        status_code, _, text = robust_get(url, timeout=self.timeout, max_bytes=self.max_bytes)
        if status_code != 200 or not text:
            logger.debug(
                "No metadata from repository",
                extra=extra_context(
                    event="metadata_fetch",
                    component="maven",
                    outcome="unavailable",
                    status_code=status_code,
                    target=safe_url(url)
                )
            )
            return []
        try:
            return parse_metadata_versions(text)
        except ET.ParseError:
            logger.debug(
                "Malformed metadata",
                extra=extra_context(
                    event="metadata_parse",
                    component="maven",
                    outcome="parse_error",
                    target=safe_url(url)
                )
            )
            return []

    def _first_available(self, coordinate: Coordinate) -> List[str]:
        target = self.lookup_coordinate(coordinate)
        for repo, filters in self._filters:
            if not self._matches_filters(target.group, repo, filters):
                continue
            versions = self.fetch_versions_from_repository(repo, target)
            if versions:
                logger.debug("Resolved %s from %s (%d versions)", target, repo.name, len(versions))
                return versions
        return []

    def fetch_available_versions(self, coordinate: Coordinate) -> List[str]:
        return sort_descending(self._first_available(coordinate))

    def fetch_latest_version(self, coordinate: Coordinate, stable_only: bool) -> Optional[str]:
        versions = self._first_available(coordinate)
        if not versions:
            return None
        return latest(versions, stable_only)
