"""Gradle Plugin Portal client.

Plugin ids are published as marker artifacts: the id ``org.jetbrains.kotlin.jvm``
lives at ``org.jetbrains.kotlin.jvm:org.jetbrains.kotlin.jvm.gradle.plugin``.
"""
from __future__ import annotations

from typing import Optional, Sequence

from gvc.constants import Constants

from .maven import MavenRepositoryClient
from .models import Coordinate, Repository


class PluginPortalClient(MavenRepositoryClient):
    """Resolver for plugin marker artifacts."""

    def __init__(
        self,
        repositories: Optional[Sequence[Repository]] = None,
        *,
        timeout: Optional[float] = None,
        max_bytes: Optional[int] = None,
    ):
        repos = list(repositories) if repositories else [
            Repository(name="Gradle Plugin Portal", url=Constants.PLUGIN_PORTAL_URL)
        ]
        super().__init__(repos, timeout=timeout, max_bytes=max_bytes)

    def lookup_coordinate(self, coordinate: Coordinate) -> Coordinate:
        plugin_id = coordinate.group
        return Coordinate(group=plugin_id, artifact=f"{plugin_id}{Constants.PLUGIN_MARKER_SUFFIX}")
