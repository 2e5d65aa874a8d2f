"""Construction of the repository clients used by the updater."""

from typing import Optional, Sequence

from .base import RepositoryClient
from .maven import MavenRepositoryClient
from .models import Repository
from .plugin_portal import PluginPortalClient


def create_maven(
    repositories: Optional[Sequence[Repository]] = None,
    *,
    timeout: Optional[float] = None,
    max_bytes: Optional[int] = None,
) -> RepositoryClient:
    """Library client over the given repositories (defaults when empty)."""
    return MavenRepositoryClient(repositories, timeout=timeout, max_bytes=max_bytes)


def create_plugin_portal(
    *,
    timeout: Optional[float] = None,
    max_bytes: Optional[int] = None,
) -> RepositoryClient:
    """Plugin client targeting the Gradle Plugin Portal."""
    return PluginPortalClient(timeout=timeout, max_bytes=max_bytes)
