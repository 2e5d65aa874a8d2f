"""Remote package index clients."""

from .models import Coordinate, Repository, default_repositories
from .base import RepositoryClient
from .maven import MavenRepositoryClient
from .plugin_portal import PluginPortalClient

__all__ = [
    "Coordinate",
    "Repository",
    "default_repositories",
    "RepositoryClient",
    "MavenRepositoryClient",
    "PluginPortalClient",
]
