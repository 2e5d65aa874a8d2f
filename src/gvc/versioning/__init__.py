"""Version parsing, ordering and upgrade policy."""

from .version import Version, VersionKind, latest, is_upgrade
from .strategy import VersionStrategy, DefaultVersionStrategy

__all__ = [
    "Version",
    "VersionKind",
    "latest",
    "is_upgrade",
    "VersionStrategy",
    "DefaultVersionStrategy",
]
