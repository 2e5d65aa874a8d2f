"""Data models for repository lookups."""

from dataclasses import dataclass, field
from typing import List

from gvc.constants import Constants


@dataclass(frozen=True)
class Coordinate:
    """Lookup key: (group, artifact). Plugins use their id for both."""
    group: str
    artifact: str

    @classmethod
    def plugin(cls, plugin_id: str) -> "Coordinate":
        return cls(group=plugin_id, artifact=plugin_id)

    def __str__(self) -> str:
        return f"{self.group}:{self.artifact}"


@dataclass
class Repository:
    """A remote Maven-layout repository.

    ``group_filters`` are regular expressions searched in a coordinate's
    group; an empty list accepts every group.
    """
    name: str
    url: str
    group_filters: List[str] = field(default_factory=list)


def default_repositories() -> List[Repository]:
    """Repositories used when a project declares none."""
    return [
        Repository(name="Maven Central", url=Constants.MAVEN_CENTRAL_URL),
        Repository(
            name="Google Maven",
            url=Constants.GOOGLE_MAVEN_URL,
            group_filters=list(Constants.GOOGLE_GROUP_FILTERS),
        ),
    ]
