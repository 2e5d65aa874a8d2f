"""Abstract repository client contract."""

from abc import ABC, abstractmethod
from typing import List, Optional

from .models import Coordinate


class RepositoryClient(ABC):
    """Ask a coordinate, get versions."""

    @abstractmethod
    def fetch_available_versions(self, coordinate: Coordinate) -> List[str]:
        """Return every known version, newest first, without duplicates."""

    @abstractmethod
    def fetch_latest_version(self, coordinate: Coordinate, stable_only: bool) -> Optional[str]:
        """Return the best version or None when nothing is available."""
