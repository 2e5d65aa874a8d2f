"""Upgrade policy kept behind a replaceable strategy object."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from .version import is_upgrade, latest


class VersionStrategy(ABC):
    """Decides which version is latest and whether a candidate is an upgrade."""

    @abstractmethod
    def select_latest(self, versions: Iterable[str], stable_only: bool) -> Optional[str]:
        """Return the preferred version from ``versions`` or None."""

    @abstractmethod
    def is_upgrade(self, current: str, candidate: str) -> bool:
        """Return True if moving from ``current`` to ``candidate`` is an upgrade."""


class DefaultVersionStrategy(VersionStrategy):
    """Strategy backed by the Version ordering."""

    def select_latest(self, versions: Iterable[str], stable_only: bool) -> Optional[str]:
        return latest(versions, stable_only)

    def is_upgrade(self, current: str, candidate: str) -> bool:
        return is_upgrade(current, candidate)
