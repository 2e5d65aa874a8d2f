"""Summary of applied or proposed version changes."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from .interaction import UpdateCategory

Change = Tuple[str, str]


@dataclass
class UpdateReport:
    """Changes per section, keyed by entry name, as ``(old, new)`` pairs."""
    version_updates: Dict[str, Change] = field(default_factory=dict)
    library_updates: Dict[str, Change] = field(default_factory=dict)
    plugin_updates: Dict[str, Change] = field(default_factory=dict)

    def add_version_update(self, name: str, old: str, new: str) -> None:
        self.version_updates[name] = (old, new)

    def add_library_update(self, name: str, old: str, new: str) -> None:
        self.library_updates[name] = (old, new)

    def add_plugin_update(self, name: str, old: str, new: str) -> None:
        self.plugin_updates[name] = (old, new)

    def add(self, category: UpdateCategory, name: str, old: str, new: str) -> None:
        """Record a change under the section matching ``category``."""
        if category is UpdateCategory.VERSION:
            self.add_version_update(name, old, new)
        elif category is UpdateCategory.LIBRARY:
            self.add_library_update(name, old, new)
        else:
            self.add_plugin_update(name, old, new)

    def merge(self, other: "UpdateReport") -> None:
        self.version_updates.update(other.version_updates)
        self.library_updates.update(other.library_updates)
        self.plugin_updates.update(other.plugin_updates)

    def is_empty(self) -> bool:
        return not (self.version_updates or self.library_updates or self.plugin_updates)

    def total_updates(self) -> int:
        return len(self.version_updates) + len(self.library_updates) + len(self.plugin_updates)
