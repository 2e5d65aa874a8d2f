"""Update orchestration over the three catalog sections."""

from .report import UpdateReport
from .interaction import UpdateCategory, UpdateInteraction
from .pattern import PatternMatcher
from .updater import DependencyUpdater

__all__ = [
    "UpdateReport",
    "UpdateCategory",
    "UpdateInteraction",
    "PatternMatcher",
    "DependencyUpdater",
]
