"""Comparable, classifiable version values.

A version string is classified, in this order, as strict SemVer, a Maven-style
``-SNAPSHOT``, a purely numeric dotted sequence, or unrecognized. Parsing is
total: every string yields a Version.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, Optional, Tuple, Union

import semantic_version

from gvc.constants import Constants

_NUMERIC_PART = re.compile(r"[0-9]+")


class VersionKind(Enum):
    """Classification tag of a parsed version."""
    SEMANTIC = "semantic"
    NUMERIC = "numeric"
    SNAPSHOT = "snapshot"
    UNKNOWN = "unknown"


def _parse_numeric(text: str) -> Optional[Tuple[int, ...]]:
    parts = text.split(".")
    if not all(_NUMERIC_PART.fullmatch(part) for part in parts):
        return None
    return tuple(int(part) for part in parts)


class Version:
    """Immutable version value: original text plus its classification.

    Equality and hashing use the original text. Ordering:

    - SemVer vs SemVer: SemVer precedence.
    - Numeric vs Numeric: element-wise, then by length ("1.0" < "1.0.0").
    - A snapshot sorts below every non-snapshot.
    - Any other pairing compares the original text lexicographically.

    Ties under the first two rules fall back to the text as well, so two
    versions compare equal only when their text is identical.
    """

    __slots__ = ("_original", "_kind", "_parsed")

    def __init__(self, original: str, kind: VersionKind,
                 parsed: Union[semantic_version.Version, Tuple[int, ...], str]):
        self._original = original
        self._kind = kind
        self._parsed = parsed

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse ``text``; never fails."""
        try:
            return cls(text, VersionKind.SEMANTIC, semantic_version.Version(text))
        except ValueError:
            pass
        if text.endswith(Constants.SNAPSHOT_SUFFIX):
            return cls(text, VersionKind.SNAPSHOT, text)
        numeric = _parse_numeric(text)
        if numeric is not None:
            return cls(text, VersionKind.NUMERIC, numeric)
        return cls(text, VersionKind.UNKNOWN, text)

    @property
    def original(self) -> str:
        return self._original

    @property
    def kind(self) -> VersionKind:
        return self._kind

    @property
    def parsed(self):
        """SemVer object, integer tuple, or the raw text, depending on kind."""
        return self._parsed

    @property
    def is_stable(self) -> bool:
        """False for pre-release, snapshot and development builds."""
        lower = self._original.lower()
        if any(marker in lower for marker in Constants.UNSTABLE_MARKERS):
            return False
        if self._kind is VersionKind.SEMANTIC:
            return not self._parsed.prerelease
        return self._kind is not VersionKind.SNAPSHOT

    def compare(self, other: "Version") -> int:
        """Three-way comparison: negative, zero or positive."""
        if self._original == other._original:
            return 0

        a_kind, b_kind = self._kind, other._kind
        if a_kind is VersionKind.SEMANTIC and b_kind is VersionKind.SEMANTIC:
            if self._parsed < other._parsed:
                return -1
            if other._parsed < self._parsed:
                return 1
        elif a_kind is VersionKind.NUMERIC and b_kind is VersionKind.NUMERIC:
            for a_part, b_part in zip(self._parsed, other._parsed):
                if a_part != b_part:
                    return -1 if a_part < b_part else 1
            if len(self._parsed) != len(other._parsed):
                return -1 if len(self._parsed) < len(other._parsed) else 1
        elif a_kind is VersionKind.SNAPSHOT and b_kind is not VersionKind.SNAPSHOT:
            return -1
        elif b_kind is VersionKind.SNAPSHOT and a_kind is not VersionKind.SNAPSHOT:
            return 1

        return -1 if self._original < other._original else 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._original == other._original

    def __hash__(self) -> int:
        return hash(self._original)

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) >= 0

    def __str__(self) -> str:
        return self._original

    def __repr__(self) -> str:
        return f"Version({self._original!r}, {self._kind.value})"


def latest(versions: Iterable[str], stable_only: bool = False) -> Optional[str]:
    """Return the greatest version text, or None when nothing qualifies."""
    parsed = [Version.parse(v) for v in versions]
    if stable_only:
        parsed = [v for v in parsed if v.is_stable]
    if not parsed:
        return None
    return max(parsed).original


def is_upgrade(current: str, candidate: str) -> bool:
    """True when ``candidate`` sorts strictly above ``current``."""
    return Version.parse(candidate) > Version.parse(current)


def sort_descending(versions: Iterable[str]) -> list:
    """Deduplicate by literal text and sort from newest to oldest."""
    unique = {}
    for raw in versions:
        unique.setdefault(raw, Version.parse(raw))
    return [v.original for v in sorted(unique.values(), reverse=True)]
