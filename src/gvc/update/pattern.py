"""Glob-style name matching for targeted updates."""
from __future__ import annotations

import re

from gvc.errors import InvalidPatternError

_GLOB_CHARS = ("*", "?")


class PatternMatcher:
    """Case-insensitive, fully anchored glob matcher.

    ``*`` matches any run of characters and ``?`` a single one; everything
    else is literal. A pattern without glob characters is searched as a
    substring, i.e. ``okhttp`` behaves like ``*okhttp*``.
    """

    def __init__(self, pattern: str):
        trimmed = (pattern or "").strip()
        if not trimmed:
            raise InvalidPatternError("Filter pattern cannot be empty")
        if not any(ch in trimmed for ch in _GLOB_CHARS):
            trimmed = f"*{trimmed}*"
        self.pattern = trimmed
        self._regex = self.compile_glob(trimmed)

    @staticmethod
    def compile_glob(pattern: str) -> "re.Pattern[str]":
        parts = []
        for ch in pattern:
            if ch == "*":
                parts.append(".*")
            elif ch == "?":
                parts.append(".")
            else:
                parts.append(re.escape(ch))
        try:
            return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)
        except re.error as exc:
            raise InvalidPatternError(f"Invalid filter pattern '{pattern}': {exc}") from exc

    def matches(self, value: str) -> bool:
        return self._regex.fullmatch(value) is not None
