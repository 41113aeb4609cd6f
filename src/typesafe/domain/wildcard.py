"""Glob-like name exceptions ("debug*", "legacy*Helper*")."""

import re
from collections.abc import Iterable
from functools import lru_cache


class WildcardMatcher:
    """Matches names against exception patterns where '*' means any run of characters."""

    @staticmethod
    def matches(name: str, patterns: Iterable[str]) -> bool:
        return any(WildcardMatcher.matches_one(name, pattern) for pattern in patterns)

    @staticmethod
    def matches_one(name: str, pattern: str) -> bool:
        if "*" not in pattern:
            return name == pattern
        compiled = WildcardMatcher._compile(pattern)
        return compiled is not None and compiled.match(name) is not None

    @staticmethod
    @lru_cache(maxsize=256)
    def _compile(pattern: str) -> re.Pattern[str] | None:
        regex = ".*".join(re.escape(part) for part in pattern.split("*"))
        try:
            return re.compile(regex)
        except re.error:
            return None
