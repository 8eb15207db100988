#!/usr/bin/env python3
"""String matching for file names and extensions.

This module provides the atomic predicate used by name, extension and
full-name conditions:
- Exact, contains, prefix and suffix matching
- Wildcard matching where ``*`` stands for any run of characters
- Case-sensitive and case-insensitive modes
- A persisted (dictionary) form that round-trips exactly

Example:
    >>> matcher = StringMatcher.wildcard("*.xcodeproj")
    >>> matcher.matches("App.xcodeproj")
    True
    >>> matcher.matches("App.xcworkspace")
    False
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Optional, Pattern

from topdrawer.core.constants import PersistedKey


class MatchStrategy(Enum):
    """How a StringMatcher compares its pattern with a value."""

    EXACT = "exact"  # Whole value equals the pattern
    CONTAINS = "contains"  # Pattern occurs anywhere in the value
    PREFIX = "prefix"  # Value starts with the pattern
    SUFFIX = "suffix"  # Value ends with the pattern
    WILDCARD = "wildcard"  # Whole value matches, * is any run of characters


@lru_cache(maxsize=1024)
def _compile_wildcard(pattern: str, case_sensitive: bool) -> Pattern[str]:
    """Compile a wildcard pattern into an anchored regex.

    Only ``*`` is special; everything else is escaped.

    Args:
        pattern: Wildcard pattern
        case_sensitive: Whether the regex should respect case

    Returns:
        Compiled regex matching the whole value
    """
    regex_pattern = ".*".join(re.escape(part) for part in pattern.split("*"))
    flags = re.DOTALL if case_sensitive else re.DOTALL | re.IGNORECASE
    return re.compile(regex_pattern, flags)


@dataclass(frozen=True)
class StringMatcher:
    """Immutable string predicate.

    Attributes:
        strategy: Matching strategy
        pattern: Literal pattern text
        case_sensitive: Whether comparison respects case
    """

    strategy: MatchStrategy
    pattern: str
    case_sensitive: bool = True

    def __post_init__(self):
        # Accepts the persisted strategy name; unknown names raise ValueError
        object.__setattr__(self, "strategy", MatchStrategy(self.strategy))
        if not isinstance(self.pattern, str):
            raise TypeError(f"Pattern must be a string, got {type(self.pattern).__name__}")
        if not isinstance(self.case_sensitive, bool):
            raise TypeError(
                f"case_sensitive must be a bool, got {type(self.case_sensitive).__name__}"
            )

    @classmethod
    def exact(cls, pattern: str, case_sensitive: bool = True) -> "StringMatcher":
        return cls(MatchStrategy.EXACT, pattern, case_sensitive)

    @classmethod
    def contains(cls, pattern: str, case_sensitive: bool = True) -> "StringMatcher":
        return cls(MatchStrategy.CONTAINS, pattern, case_sensitive)

    @classmethod
    def prefix(cls, pattern: str, case_sensitive: bool = True) -> "StringMatcher":
        return cls(MatchStrategy.PREFIX, pattern, case_sensitive)

    @classmethod
    def suffix(cls, pattern: str, case_sensitive: bool = True) -> "StringMatcher":
        return cls(MatchStrategy.SUFFIX, pattern, case_sensitive)

    @classmethod
    def wildcard(cls, pattern: str, case_sensitive: bool = True) -> "StringMatcher":
        return cls(MatchStrategy.WILDCARD, pattern, case_sensitive)

    @property
    def input_string(self) -> str:
        """The literal pattern, used for grouping and display."""
        return self.pattern

    @property
    def key(self) -> str:
        """Structural key: equal matchers and only equal matchers share it."""
        sensitivity = "cs" if self.case_sensitive else "ci"
        return f"{self.strategy.value}/{sensitivity}/{self.pattern!r}"

    def matches(self, value: str) -> bool:
        """Check if value matches.

        Args:
            value: String to test (a name, extension or full name)

        Returns:
            True if value matches the pattern under this strategy
        """
        if self.strategy is MatchStrategy.WILDCARD:
            return _compile_wildcard(self.pattern, self.case_sensitive).fullmatch(value) is not None

        pattern = self.pattern
        if not self.case_sensitive:
            pattern = pattern.lower()
            value = value.lower()

        if self.strategy is MatchStrategy.EXACT:
            return value == pattern
        elif self.strategy is MatchStrategy.CONTAINS:
            return pattern in value
        elif self.strategy is MatchStrategy.PREFIX:
            return value.startswith(pattern)
        elif self.strategy is MatchStrategy.SUFFIX:
            return value.endswith(pattern)

        raise ValueError(f"Unhandled match strategy: {self.strategy}")

    def to_persisted(self) -> Dict[str, Any]:
        """Persisted form: ``{"Strategy", "Pattern", "CaseSensitive"}``."""
        return {
            PersistedKey.STRATEGY: self.strategy.value,
            PersistedKey.PATTERN: self.pattern,
            PersistedKey.CASE_SENSITIVE: self.case_sensitive,
        }

    @classmethod
    def from_persisted(cls, data: Any) -> Optional["StringMatcher"]:
        """Restore a matcher from its persisted form.

        Args:
            data: Persisted dictionary

        Returns:
            StringMatcher, or None if the strategy is unknown or a field is
            missing or has the wrong type
        """
        if not isinstance(data, dict):
            return None

        try:
            strategy = MatchStrategy(data.get(PersistedKey.STRATEGY))
        except ValueError:
            return None

        pattern = data.get(PersistedKey.PATTERN)
        case_sensitive = data.get(PersistedKey.CASE_SENSITIVE)
        if not isinstance(pattern, str) or not isinstance(case_sensitive, bool):
            return None

        return cls(strategy, pattern, case_sensitive)
