#!/usr/bin/env python3
"""Conditions: typed predicates over a file and its hierarchy.

This module provides the closed set of condition cases a rule is built from:
- name / ext / full_name: a StringMatcher applied to one string attribute
- parent_contains / parent_doesnt_contain: a FolderContentsMatcher applied
  to the entry's parent directory
- hierarchy_contains: a HierarchyMatcher applied to the ancestor chain

Each case has a fixed cost rank. The rank only orders evaluation inside a
decision tree; it never changes what a condition matches.

Example:
    >>> condition = Condition.parent_contains(
    ...     FolderContentsMatcher(Condition.full_name(StringMatcher.contains("Tests")))
    ... )
    >>> condition.cost_rank
    4
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from topdrawer.core.constants import PersistedKey
from topdrawer.rules.string_matcher import StringMatcher
from topdrawer.tree.nodes import Directory, File, HierarchyInformation


class ConditionCase(Enum):
    """Condition cases; the value is the persisted ``Case`` tag."""

    NAME = "Name"
    EXT = "Ext"
    FULL_NAME = "FullName"
    PARENT_CONTAINS = "ParentContains"
    PARENT_DOESNT_CONTAIN = "ParentDoesntContain"
    HIERARCHY_CONTAINS = "HierarchyContains"

    @property
    def cost_rank(self) -> int:
        """Evaluation cost rank, 0 is cheapest."""
        return _COST_RANKS[self]


_COST_RANKS = {
    ConditionCase.FULL_NAME: 0,  # single string compare
    ConditionCase.NAME: 1,
    ConditionCase.EXT: 2,
    ConditionCase.HIERARCHY_CONTAINS: 3,  # bounded walk up the tree
    ConditionCase.PARENT_CONTAINS: 4,  # scan of one directory's children
    ConditionCase.PARENT_DOESNT_CONTAIN: 5,  # same scan, ranked last to prefer positive pruning
}

_STRING_CASES = frozenset({ConditionCase.NAME, ConditionCase.EXT, ConditionCase.FULL_NAME})
_CONTENTS_CASES = frozenset({ConditionCase.PARENT_CONTAINS, ConditionCase.PARENT_DOESNT_CONTAIN})


def _nested_condition(predicate: Union["Condition", StringMatcher]) -> "Condition":
    # A bare StringMatcher is shorthand for a full-name condition
    if isinstance(predicate, StringMatcher):
        return Condition.full_name(predicate)
    if not isinstance(predicate, Condition):
        raise TypeError(f"Expected Condition or StringMatcher, got {type(predicate).__name__}")
    return predicate


def _nested_from_persisted(data: Any) -> Optional["Condition"]:
    if not isinstance(data, dict):
        return None
    return Condition.from_persisted(data.get(PersistedKey.CONDITION))


@dataclass(frozen=True)
class FolderContentsMatcher:
    """Matches a directory when at least one direct child satisfies a condition."""

    condition: "Condition"

    def __post_init__(self):
        object.__setattr__(self, "condition", _nested_condition(self.condition))

    @property
    def input_string(self) -> str:
        return self.condition.input_string

    @property
    def key(self) -> str:
        return f"({self.condition.decision_tree_key})"

    def matches(self, directory: Directory, hierarchy: Optional[HierarchyInformation] = None) -> bool:
        """Check the directory's children.

        Args:
            directory: Directory whose direct children are tested
            hierarchy: The directory's own ancestor chain; built from parent
                references when omitted

        Returns:
            True if any child satisfies the nested condition; False for an
            empty directory
        """
        if hierarchy is None:
            hierarchy = HierarchyInformation.for_file(directory)
        child_hierarchy = hierarchy.descending_into(directory)
        for child in directory.children:
            if self.condition.matches(child, child_hierarchy):
                return True
        return False

    def to_persisted(self) -> Dict[str, Any]:
        return {PersistedKey.CONDITION: self.condition.to_persisted()}

    @classmethod
    def from_persisted(cls, data: Any) -> Optional["FolderContentsMatcher"]:
        condition = _nested_from_persisted(data)
        if condition is None:
            return None
        return cls(condition)


@dataclass(frozen=True)
class HierarchyMatcher:
    """Matches an ancestor chain when at least one ancestor satisfies a condition."""

    condition: "Condition"

    def __post_init__(self):
        object.__setattr__(self, "condition", _nested_condition(self.condition))

    @property
    def input_string(self) -> str:
        return self.condition.input_string

    @property
    def key(self) -> str:
        return f"({self.condition.decision_tree_key})"

    def matches(self, hierarchy: HierarchyInformation) -> bool:
        """Check every ancestor, nearest first.

        Each ancestor is tested with its own ancestors, the remaining tail of
        the chain, so no tree walk is needed.

        Args:
            hierarchy: Ancestor chain of the entry being tested

        Returns:
            True if any ancestor satisfies the nested condition; False for an
            empty chain
        """
        directories = hierarchy.directories
        for index, directory in enumerate(directories):
            if self.condition.matches(directory, HierarchyInformation(directories[index + 1:])):
                return True
        return False

    def to_persisted(self) -> Dict[str, Any]:
        return {PersistedKey.CONDITION: self.condition.to_persisted()}

    @classmethod
    def from_persisted(cls, data: Any) -> Optional["HierarchyMatcher"]:
        condition = _nested_from_persisted(data)
        if condition is None:
            return None
        return cls(condition)


Matcher = Union[StringMatcher, FolderContentsMatcher, HierarchyMatcher]

_MATCHER_TYPES = {
    ConditionCase.NAME: StringMatcher,
    ConditionCase.EXT: StringMatcher,
    ConditionCase.FULL_NAME: StringMatcher,
    ConditionCase.PARENT_CONTAINS: FolderContentsMatcher,
    ConditionCase.PARENT_DOESNT_CONTAIN: FolderContentsMatcher,
    ConditionCase.HIERARCHY_CONTAINS: HierarchyMatcher,
}


@dataclass(frozen=True)
class Condition:
    """A single typed predicate: a case tag plus the matcher it wraps.

    Two conditions are equal when they have the same case and equal
    matchers, recursively through nested conditions.
    """

    case: ConditionCase
    matcher: Matcher

    def __post_init__(self):
        expected = _MATCHER_TYPES[self.case]
        if not isinstance(self.matcher, expected):
            raise TypeError(
                f"{self.case.name} condition wraps {expected.__name__}, "
                f"got {type(self.matcher).__name__}"
            )

    # Construction

    @classmethod
    def name(cls, matcher: StringMatcher) -> "Condition":
        return cls(ConditionCase.NAME, matcher)

    @classmethod
    def ext(cls, matcher: StringMatcher) -> "Condition":
        return cls(ConditionCase.EXT, matcher)

    @classmethod
    def full_name(cls, matcher: StringMatcher) -> "Condition":
        return cls(ConditionCase.FULL_NAME, matcher)

    @classmethod
    def parent_contains(cls, matcher: FolderContentsMatcher) -> "Condition":
        return cls(ConditionCase.PARENT_CONTAINS, matcher)

    @classmethod
    def parent_doesnt_contain(cls, matcher: FolderContentsMatcher) -> "Condition":
        return cls(ConditionCase.PARENT_DOESNT_CONTAIN, matcher)

    @classmethod
    def hierarchy_contains(cls, matcher: HierarchyMatcher) -> "Condition":
        return cls(ConditionCase.HIERARCHY_CONTAINS, matcher)

    # Properties

    @property
    def cost_rank(self) -> int:
        return self.case.cost_rank

    @property
    def input_string(self) -> str:
        """Literal pattern text of the innermost string matcher."""
        return self.matcher.input_string

    @property
    def decision_tree_key(self) -> str:
        """Stable key shared by structurally identical conditions."""
        return f"{self.case.value}:{self.matcher.key}"

    @property
    def display_description(self) -> str:
        from topdrawer.rules.formatter import display_description

        return display_description(self)

    def attributed_display_description(self, attributes):
        from topdrawer.rules.formatter import attributed_display_description

        return attributed_display_description(self, attributes)

    # Matching

    def matches(self, file: File, hierarchy: HierarchyInformation) -> bool:
        """Evaluate the condition.

        Uses only the supplied file and hierarchy; the tree is never walked.

        Args:
            file: Entry to test
            hierarchy: Ancestor chain of ``file``

        Returns:
            True if the entry satisfies the condition
        """
        case = self.case

        if case is ConditionCase.NAME:
            return self.matcher.matches(file.name)
        elif case is ConditionCase.EXT:
            return self.matcher.matches(file.ext)
        elif case is ConditionCase.FULL_NAME:
            return self.matcher.matches(file.full_name)
        elif case is ConditionCase.PARENT_CONTAINS:
            parent = file.parent
            if parent is None:
                return False
            return self.matcher.matches(parent, hierarchy.parent_hierarchy())
        elif case is ConditionCase.PARENT_DOESNT_CONTAIN:
            parent = file.parent
            if parent is None:
                return False
            return not self.matcher.matches(parent, hierarchy.parent_hierarchy())
        elif case is ConditionCase.HIERARCHY_CONTAINS:
            return self.matcher.matches(hierarchy)

        raise ValueError(f"Unhandled condition case: {case}")

    # Persistence

    def to_persisted(self) -> Dict[str, Any]:
        """Persisted form: ``{"Case": <tag>, "AssociatedValue": <matcher form>}``."""
        return {
            PersistedKey.CASE: self.case.value,
            PersistedKey.ASSOCIATED_VALUE: self.matcher.to_persisted(),
        }

    @classmethod
    def from_persisted(cls, data: Any) -> Optional["Condition"]:
        """Restore a condition from its persisted form.

        Args:
            data: Persisted dictionary

        Returns:
            Condition, or None for an unknown case tag or a wrapped value that
            fails to restore
        """
        if not isinstance(data, dict):
            return None

        tag = data.get(PersistedKey.CASE)
        if not isinstance(tag, str):
            return None
        try:
            case = ConditionCase(tag)
        except ValueError:
            return None

        matcher = _MATCHER_TYPES[case].from_persisted(data.get(PersistedKey.ASSOCIATED_VALUE))
        if matcher is None:
            return None
        return cls(case, matcher)
