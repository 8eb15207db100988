#!/usr/bin/env python3
"""Rules: ordered conjunctions of conditions.

A file satisfies a rule when every condition matches. Conditions are tested
in order and evaluation stops at the first one that fails, so expensive
conditions after a failing cheap one are never run. A rule with no
conditions matches everything.

Rules are immutable; editing methods return a new rule.

Example:
    >>> rule = Rule([Condition.ext(StringMatcher.exact("swift"))], name="Swift")
    >>> rule.includes(File("/src/a.swift"))
    True
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from topdrawer.core.constants import PersistedKey
from topdrawer.core.logging import get_logger
from topdrawer.rules.conditions import Condition
from topdrawer.tree.nodes import File, HierarchyInformation


@dataclass(frozen=True)
class Rule:
    """An immutable, ordered conjunction of conditions.

    Attributes:
        conditions: Conditions in authored order
        name: Optional display name
    """

    conditions: Tuple[Condition, ...] = ()
    name: Optional[str] = field(default=None)

    def __post_init__(self):
        conditions = tuple(self.conditions)
        for condition in conditions:
            if not isinstance(condition, Condition):
                raise TypeError(f"Rule conditions must be Condition, got {type(condition).__name__}")
        object.__setattr__(self, "conditions", conditions)

    def includes(self, file: File, hierarchy: Optional[HierarchyInformation] = None) -> bool:
        """Check whether the file satisfies every condition.

        Args:
            file: Entry to test
            hierarchy: Ancestor chain of ``file``; built from parent
                references when omitted

        Returns:
            True if all conditions match (always True for an empty rule)
        """
        if not self.conditions:
            return True

        if hierarchy is None:
            hierarchy = HierarchyInformation.for_file(file)

        for condition in self.conditions:
            if not condition.matches(file, hierarchy):
                return False

        return True

    def sorted_by_cost(self) -> "Rule":
        """Rule with conditions stably ordered by ascending cost rank."""
        return Rule(tuple(sorted(self.conditions, key=lambda c: c.cost_rank)), self.name)

    # Editing

    def with_condition(self, condition: Condition) -> "Rule":
        return Rule(self.conditions + (condition,), self.name)

    def without_condition(self, index: int) -> "Rule":
        conditions = list(self.conditions)
        del conditions[index]
        return Rule(tuple(conditions), self.name)

    def replacing_condition(self, index: int, condition: Condition) -> "Rule":
        conditions = list(self.conditions)
        conditions[index] = condition
        return Rule(tuple(conditions), self.name)

    def renamed(self, name: Optional[str]) -> "Rule":
        return Rule(self.conditions, name)

    def __len__(self) -> int:
        return len(self.conditions)

    # Persistence

    def to_persisted(self) -> Dict[str, Any]:
        """Persisted form: ``{"Conditions": [...]}`` plus ``"Name"`` when set."""
        data: Dict[str, Any] = {
            PersistedKey.CONDITIONS: [condition.to_persisted() for condition in self.conditions]
        }
        if self.name is not None:
            data[PersistedKey.NAME] = self.name
        return data

    @classmethod
    def from_persisted(cls, data: Any) -> Optional["Rule"]:
        """Restore a rule from its persisted form.

        Condition entries that fail to restore are dropped one by one and
        logged; the rest of the rule still loads. This can silently shorten
        a rule, which widens what it matches.

        Args:
            data: Persisted dictionary

        Returns:
            Rule, or None if ``Conditions`` is missing or not a list, or
            ``Name`` is present but not a string
        """
        if not isinstance(data, dict):
            return None

        entries = data.get(PersistedKey.CONDITIONS)
        if not isinstance(entries, list):
            return None

        name = data.get(PersistedKey.NAME)
        if name is not None and not isinstance(name, str):
            return None

        return cls(tuple(_restore_conditions(entries, name)), name)


def _restore_conditions(entries: Iterable[Any], rule_name: Optional[str]) -> Iterable[Condition]:
    logger = get_logger("topdrawer.rules")
    for index, entry in enumerate(entries):
        condition = Condition.from_persisted(entry)
        if condition is None:
            case = entry.get(PersistedKey.CASE) if isinstance(entry, dict) else None
            logger.warning("Dropping malformed condition", rule=rule_name, index=index, case=case)
            continue
        yield condition
