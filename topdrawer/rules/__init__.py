"""TopDrawer Rules System.

This module provides the rule-based classification engine:
- StringMatcher: exact, contains, prefix, suffix and wildcard string matching
- Condition: typed predicate over an entry and its hierarchy
- FolderContentsMatcher / HierarchyMatcher: predicates over a directory's
  children and over the ancestor chain
- Rule: ordered conjunction of conditions
- DecisionTree: shared evaluation of many rules with cost-ordered pruning
- Persisted forms and versioned rule-set documents
"""

from .conditions import Condition, ConditionCase, FolderContentsMatcher, HierarchyMatcher
from .decision_tree import DecisionTree, DecisionTreeNode
from .formatter import (
    AttributedSegment,
    ConditionFormatter,
    ConditionFormatterAttributes,
    attributed_display_description,
    describe_rule,
    display_description,
)
from .rule import Rule
from .serialization import (
    RuleSetError,
    load_rule_set,
    rule_set_from_persisted,
    rule_set_to_persisted,
    save_rule_set,
)
from .string_matcher import MatchStrategy, StringMatcher

__all__ = [
    # Matchers
    "MatchStrategy",
    "StringMatcher",
    "FolderContentsMatcher",
    "HierarchyMatcher",
    # Conditions and rules
    "ConditionCase",
    "Condition",
    "Rule",
    # Decision tree
    "DecisionTree",
    "DecisionTreeNode",
    # Formatting
    "ConditionFormatter",
    "ConditionFormatterAttributes",
    "AttributedSegment",
    "display_description",
    "attributed_display_description",
    "describe_rule",
    # Persistence
    "RuleSetError",
    "rule_set_to_persisted",
    "rule_set_from_persisted",
    "load_rule_set",
    "save_rule_set",
]
