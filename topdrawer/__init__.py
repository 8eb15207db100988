"""TopDrawer - rule-based filtering of directory trees.

Public API:
    StringMatcher, Condition, Rule: the rule model
    DecisionTree: shared evaluation of a rule set
    scan_directory: build the in-memory tree for a directory
    load_rule_set, save_rule_set: persisted rule-set documents
"""

from topdrawer.core.constants import TOPDRAWER_VERSION
from topdrawer.rules import Condition, DecisionTree, Rule, StringMatcher, load_rule_set, save_rule_set
from topdrawer.tree import Directory, File, HierarchyInformation, scan_directory

__version__ = TOPDRAWER_VERSION

__all__ = [
    "Condition",
    "DecisionTree",
    "Directory",
    "File",
    "HierarchyInformation",
    "Rule",
    "StringMatcher",
    "load_rule_set",
    "save_rule_set",
    "scan_directory",
]
