#!/usr/bin/env python3
"""Decision tree for evaluating many rules against the same entry.

Building:
1. Each rule's conditions are stably sorted by cost rank, cheapest first.
2. The sorted sequences are merged from the root: rules whose sequences
   share a leading run of identical conditions (same decision tree key)
   share the corresponding path.
3. Each rule leaves a marker on the node where its path ends. Rules without
   conditions mark the root.

Evaluating walks from the root, tests every node's condition once and
prunes the whole subtree below a failing node. A rule is satisfied when its
marker is reached.

The tree keeps its own copy of the rules and never changes after it is
built. Callers rebuild it whenever their rule set changes.

Example:
    >>> tree = DecisionTree(rules)
    >>> tree.matching_rules(file)
    [Rule(...)]
"""

from typing import Dict, Iterable, List, Optional, Tuple

from topdrawer.core.logging import get_logger
from topdrawer.rules.conditions import Condition
from topdrawer.rules.rule import Rule
from topdrawer.tree.nodes import File, HierarchyInformation


class DecisionTreeNode:
    """One node of the decision tree.

    Attributes:
        condition: Condition tested at this node (None for the root)
        children: Child nodes keyed by their condition's decision tree key
        rule_indexes: Indexes of rules whose path ends here
    """

    __slots__ = ("condition", "children", "rule_indexes")

    def __init__(self, condition: Optional[Condition] = None):
        self.condition = condition
        self.children: Dict[str, "DecisionTreeNode"] = {}
        self.rule_indexes: List[int] = []

    def child_for(self, condition: Condition) -> "DecisionTreeNode":
        """Return the child testing ``condition``, creating it if needed."""
        key = condition.decision_tree_key
        node = self.children.get(key)
        if node is None:
            node = DecisionTreeNode(condition)
            self.children[key] = node
        return node


class DecisionTree:
    """Shared evaluation structure for a snapshot of rules."""

    def __init__(self, rules: Iterable[Rule]):
        """Build the tree.

        Args:
            rules: Rules to evaluate; their order is the order results are
                reported in
        """
        self._rules: Tuple[Rule, ...] = tuple(rules)
        self._root = DecisionTreeNode()
        self._node_count = 1

        for index, rule in enumerate(self._rules):
            node = self._root
            for condition in rule.sorted_by_cost().conditions:
                if condition.decision_tree_key not in node.children:
                    self._node_count += 1
                node = node.child_for(condition)
            node.rule_indexes.append(index)

        get_logger("topdrawer.rules").debug(
            "Built decision tree", rules=len(self._rules), nodes=self._node_count
        )

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return self._rules

    @property
    def root(self) -> DecisionTreeNode:
        return self._root

    @property
    def node_count(self) -> int:
        """Number of nodes including the root."""
        return self._node_count

    def __len__(self) -> int:
        return len(self._rules)

    def matching_indexes(
        self, file: File, hierarchy: Optional[HierarchyInformation] = None
    ) -> List[int]:
        """Indexes of the rules the entry satisfies, in ascending order.

        Args:
            file: Entry to test
            hierarchy: Ancestor chain of ``file``; built when omitted

        Returns:
            Sorted rule indexes
        """
        if hierarchy is None:
            hierarchy = HierarchyInformation.for_file(file)

        matched: List[int] = []
        for node in self._reached_nodes(file, hierarchy):
            matched.extend(node.rule_indexes)
        matched.sort()
        return matched

    def matching_rules(
        self, file: File, hierarchy: Optional[HierarchyInformation] = None
    ) -> List[Rule]:
        """Rules the entry satisfies, in the order they were given."""
        return [self._rules[index] for index in self.matching_indexes(file, hierarchy)]

    def includes_any(self, file: File, hierarchy: Optional[HierarchyInformation] = None) -> bool:
        """Check whether the entry satisfies at least one rule.

        Stops at the first rule marker reached.
        """
        if hierarchy is None:
            hierarchy = HierarchyInformation.for_file(file)

        for node in self._reached_nodes(file, hierarchy):
            if node.rule_indexes:
                return True
        return False

    def _reached_nodes(self, file: File, hierarchy: HierarchyInformation):
        """Yield every node whose condition path holds for the entry.

        The root is always reached. A child is visited only after its own
        condition is true, so a failing condition prunes its subtree.
        """
        stack: List[DecisionTreeNode] = [self._root]
        while stack:
            node = stack.pop()
            yield node
            for child in reversed(list(node.children.values())):
                if child.condition.matches(file, hierarchy):
                    stack.append(child)
