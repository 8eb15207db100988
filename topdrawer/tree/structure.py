#!/usr/bin/env python3
"""Matching passes over a scanned tree.

This module runs a decision tree over every entry of a tree:
- collect_matches: every entry paired with the rules it satisfies
- group_by_rule: the same results regrouped per rule
- filter_tree: a copy of the tree holding only matching entries and the
  folders that lead to them, as shown in the menu

Hierarchies are carried down while walking, so no entry walks back up to
the root. A decision tree is read-only once built, so one instance can be
shared by several worker threads.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from topdrawer.core.logging import get_logger
from topdrawer.rules.decision_tree import DecisionTree
from topdrawer.rules.rule import Rule
from topdrawer.tree.nodes import Directory, File, HierarchyInformation

# Entries handed to a worker at a time
CHUNK_SIZE = 256


@dataclass(frozen=True)
class MatchResult:
    """An entry and the rules it satisfies, in rule-set order."""

    file: File
    rules: Tuple[Rule, ...]
    rule_indexes: Tuple[int, ...]


def iter_with_hierarchy(
    root: Directory, hierarchy: Optional[HierarchyInformation] = None
) -> Iterator[Tuple[File, HierarchyInformation]]:
    """Yield every descendant of ``root`` with its ancestor chain.

    Args:
        root: Directory to walk
        hierarchy: The root's own ancestor chain; built when omitted

    Yields:
        (entry, hierarchy) pairs, depth first, in child order
    """
    if hierarchy is None:
        hierarchy = HierarchyInformation.for_file(root)

    child_hierarchy = hierarchy.descending_into(root)
    for child in root.children:
        yield child, child_hierarchy
        if isinstance(child, Directory):
            yield from iter_with_hierarchy(child, child_hierarchy)


def _evaluate(tree: DecisionTree, pairs: List[Tuple[File, HierarchyInformation]]) -> List[MatchResult]:
    results = []
    for file, hierarchy in pairs:
        indexes = tree.matching_indexes(file, hierarchy)
        if indexes:
            rules = tuple(tree.rules[index] for index in indexes)
            results.append(MatchResult(file, rules, tuple(indexes)))
    return results


def collect_matches(root: Directory, tree: DecisionTree, max_workers: int = 1) -> List[MatchResult]:
    """Match every entry below ``root``.

    Args:
        root: Scanned tree
        tree: Decision tree built from the rule set
        max_workers: Worker threads; 1 evaluates on the calling thread

    Returns:
        Results for entries matching at least one rule, in walk order
    """
    pairs = list(iter_with_hierarchy(root))

    if max_workers <= 1 or len(pairs) <= CHUNK_SIZE:
        results = _evaluate(tree, pairs)
    else:
        chunks = [pairs[i:i + CHUNK_SIZE] for i in range(0, len(pairs), CHUNK_SIZE)]
        results = []
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            for chunk_results in executor.map(lambda chunk: _evaluate(tree, chunk), chunks):
                results.extend(chunk_results)

    get_logger("topdrawer.tree").debug(
        "Matched tree", root=root.path, entries=len(pairs), matches=len(results)
    )
    return results


def group_by_rule(results: List[MatchResult], tree: DecisionTree) -> List[Tuple[Rule, List[File]]]:
    """Regroup match results per rule, keeping rule-set order.

    Every rule of the tree gets a group, empty when nothing matched it.
    """
    groups: List[Tuple[Rule, List[File]]] = [(rule, []) for rule in tree.rules]
    for result in results:
        for index in result.rule_indexes:
            groups[index][1].append(result.file)
    return groups


def filter_tree(root: Directory, tree: DecisionTree, only_matching_folders: bool = True) -> Directory:
    """Copy the tree keeping matching entries.

    A matching directory is kept as a leaf; its contents are not searched.
    A non-matching directory is kept when something below it matches, or
    always when ``only_matching_folders`` is False.

    Args:
        root: Scanned tree
        tree: Decision tree built from the rule set
        only_matching_folders: Drop folders with nothing matching inside

    Returns:
        New root directory with the same path as ``root``
    """
    filtered = Directory(root.path)
    _filter_into(root, HierarchyInformation.for_file(root), filtered, tree, only_matching_folders)
    return filtered


def _filter_into(source, hierarchy, target, tree, only_matching_folders) -> None:
    child_hierarchy = hierarchy.descending_into(source)
    for child in source.children:
        if tree.includes_any(child, child_hierarchy):
            target.add_child(Directory(child.path) if child.is_directory else File(child.path))
        elif isinstance(child, Directory):
            subtree = Directory(child.path)
            _filter_into(child, child_hierarchy, subtree, tree, only_matching_folders)
            if len(subtree) or not only_matching_folders:
                target.add_child(subtree)
