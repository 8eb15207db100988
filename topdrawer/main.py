#!/usr/bin/env python3
"""Application runner for TopDrawer.

This module wires the components together for one run:
- Load the rule set
- Scan the root directory
- Build the decision tree and match every entry
- Render the report

Example:
    >>> from topdrawer.main import run_topdrawer
    >>> run_topdrawer(config_section, logger)
"""

import sys
from typing import Any, Dict, List, Optional, TextIO

from topdrawer.core.constants import ConfigKey
from topdrawer.core.logging import Logger
from topdrawer.report import ReportRenderer
from topdrawer.rules.decision_tree import DecisionTree
from topdrawer.rules.rule import Rule
from topdrawer.rules.serialization import RuleSetError, load_rule_set
from topdrawer.tree.scanner import ScanError, scan_directory
from topdrawer.tree.structure import collect_matches, filter_tree, group_by_rule


def describe_rules(rules: List[Rule]) -> str:
    """Describe each rule, one condition per line."""
    lines = []
    for index, rule in enumerate(rules):
        lines.append(rule.name or f"Rule {index + 1}")
        if not rule.conditions:
            lines.append("  Every item")
        for condition in rule.conditions:
            lines.append(f"  {condition.display_description}")
    return "\n".join(lines) + "\n"


def run_topdrawer(
    config: Dict[str, Any],
    logger: Logger,
    describe_only: bool = False,
    stream: Optional[TextIO] = None,
) -> int:
    """Run one matching pass and write the report.

    Args:
        config: Merged ``topdrawer`` configuration section
        logger: Logger instance
        describe_only: Only describe the rules, without scanning
        stream: Output stream (defaults to stdout)

    Returns:
        Exit code

    Raises:
        RuleSetError: If the rule set cannot be loaded
        ScanError: If the root cannot be scanned
        ReportError: If the report cannot be rendered
    """
    stream = stream or sys.stdout

    rules_file = config.get(ConfigKey.RULES_FILE)
    if not rules_file:
        raise RuleSetError("No rule set given (--rules or 'rules_file')")

    rules = load_rule_set(rules_file)
    logger.info("Loaded rules", path=rules_file, count=len(rules))

    if describe_only:
        stream.write(describe_rules(rules))
        return 0

    root_path = config.get(ConfigKey.ROOT)
    if not root_path:
        raise ScanError("No directory to scan (ROOT argument or 'root')")

    scan = config.get(ConfigKey.SCAN, {})
    root = scan_directory(
        root_path,
        include_hidden=scan.get(ConfigKey.INCLUDE_HIDDEN, False),
        follow_symlinks=scan.get(ConfigKey.FOLLOW_SYMLINKS, False),
        max_depth=scan.get(ConfigKey.MAX_DEPTH),
    )

    tree = DecisionTree(rules)
    workers = config.get(ConfigKey.MATCHING, {}).get(ConfigKey.WORKERS, 1)
    results = collect_matches(root, tree, max_workers=workers)
    logger.info("Matched entries", root=root.path, matches=len(results))

    display = config.get(ConfigKey.DISPLAY, {})
    filtered = filter_tree(
        root, tree, only_matching_folders=display.get(ConfigKey.ONLY_MATCHING_FOLDERS, True)
    )

    renderer = ReportRenderer(display.get(ConfigKey.TEMPLATE))
    stream.write(renderer.render(root.path, group_by_rule(results, tree), filtered))
    return 0
