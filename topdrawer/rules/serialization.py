#!/usr/bin/env python3
"""Persisted rule-set documents.

A rule set is stored as a versioned document:

    Version: 1
    Rules:
      - Name: Xcode projects
        Conditions:
          - Case: Ext
            AssociatedValue: {Strategy: exact, Pattern: xcodeproj, CaseSensitive: true}

The envelope is validated when parsed: a document that is not a mapping,
lacks a supported ``Version`` or has no ``Rules`` list is rejected with
RuleSetError. Below the envelope, recovery happens at the smallest unit: a
malformed rule is dropped, and inside a rule a malformed condition is
dropped, each with a warning. Dropping a condition makes the rule match more
than it was authored to.

Example:
    >>> save_rule_set("rules.yaml", [rule])
    >>> load_rule_set("rules.yaml")
    [Rule(...)]
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

import yaml

from topdrawer.core.constants import RULE_SET_SCHEMA_VERSION, ErrorCode, PersistedKey
from topdrawer.core.logging import get_logger
from topdrawer.core.validators import ValidationError, validate_rule_set_document
from topdrawer.rules.rule import Rule


class RuleSetError(Exception):
    """Raised when a rule-set document cannot be read, parsed or written."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


def rule_set_to_persisted(rules: Iterable[Rule]) -> Dict[str, Any]:
    """Build the persisted document for a rule set.

    Args:
        rules: Rules in authored order

    Returns:
        ``{"Version": ..., "Rules": [...]}``
    """
    return {
        PersistedKey.VERSION: RULE_SET_SCHEMA_VERSION,
        PersistedKey.RULES: [rule.to_persisted() for rule in rules],
    }


def rule_set_from_persisted(document: Any) -> List[Rule]:
    """Restore a rule set from its persisted document.

    Args:
        document: Parsed document

    Returns:
        Rules that restored successfully, in document order

    Raises:
        RuleSetError: If the envelope is malformed or its version unsupported
    """
    try:
        validate_rule_set_document(document)
    except ValidationError as e:
        raise RuleSetError(str(e), e.error_code)

    logger = get_logger("topdrawer.rules")
    rules: List[Rule] = []
    for index, entry in enumerate(document[PersistedKey.RULES]):
        rule = Rule.from_persisted(entry)
        if rule is None:
            logger.warning("Dropping malformed rule", index=index)
            continue
        rules.append(rule)
    return rules


def load_rule_set(path: Union[str, Path]) -> List[Rule]:
    """Load a rule set from a YAML or JSON file.

    JSON is read through the YAML parser, which accepts it.

    Args:
        path: Rule-set file

    Returns:
        Restored rules

    Raises:
        RuleSetError: If the file is missing, unreadable or malformed
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise RuleSetError(f"Rule set file not found: {path}", ErrorCode.NOT_FOUND)

    try:
        with open(path, "r", encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RuleSetError(f"Parse error in {path}: {e}")
    except OSError as e:
        raise RuleSetError(f"Error reading {path}: {e}", ErrorCode.PERMISSION_DENIED)

    rules = rule_set_from_persisted(document)
    get_logger("topdrawer.rules").debug("Loaded rule set", path=str(path), rules=len(rules))
    return rules


def save_rule_set(path: Union[str, Path], rules: Iterable[Rule]) -> None:
    """Write a rule set as JSON (``.json`` suffix) or YAML (anything else).

    Args:
        path: Destination file
        rules: Rules in authored order

    Raises:
        RuleSetError: If the file cannot be written
    """
    path = Path(path).expanduser()
    document = rule_set_to_persisted(rules)

    try:
        with open(path, "w", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                json.dump(document, f, indent=2)
                f.write("\n")
            else:
                yaml.safe_dump(document, f, sort_keys=False)
    except OSError as e:
        raise RuleSetError(f"Error writing {path}: {e}", ErrorCode.PERMISSION_DENIED)
