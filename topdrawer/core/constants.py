"""
TopDrawer Core: Constants and Type Definitions

This module provides system-wide constants, error codes, persisted-form keys
and default configuration values.
"""
from enum import IntEnum

# Version information
TOPDRAWER_VERSION = "1.0.0"

# Version of the persisted rule-set document ({"Version": ..., "Rules": [...]})
RULE_SET_SCHEMA_VERSION = 1
SUPPORTED_RULE_SET_VERSIONS = frozenset({RULE_SET_SCHEMA_VERSION})


class ErrorCode(IntEnum):
    """Standardized error codes for TopDrawer operations."""

    INVALID_INPUT = 1  # Bad path, invalid configuration or rule document
    NOT_FOUND = 2  # File or resource doesn't exist
    PERMISSION_DENIED = 3  # Insufficient permissions
    INTERNAL_ERROR = 6  # Bug in TopDrawer


class PersistedKey:
    """Keys used in the persisted (dictionary) form of rules and matchers."""

    # Condition
    CASE = "Case"
    ASSOCIATED_VALUE = "AssociatedValue"

    # StringMatcher
    STRATEGY = "Strategy"
    PATTERN = "Pattern"
    CASE_SENSITIVE = "CaseSensitive"

    # FolderContentsMatcher / HierarchyMatcher
    CONDITION = "Condition"

    # Rule
    CONDITIONS = "Conditions"
    NAME = "Name"

    # Rule-set document
    VERSION = "Version"
    RULES = "Rules"


class ConfigKey:
    """Configuration key constants."""

    ROOT = "root"
    RULES_FILE = "rules_file"
    SCAN = "scan"
    MATCHING = "matching"
    DISPLAY = "display"
    LOGGING = "logging"

    # Scan configuration
    INCLUDE_HIDDEN = "include_hidden"
    FOLLOW_SYMLINKS = "follow_symlinks"
    MAX_DEPTH = "max_depth"

    # Matching configuration
    WORKERS = "workers"

    # Display configuration
    ONLY_MATCHING_FOLDERS = "only_matching_folders"
    TEMPLATE = "template"


# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.ROOT: None,
    ConfigKey.RULES_FILE: None,
    ConfigKey.SCAN: {
        ConfigKey.INCLUDE_HIDDEN: False,
        ConfigKey.FOLLOW_SYMLINKS: False,
        ConfigKey.MAX_DEPTH: None,
    },
    ConfigKey.MATCHING: {
        ConfigKey.WORKERS: 1,
    },
    ConfigKey.DISPLAY: {
        ConfigKey.ONLY_MATCHING_FOLDERS: True,
        ConfigKey.TEMPLATE: None,
    },
    ConfigKey.LOGGING: {
        "level": "INFO",
        "file": None,
    },
}
