"""
TopDrawer Core: Input Validators.

This module validates the configuration section and the envelope of
persisted rule-set documents. Individual rules and conditions are not
validated here; they parse leniently through their own ``from_persisted``.
"""
from typing import Any, Dict

from topdrawer.core.constants import (
    SUPPORTED_RULE_SET_VERSIONS,
    ConfigKey,
    ErrorCode,
    PersistedKey,
)


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config(config: Dict[str, Any]) -> bool:
    """Validate the ``topdrawer`` configuration section.

    Args:
        config: Configuration dictionary (the section, not the whole file)

    Returns:
        True if valid

    Raises:
        ValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ValidationError("Configuration must be a dictionary")

    for key in (ConfigKey.ROOT, ConfigKey.RULES_FILE):
        value = config.get(key)
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"'{key}' must be a path string")

    scan = config.get(ConfigKey.SCAN, {})
    if not isinstance(scan, dict):
        raise ValidationError("'scan' must be a dictionary")
    for key in (ConfigKey.INCLUDE_HIDDEN, ConfigKey.FOLLOW_SYMLINKS):
        if key in scan and not isinstance(scan[key], bool):
            raise ValidationError(f"'scan.{key}' must be a boolean")
    max_depth = scan.get(ConfigKey.MAX_DEPTH)
    if max_depth is not None and (not _is_int(max_depth) or max_depth < 0):
        raise ValidationError("'scan.max_depth' must be a non-negative integer")

    matching = config.get(ConfigKey.MATCHING, {})
    if not isinstance(matching, dict):
        raise ValidationError("'matching' must be a dictionary")
    workers = matching.get(ConfigKey.WORKERS, 1)
    if not _is_int(workers) or workers < 1:
        raise ValidationError("'matching.workers' must be a positive integer")

    display = config.get(ConfigKey.DISPLAY, {})
    if not isinstance(display, dict):
        raise ValidationError("'display' must be a dictionary")
    if ConfigKey.ONLY_MATCHING_FOLDERS in display and not isinstance(
        display[ConfigKey.ONLY_MATCHING_FOLDERS], bool
    ):
        raise ValidationError("'display.only_matching_folders' must be a boolean")
    template = display.get(ConfigKey.TEMPLATE)
    if template is not None and not isinstance(template, str):
        raise ValidationError("'display.template' must be a path string")

    logging_config = config.get(ConfigKey.LOGGING, {})
    if not isinstance(logging_config, dict):
        raise ValidationError("'logging' must be a dictionary")
    level = logging_config.get("level", "INFO")
    if not isinstance(level, str) or level.upper() not in (
        "DEBUG",
        "INFO",
        "WARNING",
        "ERROR",
        "CRITICAL",
    ):
        raise ValidationError(f"Invalid log level: {level!r}")

    return True


def validate_rule_set_document(document: Any) -> bool:
    """Validate the envelope of a persisted rule-set document.

    The envelope is ``{"Version": <int>, "Rules": [<rule>, ...]}``.

    Args:
        document: Parsed document

    Returns:
        True if valid

    Raises:
        ValidationError: If the envelope is malformed or the version unsupported
    """
    if not isinstance(document, dict):
        raise ValidationError("Rule set document must be a dictionary")

    if PersistedKey.VERSION not in document:
        raise ValidationError(f"Rule set document must have a '{PersistedKey.VERSION}' field")

    version = document[PersistedKey.VERSION]
    if not _is_int(version):
        raise ValidationError(f"'{PersistedKey.VERSION}' must be an integer, got {version!r}")
    if version not in SUPPORTED_RULE_SET_VERSIONS:
        raise ValidationError(f"Unsupported rule set version: {version}")

    rules = document.get(PersistedKey.RULES)
    if not isinstance(rules, list):
        raise ValidationError(f"'{PersistedKey.RULES}' must be a list")

    return True
