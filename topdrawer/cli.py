#!/usr/bin/env python3
"""Command-line interface for TopDrawer.

This module provides the CLI for matching a directory tree against a rule set:
- Argument parsing and validation
- Configuration file loading and merging
- Logging setup
- Help and version information

Example:
    >>> from topdrawer.cli import parse_arguments
    >>> args = parse_arguments(['~/Projects', '--rules', 'rules.yaml'])
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from topdrawer.core.config import ConfigError, ConfigManager, ConfigSource
from topdrawer.core.constants import TOPDRAWER_VERSION, ConfigKey, ErrorCode
from topdrawer.core.logging import Logger, get_logger
from topdrawer.core.validators import ValidationError, validate_config
from topdrawer.report import ReportError
from topdrawer.rules.serialization import RuleSetError
from topdrawer.tree.scanner import ScanError

DESCRIPTION = "TopDrawer - browse a directory tree filtered by user-authored rules"

LOGGER_NAMES = ("topdrawer", "topdrawer.rules", "topdrawer.tree")


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
        CLIError: If a given path does not exist
    """
    parser = argparse.ArgumentParser(
        prog="topdrawer",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the Xcode projects below ~/Projects
  topdrawer ~/Projects --rules xcode.yaml

  # Describe the rules without scanning
  topdrawer --rules xcode.yaml --describe

  # Use settings from a configuration file
  topdrawer --config topdrawer.yaml
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {TOPDRAWER_VERSION}",
    )

    parser.add_argument(
        "root",
        metavar="ROOT",
        nargs="?",
        help="Directory to scan",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

    parser.add_argument(
        "-r",
        "--rules",
        metavar="FILE",
        type=str,
        help="Rule set file (YAML or JSON)",
    )

    parser.add_argument(
        "--describe",
        action="store_true",
        help="Describe the rules and exit without scanning",
    )

    scan_group = parser.add_argument_group("scan options")

    scan_group.add_argument(
        "--include-hidden",
        action="store_true",
        default=None,
        help="Include entries whose names start with '.'",
    )

    scan_group.add_argument(
        "--follow-symlinks",
        action="store_true",
        default=None,
        help="Descend into symlinked directories",
    )

    scan_group.add_argument(
        "--max-depth",
        metavar="N",
        type=int,
        help="Deepest directory level to descend to",
    )

    scan_group.add_argument(
        "--workers",
        metavar="N",
        type=int,
        help="Worker threads used for matching (default: 1)",
    )

    display_group = parser.add_argument_group("display options")

    display_group.add_argument(
        "--all-folders",
        action="store_true",
        help="Keep folders with no matching entries in the menu listing",
    )

    display_group.add_argument(
        "--template",
        metavar="FILE",
        type=str,
        help="Jinja2 template for the report",
    )

    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Also write log output to this file",
    )

    parsed = parser.parse_args(args)

    _validate_arguments(parsed)

    return parsed


def _validate_arguments(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments.

    Args:
        args: Parsed arguments namespace

    Raises:
        CLIError: If validation fails
    """
    if args.root:
        root_path = Path(args.root).expanduser()
        if not root_path.exists():
            raise CLIError(f"Directory does not exist: {args.root}")
        if not root_path.is_dir():
            raise CLIError(f"Not a directory: {args.root}")

    for label, value in (("Configuration file", args.config), ("Rule set file", args.rules), ("Template", args.template)):
        if value and not Path(value).expanduser().is_file():
            raise CLIError(f"{label} does not exist: {value}")

    if args.max_depth is not None and args.max_depth < 0:
        raise CLIError("--max-depth must not be negative")

    if args.workers is not None and args.workers < 1:
        raise CLIError("--workers must be at least 1")


def build_config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Build configuration dictionary from command-line arguments.

    Only options given on the command line are set, so values from the
    configuration file stay in effect for the rest.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configuration dictionary for ConfigManager
    """
    section: Dict[str, Any] = {}

    if args.root:
        section[ConfigKey.ROOT] = os.path.abspath(os.path.expanduser(args.root))
    if args.rules:
        section[ConfigKey.RULES_FILE] = os.path.abspath(os.path.expanduser(args.rules))

    scan: Dict[str, Any] = {}
    if args.include_hidden:
        scan[ConfigKey.INCLUDE_HIDDEN] = True
    if args.follow_symlinks:
        scan[ConfigKey.FOLLOW_SYMLINKS] = True
    if args.max_depth is not None:
        scan[ConfigKey.MAX_DEPTH] = args.max_depth
    if scan:
        section[ConfigKey.SCAN] = scan

    if args.workers is not None:
        section[ConfigKey.MATCHING] = {ConfigKey.WORKERS: args.workers}

    display: Dict[str, Any] = {}
    if args.all_folders:
        display[ConfigKey.ONLY_MATCHING_FOLDERS] = False
    if args.template:
        display[ConfigKey.TEMPLATE] = args.template
    if display:
        section[ConfigKey.DISPLAY] = display

    logging_config: Dict[str, Any] = {}
    if args.debug:
        logging_config["level"] = "DEBUG"
    if args.log_file:
        logging_config["file"] = args.log_file
    if logging_config:
        section[ConfigKey.LOGGING] = logging_config

    return {"topdrawer": section}


def load_configuration(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Merge defaults, configuration file, environment and arguments.

    Args:
        args: Parsed arguments namespace

    Returns:
        Validated ``topdrawer`` configuration section

    Raises:
        CLIError: If the configuration cannot be loaded or is invalid
    """
    try:
        manager = ConfigManager(args.config)
    except ConfigError as e:
        raise CLIError(e.message)

    manager.load_dict(build_config_from_args(args), ConfigSource.CLI_ARGS)
    section = manager.section()

    try:
        validate_config(section)
    except ValidationError as e:
        raise CLIError(f"Invalid configuration: {e}")

    return section


def setup_logging(config: Dict[str, Any]) -> Logger:
    """
    Setup logging based on the configuration.

    Every TopDrawer logger gets the configured level, plus a rotating file
    handler when a log file is set. File handlers from an earlier call
    are closed first.

    Args:
        config: Configuration section

    Returns:
        The CLI logger

    Raises:
        CLIError: If the log file cannot be opened
    """
    logging_config = config.get(ConfigKey.LOGGING, {})
    log_level = logging_config.get("level", "INFO")
    log_file = logging_config.get("file")

    for name in LOGGER_NAMES:
        logger = get_logger(name)
        logger.set_level(log_level)
        logger.remove_file_handlers()
        if log_file:
            try:
                handler = logger.create_file_handler(log_file)
            except OSError as e:
                raise CLIError(f"Cannot open log file {log_file}: {e}")
            logger.add_handler(handler)

    logger = get_logger("topdrawer")
    if log_file:
        logger.debug("Logging to file", file=log_file)
    return logger


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Handles argument parsing, configuration and logging, then passes
    control to ``topdrawer.main.run_topdrawer``.

    Returns:
        Exit code
    """
    try:
        args = parse_arguments(argv)
        config = load_configuration(args)
        logger = setup_logging(config)

        from topdrawer.main import run_topdrawer

        return run_topdrawer(config, logger, describe_only=args.describe)

    except CLIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except (RuleSetError, ScanError, ReportError) as e:
        get_logger("topdrawer").error(e.message, error_code=e.error_code.name)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130

    except Exception as e:
        get_logger("topdrawer").exception(
            "Unexpected error", e, error_code=ErrorCode.INTERNAL_ERROR.name
        )
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
