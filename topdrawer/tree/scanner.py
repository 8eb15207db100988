#!/usr/bin/env python3
"""Filesystem walker that builds the in-memory tree.

Example:
    >>> root = scan_directory("~/Projects", max_depth=4)
    >>> [child.full_name for child in root.children]
    ['App', 'Library', 'notes.txt']
"""

import os
from pathlib import Path
from typing import Optional, Union

from topdrawer.core.constants import ErrorCode
from topdrawer.core.logging import get_logger
from topdrawer.tree.nodes import Directory, File


class ScanError(Exception):
    """Raised when the scan root cannot be used."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


def scan_directory(
    path: Union[str, Path],
    include_hidden: bool = False,
    follow_symlinks: bool = False,
    max_depth: Optional[int] = None,
) -> Directory:
    """Build a tree for everything below ``path``.

    Entries are sorted by name. Directories that cannot be read are kept as
    empty directories and logged.

    Args:
        path: Root directory
        include_hidden: Whether to include entries starting with '.'
        follow_symlinks: Whether to descend into symlinked directories
        max_depth: Deepest level to descend to (0 lists only the root's
            children without descending); None for no limit

    Returns:
        Root directory node

    Raises:
        ScanError: If ``path`` does not exist or is not a directory
    """
    root_path = Path(path).expanduser().resolve()
    if not root_path.exists():
        raise ScanError(f"Scan root does not exist: {path}", ErrorCode.NOT_FOUND)
    if not root_path.is_dir():
        raise ScanError(f"Scan root is not a directory: {path}")

    logger = get_logger("topdrawer.tree")
    root = Directory(str(root_path))
    count = _scan_into(
        root, 0, include_hidden, follow_symlinks, max_depth, frozenset({str(root_path)}), logger
    )
    logger.debug("Scanned directory", root=str(root_path), entries=count)
    return root


def _scan_into(directory, depth, include_hidden, follow_symlinks, max_depth, ancestors, logger) -> int:
    try:
        with os.scandir(directory.path) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        logger.warning("Skipping unreadable directory", path=directory.path, error=e.strerror)
        return 0

    count = 0
    for entry in entries:
        if not include_hidden and entry.name.startswith("."):
            continue

        try:
            is_dir = entry.is_dir(follow_symlinks=follow_symlinks)
        except OSError:
            is_dir = False

        count += 1
        if not is_dir:
            directory.add_child(File(entry.path))
            continue

        child = directory.add_child(Directory(entry.path))
        if max_depth is not None and depth >= max_depth:
            continue

        child_ancestors = ancestors
        if follow_symlinks:
            # A symlinked directory can point back at one of its own ancestors
            real_path = os.path.realpath(entry.path)
            if real_path in ancestors:
                continue
            child_ancestors = ancestors | {real_path}

        count += _scan_into(
            child, depth + 1, include_hidden, follow_symlinks, max_depth, child_ancestors, logger
        )

    return count
