"""TopDrawer Tree - the in-memory filesystem tree rules are matched against.

Public API:
    File, Directory: tree nodes with weak parent references
    HierarchyInformation: ancestor chain of an entry, nearest first
    scan_directory, ScanError: filesystem walker

Matching passes over a tree live in ``topdrawer.tree.structure``.
"""

from topdrawer.tree.nodes import Directory, File, HierarchyInformation
from topdrawer.tree.scanner import ScanError, scan_directory

__all__ = [
    "File",
    "Directory",
    "HierarchyInformation",
    "ScanError",
    "scan_directory",
]
