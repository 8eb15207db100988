"""
TopDrawer Tree: File and Directory nodes.

This module provides the in-memory filesystem tree the rules are matched
against:
- File: a leaf entry (name, extension, full name, path)
- Directory: an entry that owns an ordered list of children
- HierarchyInformation: the ancestor chain of an entry, nearest first

Children hold a weak reference to their parent, so a tree is owned from the
root down and never forms a reference cycle.

Example:
    >>> root = Directory("/projects")
    >>> app = root.add_child(Directory("/projects/App"))
    >>> source = app.add_child(File("/projects/App/main.swift"))
    >>> [d.full_name for d in HierarchyInformation.for_file(source)]
    ['App', 'projects']
"""

import os
import weakref
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple


class File:
    """A leaf filesystem entry.

    Identity is the path: two nodes are equal when they have the same path
    and the same kind.
    """

    is_directory = False

    def __init__(self, path: str, parent: Optional["Directory"] = None):
        """Initialize file node.

        Args:
            path: Absolute path of the entry
            parent: Owning directory, if any
        """
        self.path = path
        self.full_name = os.path.basename(path.rstrip("/")) or path
        name, ext = os.path.splitext(self.full_name)
        self.name = name
        self.ext = ext[1:] if ext else ""
        self._parent_ref: Optional[weakref.ReferenceType] = None
        if parent is not None:
            self._parent_ref = weakref.ref(parent)

    @property
    def parent(self) -> Optional["Directory"]:
        """Owning directory, or None for a root entry."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def _attach(self, parent: "Directory") -> None:
        self._parent_ref = weakref.ref(parent)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, File):
            return NotImplemented
        return self.path == other.path and self.is_directory == other.is_directory

    def __hash__(self) -> int:
        return hash((self.path, self.is_directory))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"


class Directory(File):
    """A filesystem entry that owns an ordered sequence of children."""

    is_directory = True

    def __init__(self, path: str, parent: Optional["Directory"] = None):
        super().__init__(path, parent)
        self._children: list = []

    @property
    def children(self) -> Tuple[File, ...]:
        return tuple(self._children)

    def add_child(self, child: File) -> File:
        """Attach a child entry and point its parent reference here.

        Only the tree builder calls this; matching never mutates the tree.

        Args:
            child: File or Directory to attach

        Returns:
            The attached child
        """
        child._attach(self)
        self._children.append(child)
        return child

    def walk(self) -> Iterator[File]:
        """Iterate over every descendant, depth first, in child order."""
        for child in self._children:
            yield child
            if isinstance(child, Directory):
                yield from child.walk()

    def __len__(self) -> int:
        return len(self._children)


@dataclass(frozen=True)
class HierarchyInformation:
    """Ancestor chain of an entry, from the immediate parent up to the root."""

    directories: Tuple[Directory, ...] = ()

    @classmethod
    def for_file(cls, file: File) -> "HierarchyInformation":
        """Build the chain by walking parent references.

        Args:
            file: Entry whose ancestors are collected

        Returns:
            Hierarchy with the nearest ancestor first
        """
        ancestors = []
        parent = file.parent
        while parent is not None:
            ancestors.append(parent)
            parent = parent.parent
        return cls(tuple(ancestors))

    @property
    def parent(self) -> Optional[Directory]:
        return self.directories[0] if self.directories else None

    @property
    def depth(self) -> int:
        return len(self.directories)

    def parent_hierarchy(self) -> "HierarchyInformation":
        """Hierarchy of the immediate parent (this chain without its first entry)."""
        return HierarchyInformation(self.directories[1:])

    def descending_into(self, directory: Directory) -> "HierarchyInformation":
        """Hierarchy of a child of ``directory``, given that this is the directory's own hierarchy."""
        return HierarchyInformation((directory,) + self.directories)

    def __len__(self) -> int:
        return len(self.directories)

    def __iter__(self) -> Iterator[Directory]:
        return iter(self.directories)
