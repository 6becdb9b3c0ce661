"""
Results tree: per-file violation lists rolled up through directory nodes.

Every count is derived on read from the stored violations, so a directory's
totals always equal the sum over its subtree, whatever was added and in which
order. ``max_priority`` is a query argument rather than stored state: the same
tree answers "files with violations at priority <= N" for any N.

Typical usage:
    builder = ResultsTreeBuilder()
    builder.add_file_results(FileResults("src/main/Foo.java", violations))
    root = builder.finalize()
    root.get_number_of_violations_with_priority(2)
    root.get_number_of_files_with_violations(max_priority=3)
"""

from __future__ import annotations

import logging
import threading
from typing import Iterator, Optional, Sequence, Union

from sift.findings.models import Violation
from sift.rules.base import MAX_PRIORITY, MIN_PRIORITY

logger = logging.getLogger(__name__)

PRIORITIES = tuple(range(MIN_PRIORITY, MAX_PRIORITY + 1))


class FileResults:
    """Violations for a single file, in detection order."""

    is_file = True

    def __init__(self, path: str, violations: Sequence[Violation] = ()) -> None:
        self.path = path
        self._violations = list(violations)

    @property
    def violations(self) -> list[Violation]:
        return list(self._violations)

    @property
    def children(self) -> list[Results]:
        return []

    def get_number_of_violations_with_priority(self, priority: int, recursive: bool = True) -> int:
        return sum(1 for v in self._violations if v.priority == priority)

    def violation_counts(self, recursive: bool = True) -> dict[int, int]:
        return {p: self.get_number_of_violations_with_priority(p) for p in PRIORITIES}

    def has_violations(self, max_priority: int = MAX_PRIORITY) -> bool:
        return any(v.priority <= max_priority for v in self._violations)

    def get_number_of_files_with_violations(self, max_priority: int = MAX_PRIORITY, recursive: bool = True) -> int:
        return 1 if self.has_violations(max_priority) else 0

    def get_total_number_of_files(self, recursive: bool = True) -> int:
        return 1

    def __repr__(self) -> str:
        return f"FileResults(path={self.path!r}, violations={len(self._violations)})"


class DirectoryResults:
    """
    A directory node. number_of_files_in_this_directory is set by whoever builds
    the tree; files without violations count toward it even though they may
    never be attached as children.
    """

    is_file = False

    def __init__(self, path: Optional[str] = None, number_of_files_in_this_directory: int = 0) -> None:
        self.path = path
        self.number_of_files_in_this_directory = number_of_files_in_this_directory
        self._children: list[Results] = []
        self._sealed = False

    @property
    def children(self) -> list[Results]:
        return list(self._children)

    def add_child(self, child: Results) -> None:
        if self._sealed:
            raise RuntimeError(f"Results for directory {self.path!r} are finalized and read-only")
        self._children.append(child)

    def seal(self) -> None:
        self._sealed = True
        for child in self._children:
            if isinstance(child, DirectoryResults):
                child.seal()

    @property
    def file_children(self) -> list[FileResults]:
        return [c for c in self._children if isinstance(c, FileResults)]

    @property
    def directory_children(self) -> list[DirectoryResults]:
        return [c for c in self._children if isinstance(c, DirectoryResults)]

    @property
    def violations(self) -> list[Violation]:
        """All violations in this subtree, in tree order."""
        found: list[Violation] = []
        for child in self._children:
            found.extend(child.violations)
        return found

    def get_number_of_violations_with_priority(self, priority: int, recursive: bool = True) -> int:
        children = self._children if recursive else self.file_children
        return sum(c.get_number_of_violations_with_priority(priority) for c in children)

    def violation_counts(self, recursive: bool = True) -> dict[int, int]:
        return {p: self.get_number_of_violations_with_priority(p, recursive) for p in PRIORITIES}

    def get_number_of_files_with_violations(self, max_priority: int = MAX_PRIORITY, recursive: bool = True) -> int:
        """Files holding at least one violation with priority <= max_priority."""
        children = self._children if recursive else self.file_children
        return sum(c.get_number_of_files_with_violations(max_priority) for c in children)

    def get_total_number_of_files(self, recursive: bool = True) -> int:
        total = self.number_of_files_in_this_directory
        if recursive:
            total += sum(d.get_total_number_of_files() for d in self.directory_children)
        return total

    def contains_files(self) -> bool:
        """True if this directory or any descendant holds at least one file."""
        return self.get_total_number_of_files(recursive=True) > 0

    def iter_directories(self) -> Iterator[DirectoryResults]:
        """This directory followed by every descendant directory, pre-order, insertion order."""
        yield self
        for child in self.directory_children:
            yield from child.iter_directories()

    def __repr__(self) -> str:
        return f"DirectoryResults(path={self.path!r}, children={len(self._children)})"


Results = Union[FileResults, DirectoryResults]


def parent_path(path: str) -> str:
    """'a/b/C.java' -> 'a/b'; 'C.java' -> ''."""
    return path.rsplit("/", 1)[0] if "/" in path else ""


class ResultsTreeBuilder:
    """
    Assembles the results tree bottom-up as files are analyzed.

    Directory nodes are created on demand and keyed by path, so revisiting a
    directory never duplicates it. add_file_results() is safe to call from
    several threads; inserts are serialized by a lock.
    """

    def __init__(self) -> None:
        self.root = DirectoryResults("")
        self._directories: dict[str, DirectoryResults] = {"": self.root}
        self._lock = threading.Lock()
        self._finalized = False

    def _directory(self, path: str) -> DirectoryResults:
        node = self._directories.get(path)
        if node is None:
            parent = self._directory(parent_path(path))
            node = DirectoryResults(path)
            parent.add_child(node)
            self._directories[path] = node
        return node

    def add_directory(self, path: str) -> DirectoryResults:
        with self._lock:
            return self._directory(path)

    def add_file_results(self, file_results: FileResults) -> None:
        with self._lock:
            if self._finalized:
                raise RuntimeError("Cannot add file results after finalize()")
            directory = self._directory(parent_path(file_results.path))
            directory.add_child(file_results)
            directory.number_of_files_in_this_directory += 1
        logger.debug("Attached %r to %r", file_results.path, directory.path)

    def finalize(self) -> DirectoryResults:
        """
        Seal the tree and return its root. Counts are derived on read, so this
        can be called any number of times with the same result.
        """
        with self._lock:
            if not self._finalized:
                self._finalized = True
                self.root.seal()
                logger.info(
                    "Results tree finalized: %d file(s), %d director(ies)",
                    self.root.get_total_number_of_files(),
                    len(self._directories),
                )
        return self.root
