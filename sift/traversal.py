"""
Source discovery: collect the Java files of a project and name them relative to its root.

The relative, '/'-separated names are what the results tree is keyed on, so
"src/main/java/App.java" ends up under the "src/main/java" directory node
whatever the host platform. Build output, dependency caches and VCS metadata
are pruned before descending.

Typical usage:
    from pathlib import Path
    from sift.traversal import find_java_files, relative_source_path

    root = Path("./my_project").resolve()
    for path in find_java_files(root, ignore_dirs={"build", "generated"}):
        print(relative_source_path(root, path))
"""

import logging
import os
from pathlib import Path
from typing import Callable, Optional, Set

logger = logging.getLogger(__name__)

JAVA_SUFFIX = ".java"

DEFAULT_IGNORE_DIRS: Set[str] = {
    # Maven, Gradle and IDE build output
    "build",
    "target",
    "out",
    "bin",
    "classes",
    ".gradle",
    ".m2",
    "node_modules",
    ".git",
    ".svn",
    ".hg",
    ".vscode",
    ".idea",
    ".settings",
}


def is_java_file(path: Path) -> bool:
    """
    >>> is_java_file(Path("Main.java"))
    True
    >>> is_java_file(Path("Main.class"))
    False
    """
    return path.suffix.lower() == JAVA_SUFFIX


def should_ignore_directory(dir_path: Path, ignore_dirs: Set[str]) -> bool:
    """Match on the directory name only (case-sensitive)."""
    return dir_path.name in ignore_dirs


def relative_source_path(root: Path, path: Path) -> str:
    """
    Name path relative to root with '/' separators.

    Paths outside root keep their own (posix) form so they still get a
    deterministic place in the results tree.
    """
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def find_java_files(
    root: Path,
    ignore_dirs: Optional[Set[str]] = None,
    follow_symlinks: bool = False,
    filter_fn: Optional[Callable[[Path], bool]] = None,
) -> list[Path]:
    """
    Recursively find all Java source files under root.

    Args:
        root: Project directory.
        ignore_dirs: Directory names to prune. Defaults to DEFAULT_IGNORE_DIRS.
        follow_symlinks: Descend into symlinked directories and keep symlinked files.
        filter_fn: Extra predicate; files for which it returns False are skipped.

    Returns:
        Sorted absolute paths. The Analyzer keeps this order in the results tree.

    Raises:
        FileNotFoundError: root does not exist.
        NotADirectoryError: root is not a directory.
    """
    if ignore_dirs is None:
        ignore_dirs = DEFAULT_IGNORE_DIRS
    root = root.resolve()

    if not root.exists():
        raise FileNotFoundError(f"Root directory does not exist: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Root path is not a directory: {root}")

    logger.info("Collecting Java sources under %s", root)

    def _on_error(error: OSError) -> None:
        # Unreadable subdirectories are skipped, not fatal.
        logger.warning("Cannot read directory %s: %s", error.filename, error.strerror)

    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error, followlinks=follow_symlinks):
        current = Path(dirpath)
        # Prune in place so os.walk never enters ignored directories.
        dirnames[:] = [d for d in dirnames if not should_ignore_directory(current / d, ignore_dirs)]
        for name in filenames:
            path = current / name
            if not is_java_file(path):
                continue
            if path.is_symlink() and not follow_symlinks:
                logger.debug("Skipping symlinked file %s", path)
                continue
            if filter_fn is not None and not filter_fn(path):
                continue
            found.append(path)

    found.sort()
    logger.info("Traversal complete: %d Java file(s) under %s", len(found), root)
    return found
