# Per-file analysis context: store file path, source code, AST, and helper methods.
# Handles reading/parsing Java files; unreadable or malformed files raise ParseFailure
# so the Analyzer can convert them into a synthetic violation.

import logging
from pathlib import Path
from typing import Optional

from tree_sitter import Parser

from sift.errors import ParseFailure
from sift.nodes import AstNode, convert_tree
from sift.parser import create_parser, first_error_line, parse_bytes

logger = logging.getLogger(__name__)

TYPE_DECLARATION_KINDS = frozenset(
    {
        "class_declaration",
        "interface_declaration",
        "enum_declaration",
        "record_declaration",
        "annotation_type_declaration",
    }
)

CALLABLE_KINDS = frozenset({"method_declaration", "constructor_declaration"})


def count_tree_stats(root: AstNode) -> tuple[int, int]:
    """
    Return (total node count, method/constructor count) for the tree.

    Useful for logging how much was parsed.
    """
    nodes = 0
    callables = 0
    for node in root.walk():
        nodes += 1
        if node.kind in CALLABLE_KINDS:
            callables += 1
    return nodes, callables


class FileContext:
    """
    Per-file state for static analysis: path, raw source, AST and declared types.

    relative_path is the '/'-separated path used in the results tree and by
    file-name filters. Rules use context.root to walk the AST and
    context.source_line(n) for snippets.
    """

    def __init__(
        self,
        path: Path,
        source: bytes,
        root: AstNode,
        *,
        relative_path: Optional[str] = None,
    ) -> None:
        self.path = path
        self.source = source
        self.root = root
        self.relative_path = relative_path if relative_path is not None else path.as_posix()
        self.lines = source.decode("utf-8", errors="replace").splitlines()
        self.package_name = _package_name(root)
        self.primary_type_name = _primary_type_name(root)

    @property
    def file_name(self) -> str:
        return self.relative_path.rsplit("/", 1)[-1]

    @property
    def qualified_type_name(self) -> Optional[str]:
        """Primary declared type qualified by the package, e.g. 'com.acme.Widget'."""
        if self.primary_type_name is None:
            return None
        if self.package_name:
            return f"{self.package_name}.{self.primary_type_name}"
        return self.primary_type_name

    def source_line(self, line: Optional[int]) -> Optional[str]:
        """Return the stripped text of a 1-based line, or None if out of range."""
        if line is None or line < 1 or line > len(self.lines):
            return None
        return self.lines[line - 1].strip()


def _package_name(root: AstNode) -> Optional[str]:
    for decl in root.children_of_kind("package_declaration"):
        for c in decl.children:
            if c.kind in ("identifier", "scoped_identifier"):
                return "".join(c.text.split())
    return None


def _primary_type_name(root: AstNode) -> Optional[str]:
    for decl in root.children:
        if decl.kind in TYPE_DECLARATION_KINDS:
            name = decl.child("name")
            if name is not None:
                return name.text
    return None


def context_from_bytes(
    source: bytes,
    path: Path,
    parser: Optional[Parser] = None,
    *,
    relative_path: Optional[str] = None,
) -> FileContext:
    """
    Parse source bytes into a FileContext.

    Raises:
        ParseFailure: if the source is not valid UTF-8 or has syntax errors.
    """
    display = relative_path if relative_path is not None else path.as_posix()
    try:
        source.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseFailure(display, f"source is not valid UTF-8 ({e.reason})") from e

    tree = parse_bytes(source, parser=parser)
    if tree.root_node.has_error:
        line = first_error_line(tree.root_node)
        logger.warning("File %s has syntax errors near line %s", display, line)
        raise ParseFailure(display, "syntax error", line=line)

    root = convert_tree(tree.root_node, source)
    node_count, callable_count = count_tree_stats(root)
    logger.info("Parsed %s: %d nodes, %d method(s)", display, node_count, callable_count)
    return FileContext(path=path, source=source, root=root, relative_path=relative_path)


def create_context(
    path: Path,
    parser: Optional[Parser] = None,
    *,
    relative_path: Optional[str] = None,
) -> FileContext:
    """
    Read a Java file and parse it into a FileContext (path, source, AST).

    Raises:
        ParseFailure: the file could not be read, decoded or parsed.
    """
    if parser is None:
        parser = create_parser()

    display = relative_path if relative_path is not None else path.as_posix()
    try:
        source = path.read_bytes()
    except OSError as e:
        logger.error("Failed to read file %s: %s", path, e)
        raise ParseFailure(display, f"unreadable ({e.strerror or e})") from e

    return context_from_bytes(source, path, parser=parser, relative_path=relative_path)
