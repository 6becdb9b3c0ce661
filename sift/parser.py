# Tree-sitter setup for Java: language handle, parser factory and syntax error lookup.

import logging
from typing import Optional

import tree_sitter
from tree_sitter import Language
from tree_sitter_java import language as _java_language_capsule

logger = logging.getLogger(__name__)

_JAVA_LANGUAGE = Language(_java_language_capsule())


def get_java_language() -> Language:
    return _JAVA_LANGUAGE


def create_parser() -> tree_sitter.Parser:
    """Return a new Java parser. Parsers are not shared between threads; each worker makes its own."""
    return tree_sitter.Parser(get_java_language())


def parse_bytes(
    source: bytes,
    parser: Optional[tree_sitter.Parser] = None,
) -> tree_sitter.Tree:
    """
    Parse Java source bytes.

    tree-sitter always produces a tree; syntax errors show up as ERROR or
    missing nodes and set ``tree.root_node.has_error``.
    """
    if parser is None:
        parser = create_parser()
    tree = parser.parse(source)
    logger.debug(
        "Parse %s: %d byte(s), root=%s",
        "completed with errors" if tree.root_node.has_error else "succeeded",
        len(source),
        tree.root_node.type,
    )
    return tree


def first_error_line(node: tree_sitter.Node) -> Optional[int]:
    """1-based line of the first ERROR or missing node under node, or None for a clean subtree."""
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0] + 1
    if not node.has_error:
        return None
    for child in node.children:
        line = first_error_line(child)
        if line is not None:
            return line
    return node.start_point[0] + 1
