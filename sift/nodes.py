# Generic AST node model: an immutable, kind-tagged view over a tree-sitter parse tree.
# Rules and visitors only ever see AstNode, never tree-sitter objects.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from tree_sitter import Node as TSNode

# Comments are extras that may appear anywhere; they are not part of the model.
COMMENT_KINDS = frozenset({"line_comment", "block_comment", "comment"})


@dataclass(frozen=True, eq=False)
class AstNode:
    """
    One node of a parsed source file.

    kind is the grammar node type (e.g. "method_declaration", "return_statement").
    role is the field name this node occupies in its parent ("type", "body",
    "operator", ...) or None. children holds the named children plus anonymous
    tokens that occupy a field (binary/unary operators), in source order.
    Lines and columns are 1-based.
    """

    kind: str
    role: Optional[str]
    children: tuple[AstNode, ...]
    line: int
    column: int
    end_line: int
    end_column: int
    start_byte: int
    end_byte: int
    source: bytes = field(repr=False)

    @property
    def text(self) -> str:
        return self.source[self.start_byte : self.end_byte].decode("utf-8", errors="replace")

    def child(self, role: str) -> Optional[AstNode]:
        """Return the first child occupying the given field, or None."""
        for c in self.children:
            if c.role == role:
                return c
        return None

    def children_of_kind(self, *kinds: str) -> list[AstNode]:
        return [c for c in self.children if c.kind in kinds]

    def walk(self) -> Iterator[AstNode]:
        """Yield this node and every descendant in document order (DFS)."""
        yield self
        for c in self.children:
            yield from c.walk()

    def contains(self, other: AstNode) -> bool:
        """True if other's source span lies within this node's span."""
        return self.start_byte <= other.start_byte and other.end_byte <= self.end_byte


def convert_tree(node: TSNode, source: bytes, role: Optional[str] = None) -> AstNode:
    """Convert a tree-sitter node (and its subtree) into an AstNode."""
    children: list[AstNode] = []
    cursor = node.walk()
    if cursor.goto_first_child():
        while True:
            ts_child = cursor.node
            child_role = cursor.field_name
            keep = ts_child.is_named or child_role is not None
            if keep and ts_child.type not in COMMENT_KINDS:
                children.append(convert_tree(ts_child, source, child_role))
            if not cursor.goto_next_sibling():
                break
    start_row, start_col = node.start_point
    end_row, end_col = node.end_point
    return AstNode(
        kind=node.type,
        role=role,
        children=tuple(children),
        line=start_row + 1,
        column=start_col + 1,
        end_line=end_row + 1,
        end_column=end_col + 1,
        start_byte=node.start_byte,
        end_byte=node.end_byte,
        source=source,
    )


def unwrap_parentheses(node: Optional[AstNode]) -> Optional[AstNode]:
    """Strip any number of enclosing parenthesized_expression nodes."""
    while node is not None and node.kind == "parenthesized_expression" and node.children:
        node = node.children[0]
    return node
