"""
AST visitors: kind-dispatching traversal used by every rule.

``Visitor.visit(node)`` calls ``visit_<kind>(node)`` when the subclass defines
it, otherwise ``generic_visit(node)``, which visits the children in source
order. A handler that wants the default traversal to continue below its node
calls ``self.generic_visit(node)`` itself, as with ``ast.NodeVisitor``.

``ExitPointCollector`` is the narrow inner scan used by rules whose condition
depends on every exit point of one callable: it gathers the matching
statements of a single body and stops at nested callables, so lambdas and
local/anonymous classes are always analyzed on their own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from sift.findings.models import Violation
from sift.nodes import AstNode

if TYPE_CHECKING:
    from sift.context import FileContext
    from sift.rules.base import Rule

logger = logging.getLogger(__name__)

# Node kinds that open a new callable scope.
NESTED_CALLABLE_KINDS = frozenset(
    {
        "lambda_expression",
        "class_body",
        "interface_body",
        "enum_body",
        "method_declaration",
        "constructor_declaration",
    }
)


@dataclass(frozen=True)
class Candidate:
    """A violation detected by a visitor, plus the node it was reported on."""

    violation: Violation
    node: Optional[AstNode]


class Visitor:
    """Base class for rule visitors. One instance analyzes exactly one file."""

    def __init__(self, rule: Rule, context: FileContext) -> None:
        self.rule = rule
        self.context = context
        self.candidates: list[Candidate] = []

    def visit(self, node: AstNode) -> None:
        handler = getattr(self, f"visit_{node.kind}", None)
        if handler is None:
            self.generic_visit(node)
        else:
            handler(node)

    def generic_visit(self, node: AstNode) -> None:
        for child in node.children:
            self.visit(child)

    def add_violation(self, node: Optional[AstNode], message: Optional[str] = None) -> None:
        """Record a candidate violation at node (None for a file-level violation)."""
        line = node.line if node is not None else None
        violation = Violation(
            rule=self.rule,
            line_number=line,
            source_line=self.context.source_line(line),
            message=message,
        )
        logger.debug("%s: %s candidate at line %s", self.context.relative_path, self.rule.name, line)
        self.candidates.append(Candidate(violation=violation, node=node))


class ExitPointCollector:
    """
    Collect statements of the given kinds inside one callable body.

    Returns the matches as a list; nodes of a boundary kind (by default the
    nested callables) are not entered. A None body (abstract, interface or
    native method) yields an empty list.
    """

    def __init__(
        self,
        kinds: Iterable[str] = ("return_statement",),
        boundary_kinds: Iterable[str] = NESTED_CALLABLE_KINDS,
    ) -> None:
        self.kinds = frozenset(kinds)
        self.boundary_kinds = frozenset(boundary_kinds)

    def collect(self, body: Optional[AstNode]) -> list[AstNode]:
        found: list[AstNode] = []
        if body is not None:
            self._scan(body, found)
        return found

    def _scan(self, node: AstNode, found: list[AstNode]) -> None:
        for child in node.children:
            if child.kind in self.kinds:
                found.append(child)
            if child.kind in self.boundary_kinds:
                continue
            self._scan(child, found)


def collect_returns(body: Optional[AstNode]) -> list[AstNode]:
    """Return every return statement of one callable body, excluding nested callables."""
    return ExitPointCollector(("return_statement",)).collect(body)
