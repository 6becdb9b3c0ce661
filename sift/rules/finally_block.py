# Finally block exits: return or throw statements inside a finally block.
# Either one silently discards an exception propagating out of the try block.

from __future__ import annotations

from sift.nodes import AstNode
from sift.rules.base import AstVisitorRule
from sift.rules.registry import register_rule
from sift.visitor import NESTED_CALLABLE_KINDS, ExitPointCollector, Visitor

# A nested finally reports its own exits when generic_visit reaches it.
FINALLY_BOUNDARY_KINDS = NESTED_CALLABLE_KINDS | {"finally_clause"}


class _FinallyExitVisitor(Visitor):
    statement_kind: str
    message: str

    def visit_finally_clause(self, node: AstNode) -> None:
        collector = ExitPointCollector((self.statement_kind,), FINALLY_BOUNDARY_KINDS)
        for block in node.children_of_kind("block"):
            for statement in collector.collect(block):
                self.add_violation(statement, self.message)
        self.generic_visit(node)


class ReturnFromFinallyBlockVisitor(_FinallyExitVisitor):
    statement_kind = "return_statement"
    message = "finally block contains a return statement"


class ThrowExceptionFromFinallyBlockVisitor(_FinallyExitVisitor):
    statement_kind = "throw_statement"
    message = "finally block throws an exception"


@register_rule
class ReturnFromFinallyBlockRule(AstVisitorRule):
    name = "ReturnFromFinallyBlock"
    priority = 2
    visitor_class = ReturnFromFinallyBlockVisitor


@register_rule
class ThrowExceptionFromFinallyBlockRule(AstVisitorRule):
    name = "ThrowExceptionFromFinallyBlock"
    priority = 2
    visitor_class = ThrowExceptionFromFinallyBlockVisitor
