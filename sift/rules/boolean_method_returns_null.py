# Boolean method returns null: a method or lambda that yields a boolean value but can also return null.
#
# A caller may treat such a method as returning a primitive boolean; the implicit
# unboxing of null then throws a NullPointerException.

from __future__ import annotations

from typing import Optional

from sift.nodes import AstNode, unwrap_parentheses
from sift.rules.base import AstVisitorRule
from sift.rules.registry import register_rule
from sift.visitor import Visitor, collect_returns

BOOLEAN_TYPE_NAMES = frozenset({"boolean", "Boolean", "java.lang.Boolean"})
BOXED_BOOLEAN_TYPE_NAMES = frozenset({"Boolean", "java.lang.Boolean"})
BOOLEAN_CONSTANTS = frozenset({"Boolean.TRUE", "Boolean.FALSE", "java.lang.Boolean.TRUE", "java.lang.Boolean.FALSE"})

# Operators whose result is always boolean.
BOOLEAN_OPERATORS = frozenset({"==", "!=", "<", ">", "<=", ">=", "&&", "||"})


def _compact(node: AstNode) -> str:
    return "".join(node.text.split())


def is_boolean_type(type_node: Optional[AstNode]) -> bool:
    return type_node is not None and _compact(type_node) in BOOLEAN_TYPE_NAMES


def is_boxed_boolean_type(type_node: Optional[AstNode]) -> bool:
    return type_node is not None and _compact(type_node) in BOXED_BOOLEAN_TYPE_NAMES


def is_boolean_expression(expression: Optional[AstNode]) -> bool:
    """True for boolean literals and constants, comparisons, negations, instanceof and boolean casts."""
    expression = unwrap_parentheses(expression)
    if expression is None:
        return False
    kind = expression.kind
    if kind in ("true", "false", "instanceof_expression"):
        return True
    if kind == "field_access":
        return _compact(expression) in BOOLEAN_CONSTANTS
    if kind == "binary_expression":
        operator = expression.child("operator")
        return operator is not None and operator.kind in BOOLEAN_OPERATORS
    if kind == "unary_expression":
        operator = expression.child("operator")
        return operator is not None and operator.kind == "!"
    if kind == "cast_expression":
        return is_boolean_type(expression.child("type"))
    return False


def is_null_producing(expression: Optional[AstNode]) -> bool:
    """A null literal, possibly parenthesized or wrapped in casts."""
    expression = unwrap_parentheses(expression)
    if expression is None:
        return False
    if expression.kind == "null_literal":
        return True
    if expression.kind == "cast_expression":
        return is_null_producing(expression.child("value"))
    return False


def is_null_return(value: Optional[AstNode]) -> bool:
    """Whether an exit value returns null: bare return, null literal, or (Boolean) null."""
    if value is None:
        return True
    value = unwrap_parentheses(value)
    if value.kind == "null_literal":
        return True
    return (
        value.kind == "cast_expression"
        and is_boxed_boolean_type(value.child("type"))
        and is_null_producing(value.child("value"))
    )


def exit_points(body: Optional[AstNode]) -> list[tuple[AstNode, Optional[AstNode]]]:
    """
    (statement, returned value) pairs for one callable body.

    A block body contributes its return statements; an expression body (lambda
    shorthand) is itself the single exit point.
    """
    if body is None:
        return []
    if body.kind != "block":
        return [(body, body)]
    return [(stmt, stmt.children[0] if stmt.children else None) for stmt in collect_returns(body)]


class BooleanMethodReturnsNullVisitor(Visitor):
    """Outer pass decides whether a callable returns boolean; inner pass flags its null returns."""

    def visit_method_declaration(self, node: AstNode) -> None:
        exits = exit_points(node.child("body"))
        if is_boolean_type(node.child("type")) or any(is_boolean_expression(v) for _, v in exits):
            name = node.child("name")
            message = f"Method {name.text if name else '<unknown>'} returns a boolean value but can also return null"
            self._flag_null_returns(exits, message)
        self.generic_visit(node)

    def visit_lambda_expression(self, node: AstNode) -> None:
        exits = exit_points(node.child("body"))
        if any(is_boolean_expression(v) for _, v in exits):
            self._flag_null_returns(exits, "Lambda expression returns a boolean value but can also return null")
        self.generic_visit(node)

    def _flag_null_returns(self, exits: list[tuple[AstNode, Optional[AstNode]]], message: str) -> None:
        for statement, value in exits:
            if is_null_return(value):
                self.add_violation(statement, message)


@register_rule
class BooleanMethodReturnsNullRule(AstVisitorRule):
    """Method or lambda returning Boolean (declared or inferred) also returns null."""

    name = "BooleanMethodReturnsNull"
    priority = 2
    visitor_class = BooleanMethodReturnsNullVisitor
