# Unnecessary Boolean instantiation: new Boolean(...) and Boolean.valueOf(true|false).

from __future__ import annotations

from sift.nodes import AstNode
from sift.rules.base import AstVisitorRule
from sift.rules.boolean_method_returns_null import is_boxed_boolean_type
from sift.rules.registry import register_rule
from sift.visitor import Visitor


class UnnecessaryBooleanInstantiationVisitor(Visitor):
    def visit_object_creation_expression(self, node: AstNode) -> None:
        if is_boxed_boolean_type(node.child("type")):
            self.add_violation(node, "There is typically no need to instantiate Boolean instances")
        self.generic_visit(node)

    def visit_method_invocation(self, node: AstNode) -> None:
        name = node.child("name")
        arguments = node.child("arguments")
        if (
            name is not None
            and name.text == "valueOf"
            and is_boxed_boolean_type(node.child("object"))
            and arguments is not None
            and len(arguments.children) == 1
            and arguments.children[0].kind in ("true", "false")
        ):
            literal = arguments.children[0].kind
            self.add_violation(
                node, f"Call to Boolean.valueOf({literal}) can be replaced by Boolean.{literal.upper()}"
            )
        self.generic_visit(node)


@register_rule
class UnnecessaryBooleanInstantiationRule(AstVisitorRule):
    name = "UnnecessaryBooleanInstantiation"
    priority = 3
    visitor_class = UnnecessaryBooleanInstantiationVisitor
