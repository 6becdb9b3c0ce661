"""Tests for sift.visitor: kind dispatch, candidate recording and the exit-point collector."""

from pathlib import Path

from sift.context import context_from_bytes
from sift.rules.base import Rule
from sift.visitor import ExitPointCollector, Visitor, collect_returns

SOURCE = b"""
import java.util.function.Supplier;

class Outer {
    int first() {
        if (true) {
            return 1;
        }
        Supplier<Integer> s = () -> {
            return 2;
        };
        class Local {
            int inner() { return 3; }
        }
        return 4;
    }

    abstract static class Base {
        abstract int none();
    }
}
"""


class StubRule(Rule):
    def __init__(self, name: str = "Stub", **properties):
        self.name = name
        super().__init__(**properties)

    def create_visitor(self, context):
        return Visitor(self, context)


class MethodNameVisitor(Visitor):
    def __init__(self, rule, context):
        super().__init__(rule, context)
        self.seen: list[str] = []

    def visit_method_declaration(self, node):
        self.seen.append(node.child("name").text)
        self.add_violation(node, f"method {node.child('name').text}")
        self.generic_visit(node)


class ShallowVisitor(MethodNameVisitor):
    def visit_class_declaration(self, node):
        # Handler without generic_visit: nothing below the class is visited.
        self.seen.append(node.child("name").text)


def _context():
    return context_from_bytes(SOURCE, Path("Outer.java"))


def _method(ctx, name):
    return next(
        n for n in ctx.root.walk()
        if n.kind == "method_declaration" and n.child("name").text == name
    )


def test_dispatch_reaches_nested_declarations():
    ctx = _context()
    visitor = MethodNameVisitor(StubRule(), ctx)
    visitor.visit(ctx.root)
    assert visitor.seen == ["first", "inner", "none"]


def test_handler_controls_descent():
    ctx = _context()
    visitor = ShallowVisitor(StubRule(), ctx)
    visitor.visit(ctx.root)
    assert visitor.seen == ["Outer"]


def test_add_violation_records_location_and_snippet():
    ctx = _context()
    rule = StubRule()
    visitor = MethodNameVisitor(rule, ctx)
    visitor.visit(ctx.root)
    first = visitor.candidates[0]
    assert first.violation.rule is rule
    assert first.violation.line_number == 5
    assert first.violation.source_line == "int first() {"
    assert first.violation.message == "method first"
    assert first.node.kind == "method_declaration"


def test_file_level_violation_has_no_line():
    ctx = _context()
    visitor = Visitor(StubRule(), ctx)
    visitor.add_violation(None, "whole file")
    violation = visitor.candidates[0].violation
    assert violation.line_number is None
    assert violation.source_line is None


def test_collect_returns_stops_at_nested_callables():
    """Returns inside lambdas and local classes belong to those callables, not to first()."""
    ctx = _context()
    body = _method(ctx, "first").child("body")
    returns = collect_returns(body)
    assert [r.children[0].text for r in returns] == ["1", "4"]


def test_collect_returns_tolerates_missing_body():
    ctx = _context()
    assert _method(ctx, "none").child("body") is None
    assert collect_returns(None) == []


def test_exit_point_collector_other_kinds():
    ctx = _context()
    body = _method(ctx, "first").child("body")
    ifs = ExitPointCollector(("if_statement",)).collect(body)
    assert len(ifs) == 1


def test_rule_apply_uses_fresh_visitor_per_call():
    ctx = _context()

    class CountingRule(StubRule):
        def create_visitor(self, context):
            return MethodNameVisitor(self, context)

    rule = CountingRule()
    first = rule.apply(ctx)
    second = rule.apply(ctx)
    assert len(first) == len(second) == 3
    assert first is not second
