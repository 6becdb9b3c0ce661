"""Unit tests for the BooleanMethodReturnsNull rule."""

from pathlib import Path

from sift.context import context_from_bytes
from sift.rules.boolean_method_returns_null import (
    BooleanMethodReturnsNullRule,
    is_boolean_expression,
    is_null_return,
)


def _run_rule(source: bytes, path: Path | None = None) -> list:
    """Parse source, build context, run BooleanMethodReturnsNullRule, return violations."""
    if path is None:
        path = Path("Test.java")
    ctx = context_from_bytes(source, path)
    rule = BooleanMethodReturnsNullRule()
    return [c.violation for c in rule.apply(ctx)]


def _first_return_value(source: bytes):
    ctx = context_from_bytes(source, Path("Test.java"))
    ret = next(n for n in ctx.root.walk() if n.kind == "return_statement")
    return ret.children[0] if ret.children else None


def test_declared_boxed_boolean_returning_null():
    """A method declared to return Boolean with `return null` yields exactly one violation."""
    source = b"""
class Foo {
    Boolean check() {
        return null;
    }
}
"""
    violations = _run_rule(source)
    assert len(violations) == 1
    assert violations[0].rule.name == "BooleanMethodReturnsNull"
    assert violations[0].line_number == 4
    assert violations[0].source_line == "return null;"
    assert "check" in violations[0].message


def test_declared_primitive_boolean_returning_null():
    source = b"class Foo { boolean check() { return null; } }"
    assert len(_run_rule(source)) == 1


def test_inferred_boolean_method_returning_null():
    """No boolean return type, but a `return true` classifies the method; the null return is flagged."""
    source = b"""
class Foo {
    Object check(boolean x) {
        if (x) return true;
        else return null;
    }
}
"""
    violations = _run_rule(source)
    assert len(violations) == 1
    assert violations[0].line_number == 5


def test_inferred_from_comparison():
    source = b"""
class Foo {
    Object check(int x) {
        if (x > 1) {
            return x == 2;
        }
        return null;
    }
}
"""
    assert len(_run_rule(source)) == 1


def test_inferred_from_boolean_constant():
    source = b"""
class Foo {
    Object check(boolean flag) {
        if (flag) return Boolean.TRUE;
        return null;
    }
}
"""
    assert len(_run_rule(source)) == 1


def test_non_boolean_reference_returning_null_not_flagged():
    """A method returning a nullable non-boolean reference is never flagged."""
    source = b"""
class Foo {
    String name() {
        return null;
    }
    Object other(boolean x) {
        if (x) return "yes";
        return null;
    }
}
"""
    assert _run_rule(source) == []


def test_boolean_method_returning_plain_reference_not_flagged():
    source = b"""
class Foo {
    Boolean check(Object o) {
        return (Boolean) o;
    }
}
"""
    assert _run_rule(source) == []


def test_lambda_casting_null_to_boolean():
    """A lambda returning (Boolean) null is flagged once, independent of the enclosing method."""
    source = b"""
import java.util.function.Supplier;

class Foo {
    Object make() {
        Supplier<Boolean> supplier = () -> {
            return (Boolean) null;
        };
        return supplier;
    }
}
"""
    violations = _run_rule(source)
    assert len(violations) == 1
    assert violations[0].line_number == 7
    assert "Lambda" in violations[0].message


def test_lambda_null_not_attributed_to_boolean_method():
    """A null returned by a nested lambda is not a null return of the enclosing Boolean method."""
    source = b"""
import java.util.function.Supplier;

class Foo {
    Boolean check() {
        Supplier<String> s = () -> {
            return null;
        };
        return s.get() != null;
    }
}
"""
    assert _run_rule(source) == []


def test_expression_lambda_not_boolean():
    source = b"""
import java.util.function.Function;

class Foo {
    Function<String, String> f = s -> null;
}
"""
    assert _run_rule(source) == []


def test_method_in_anonymous_class_analyzed_separately():
    source = b"""
class Foo {
    Object make() {
        return new Object() {
            Boolean inner() {
                return null;
            }
        };
    }
}
"""
    violations = _run_rule(source)
    assert len(violations) == 1
    assert "inner" in violations[0].message


def test_abstract_and_interface_methods_have_no_body():
    """Methods without a body contribute no violations and do not raise."""
    source = b"""
abstract class Base {
    abstract Boolean check();
}

interface Checker {
    Boolean check(String s);
}
"""
    assert _run_rule(source) == []


def test_two_null_returns_on_one_line_are_two_violations():
    """Duplicate matches on the same line are kept as distinct violations."""
    source = b"""
class Foo {
    Boolean check(boolean x) {
        if (x) return null; return (Boolean) null;
    }
}
"""
    violations = _run_rule(source)
    assert len(violations) == 2
    assert violations[0].line_number == violations[1].line_number == 4
    assert violations[0] is not violations[1]


def test_parenthesized_null_is_flagged():
    source = b"class Foo { Boolean check() { return (null); } }"
    assert len(_run_rule(source)) == 1


def test_is_boolean_expression_helpers():
    assert is_boolean_expression(_first_return_value(b"class A { Object m(Object o) { return o instanceof String; } }"))
    assert is_boolean_expression(_first_return_value(b"class A { Object m(boolean b) { return !b; } }"))
    assert is_boolean_expression(_first_return_value(b"class A { Object m(Object o) { return (boolean) o; } }"))
    assert not is_boolean_expression(_first_return_value(b"class A { Object m(int a) { return a + 1; } }"))
    assert not is_boolean_expression(None)


def test_is_null_return_helpers():
    assert is_null_return(None)
    assert is_null_return(_first_return_value(b"class A { Object m() { return null; } }"))
    assert is_null_return(_first_return_value(b"class A { Object m() { return (java.lang.Boolean) null; } }"))
    assert not is_null_return(_first_return_value(b"class A { Object m() { return (String) null; } }"))
    assert not is_null_return(_first_return_value(b"class A { Object m(Object o) { return o; } }"))
