# Rule interface (abstract base class): defines the contract all rules must implement.
# Concrete rules (boolean_method_returns_null, duplicate_import, etc.) subclass
# AstVisitorRule and supply a Visitor subclass.

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sift.errors import ConfigurationError
from sift.suppression import WildcardPattern, rule_applies_to

if TYPE_CHECKING:
    from sift.context import FileContext
    from sift.visitor import Candidate, Visitor

MIN_PRIORITY = 1
MAX_PRIORITY = 4

FILTER_PROPERTIES = (
    "apply_to_file_names",
    "do_not_apply_to_file_names",
    "apply_to_class_names",
    "do_not_apply_to_class_names",
)

CONFIGURABLE_PROPERTIES = frozenset({"priority", "enabled", "description", *FILTER_PROPERTIES})


class Rule(ABC):
    """
    Abstract base class for all static analysis rules.

    Subclasses define:
    - name: str, the unique rule identifier (e.g. "BooleanMethodReturnsNull")
    - priority: int, 1 (most severe) to 4
    - create_visitor(context) -> Visitor, a fresh visitor for one file

    Rules are stateless factories: the Analyzer calls create_visitor() once per
    file and never reuses a visitor, so concurrent files never share state.
    Property values may be overridden per instance through keyword arguments.
    """

    name: str
    priority: int = 2
    enabled: bool = True
    description: Optional[str] = None
    apply_to_file_names: Optional[str] = None
    do_not_apply_to_file_names: Optional[str] = None
    apply_to_class_names: Optional[str] = None
    do_not_apply_to_class_names: Optional[str] = None

    def __init__(self, **properties: Any) -> None:
        for key, value in properties.items():
            if key not in CONFIGURABLE_PROPERTIES:
                raise ConfigurationError(f"Unknown property {key!r} for rule {self.name}")
            setattr(self, key, value)

    @abstractmethod
    def create_visitor(self, context: FileContext) -> Visitor:
        """Return a new Visitor bound to this rule and one file's context."""
        ...

    def validate(self) -> None:
        """
        Check the configured property values.

        Raises:
            ConfigurationError: priority outside 1..4 or a malformed name filter.
        """
        if isinstance(self.priority, bool) or not isinstance(self.priority, int):
            raise ConfigurationError(f"Rule {self.name}: priority must be an integer, got {self.priority!r}")
        if not MIN_PRIORITY <= self.priority <= MAX_PRIORITY:
            raise ConfigurationError(
                f"Rule {self.name}: priority {self.priority} is outside {MIN_PRIORITY}..{MAX_PRIORITY}"
            )
        for prop in FILTER_PROPERTIES:
            value = getattr(self, prop)
            if value is not None:
                WildcardPattern(value)

    def applies_to(self, context: FileContext) -> bool:
        return rule_applies_to(self, context)

    def apply(self, context: FileContext) -> list[Candidate]:
        """Run a fresh visitor over the file's AST and return its candidates."""
        visitor = self.create_visitor(context)
        visitor.visit(context.root)
        return visitor.candidates

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, priority={self.priority})"


class AstVisitorRule(Rule):
    """A rule whose detection logic lives entirely in its visitor_class."""

    visitor_class: ClassVar[type]

    def create_visitor(self, context: FileContext) -> Visitor:
        return self.visitor_class(self, context)
