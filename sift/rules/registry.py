# Rule registry: maps rule names to Rule classes so configuration can refer to rules by name.

from __future__ import annotations

from typing import Any, TypeVar

from sift.errors import ConfigurationError
from sift.rules.base import Rule

R = TypeVar("R", bound=type[Rule])

_REGISTRY: dict[str, type[Rule]] = {}


def register_rule(rule_class: R) -> R:
    """Class decorator: make rule_class available under its name."""
    name = rule_class.name
    existing = _REGISTRY.get(name)
    if existing is not None and existing is not rule_class:
        raise ConfigurationError(f"Duplicate rule name {name!r}: {existing.__name__} and {rule_class.__name__}")
    _REGISTRY[name] = rule_class
    return rule_class


def get_rule_class(name: str) -> type[Rule]:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise ConfigurationError(f"Unknown rule {name!r}; known rules: {', '.join(available_rule_names())}") from None


def create_rule(name: str, **properties: Any) -> Rule:
    """Instantiate the rule registered under name with property overrides."""
    return get_rule_class(name)(**properties)


def available_rule_names() -> list[str]:
    """Registered rule names, in registration order."""
    return list(_REGISTRY)
