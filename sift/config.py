from __future__ import annotations

"""
Configuration: which rules are enabled, their properties, and report settings.

The engine treats Config as an opaque object handed to it: an ordered list of
Rule instances (order = detection order), the report-time max_priority
threshold, the worker count and the rule description bundle. Property
overrides use the "RuleName.property=value" form, validated with pydantic.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sift.errors import ConfigurationError, require
from sift.rules.base import MAX_PRIORITY, MIN_PRIORITY, Rule
from sift.rules.descriptions import DEFAULT_DESCRIPTIONS
from sift.rules.registry import available_rule_names, create_rule

# Importing the rule modules registers them.
from sift.rules import boolean_method_returns_null  # noqa: F401
from sift.rules import duplicate_import  # noqa: F401
from sift.rules import finally_block  # noqa: F401
from sift.rules import unnecessary_boolean_instantiation  # noqa: F401

DEFAULT_MAX_PRIORITY = 3


@dataclass
class Config:
    """Scanner configuration: rules in detection order plus report settings."""

    rules: Sequence[Rule] = field(default_factory=list)
    max_priority: int = DEFAULT_MAX_PRIORITY
    workers: int = 1
    descriptions: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_DESCRIPTIONS))


class RuleProperties(BaseModel):
    """Validated property overrides for one rule."""

    model_config = ConfigDict(extra="forbid")

    priority: Optional[int] = Field(None, ge=MIN_PRIORITY, le=MAX_PRIORITY)
    enabled: Optional[bool] = None
    description: Optional[str] = None
    apply_to_file_names: Optional[str] = None
    do_not_apply_to_file_names: Optional[str] = None
    apply_to_class_names: Optional[str] = None
    do_not_apply_to_class_names: Optional[str] = None


def get_default_config() -> Config:
    """Return the default configuration with every registered rule, in registration order."""
    return Config(rules=[create_rule(name) for name in available_rule_names()])


def get_enabled_rules(config: Config | None = None) -> Sequence[Rule]:
    """Return the enabled rules from the given config (or the default config), in order."""
    if config is None:
        config = get_default_config()
    return [r for r in config.rules if r.enabled]


def select_rules(config: Config, names: Iterable[str]) -> Config:
    """Keep only the named rules, preserving configured order."""
    wanted = list(names)
    known = {r.name for r in config.rules}
    unknown = [n for n in wanted if n not in known]
    if unknown:
        raise ConfigurationError(f"Unknown rule(s): {', '.join(unknown)}")
    config.rules = [r for r in config.rules if r.name in wanted]
    return config


def validate_config(config: Config) -> Config:
    """
    Check the whole configuration before any analysis starts.

    Raises:
        MissingRequiredInput: config is None.
        ConfigurationError: bad max_priority, worker count, or rule property.
    """
    require(config, "config")
    if not MIN_PRIORITY <= config.max_priority <= MAX_PRIORITY:
        raise ConfigurationError(
            f"max_priority must be within {MIN_PRIORITY}..{MAX_PRIORITY}, got {config.max_priority}"
        )
    if config.workers < 1:
        raise ConfigurationError(f"workers must be at least 1, got {config.workers}")
    names = [r.name for r in config.rules]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigurationError(f"Duplicate rule name(s): {', '.join(duplicates)}")
    for rule in config.rules:
        rule.validate()
    return config


def parse_property_overrides(assignments: Iterable[str]) -> dict[str, dict[str, str]]:
    """
    Parse "RuleName.property=value" strings into {rule: {property: value}}.

    Raises:
        ConfigurationError: an assignment is not of that form.
    """
    overrides: dict[str, dict[str, str]] = {}
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        rule_name, dot, prop = key.strip().partition(".")
        if not sep or not dot or not rule_name or not prop:
            raise ConfigurationError(f"Expected RuleName.property=value, got {assignment!r}")
        overrides.setdefault(rule_name, {})[prop] = value.strip()
    return overrides


def configure_rules(config: Config, overrides: Mapping[str, Mapping[str, Any]]) -> Config:
    """
    Apply property overrides to the configured rules.

    Raises:
        ConfigurationError: unknown rule, unknown property, or invalid value.
    """
    by_name = {r.name: r for r in config.rules}
    for rule_name, properties in overrides.items():
        rule = by_name.get(rule_name)
        if rule is None:
            raise ConfigurationError(f"Cannot configure unknown rule {rule_name!r}")
        try:
            validated = RuleProperties.model_validate(dict(properties))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid properties for rule {rule_name}: {e}") from e
        for prop, value in validated.model_dump(exclude_unset=True).items():
            setattr(rule, prop, value)
        rule.validate()
    return config
