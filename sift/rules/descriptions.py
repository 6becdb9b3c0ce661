# Default rule descriptions, looked up by rule name when a rule has no explicit description.

from __future__ import annotations

from typing import Mapping, Optional

DEFAULT_DESCRIPTIONS: dict[str, str] = {
    "BooleanMethodReturnsNull": (
        "Method with Boolean return type returns explicit null. A method that returns either "
        "Boolean.TRUE, Boolean.FALSE or null is an accident waiting to happen: a caller may "
        "treat the result as a primitive boolean, and unboxing null throws a NullPointerException."
    ),
    "ReturnFromFinallyBlock": (
        "Returning from a finally block is confusing and can hide the original exception."
    ),
    "ThrowExceptionFromFinallyBlock": (
        "Throwing an exception from a finally block is confusing and can hide the original exception."
    ),
    "DuplicateImport": "Duplicate import statements are unnecessary.",
    "UnnecessaryBooleanInstantiation": (
        "Use Boolean.valueOf() for variable values or Boolean.TRUE and Boolean.FALSE for constant "
        "values instead of calling the Boolean() constructor directly or calling "
        "Boolean.valueOf(true) or Boolean.valueOf(false)."
    ),
    "ParseFailure": "The source file could not be parsed, so no other rule was applied to it.",
}

FALLBACK_DESCRIPTION = "No description provided for rule named [{name}]"


def resolve_description(
    name: str,
    explicit: Optional[str] = None,
    descriptions: Optional[Mapping[str, str]] = None,
) -> str:
    """Explicit rule description, then the descriptions bundle, then the generic fallback."""
    if explicit:
        return explicit
    bundle = DEFAULT_DESCRIPTIONS if descriptions is None else descriptions
    found = bundle.get(name)
    if found:
        return found
    return FALLBACK_DESCRIPTION.format(name=name)
