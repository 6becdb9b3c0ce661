# Pydantic data models for rule violations.

from typing import Optional

from pydantic import BaseModel, Field

from sift.rules.base import Rule


class Violation(BaseModel):
    """
    A single rule match at one location (e.g. BooleanMethodReturnsNull at line 42).

    Immutable once built. Two violations with identical content are still two
    records; nothing in the pipeline deduplicates them. line_number is None for
    class- or file-level violations.
    """

    rule: Rule
    line_number: Optional[int] = Field(None, ge=1, description="1-based line number")
    source_line: Optional[str] = None
    message: Optional[str] = None

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    @property
    def priority(self) -> int:
        return self.rule.priority

    @property
    def rule_name(self) -> str:
        return self.rule.name
