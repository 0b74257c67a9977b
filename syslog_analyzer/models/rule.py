"""
Pattern rule model.
"""

import uuid
from typing import Tuple

from pydantic import BaseModel, Field, ConfigDict, field_validator

from syslog_analyzer.models.log_entry import Category, Severity


def new_rule_id(prefix: str = "rule") -> str:
    """Generate a rule identifier."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class Rule(BaseModel):
    """
    A named pattern with an override classification.

    Rules are immutable; editing a rule means replacing it. Their position
    in a sequence is their evaluation priority.
    """

    id: str = Field(
        default_factory=new_rule_id,
        description="Unique rule identifier"
    )
    name: str = Field(
        description="Human-readable rule name"
    )
    description: str = Field(
        default="",
        description="What the rule detects"
    )
    pattern: str = Field(
        description="Regular expression or plain substring"
    )
    is_regex: bool = Field(
        default=True,
        alias="isRegex",
        description="Treat pattern as a case-insensitive regular expression"
    )
    category: Category = Field(
        description="Category assigned on match"
    )
    severity: Severity = Field(
        description="Severity assigned on match"
    )
    enabled: bool = Field(
        default=True,
        description="Disabled rules are never evaluated"
    )
    preset: bool = Field(
        default=False,
        description="Loaded from the built-in catalogue (informational)"
    )

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )

    @field_validator("severity")
    @classmethod
    def _rules_cannot_assign_normal(cls, value: Severity) -> Severity:
        if value == Severity.NORMAL:
            raise ValueError("rule severity must be critical, warning or info")
        return value

    @property
    def explanation(self) -> str:
        """Text attached to entries this rule matches."""
        return f"Matched rule: {self.name} - {self.description}"


# Immutable ordered view of the rule list, handed out per evaluation
RuleSnapshot = Tuple[Rule, ...]
