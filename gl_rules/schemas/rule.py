"""
Pydantic schemas for GL rule operations.
"""

from datetime import datetime

from pydantic import BaseModel, model_validator

from gl_rules.models.enums import RuleType


class RuleCreate(BaseModel):
    """
    A rule to add to a rule set.

    Default rules have no target. Every other rule type needs one.
    """
    rule_type: RuleType
    target_id: int | None = None
    account_id: int

    @model_validator(mode="after")
    def target_matches_rule_type(self) -> "RuleCreate":
        if self.rule_type == RuleType.DEFAULT and self.target_id is not None:
            raise ValueError("default rules must not have a target_id")
        if self.rule_type != RuleType.DEFAULT and self.target_id is None:
            raise ValueError(f"{self.rule_type.value} rules require a target_id")
        return self


class RuleUpdate(BaseModel):
    """
    Partial update of a rule.

    The merged result is validated by the RuleService, since only
    it knows the rule's current values.
    """
    rule_type: RuleType | None = None
    target_id: int | None = None
    account_id: int | None = None


class RuleResponse(BaseModel):
    id: int
    gl_rule_set_id: int
    rule_type: RuleType
    target_id: int | None
    account_id: int
    deleted: bool
    created_at: datetime
    updated_at: datetime
    account_name: str | None = None
    account_external_id: str | None = None
    target_name: str | None = None

    model_config = {"from_attributes": True}


class CopyRulesRequest(BaseModel):
    source_rule_set_id: int


class DuplicateTarget(BaseModel):
    rule_type: RuleType
    target_id: int


class IntegrityResponse(BaseModel):
    rule_set_id: int
    has_default_rule: bool
    default_rule_count: int
    duplicate_targets: list[DuplicateTarget]
    is_valid: bool
