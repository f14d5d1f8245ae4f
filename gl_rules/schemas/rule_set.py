"""
Pydantic schemas for rule set operations.

Date order (start before end) is checked by the RuleSetService,
not here, so the API reports it the same way as an overlap.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from gl_rules.models.enums import RuleSetType


class RuleSetCreate(BaseModel):
    """Request to create a rule set, optionally seeded from another one."""
    name: str = Field(min_length=1, max_length=255)
    start_date: date
    end_date: date
    type: RuleSetType = RuleSetType.REVENUE
    copy_from_rule_set_id: int | None = None


class RuleSetUpdate(BaseModel):
    """
    Change a rule set's name or dates.

    The type is fixed once created; sending it is rejected.
    """
    name: str | None = Field(default=None, min_length=1, max_length=255)
    start_date: date | None = None
    end_date: date | None = None

    model_config = {"extra": "forbid"}


class RuleSetResponse(BaseModel):
    id: int
    name: str
    start_date: date
    end_date: date
    type: RuleSetType
    deleted: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class OverlapCheckRequest(BaseModel):
    type: RuleSetType
    start_date: date
    end_date: date
    exclude_id: int | None = None


class OverlapCheckResponse(BaseModel):
    has_overlap: bool
    conflicting_rule_set_ids: list[int]


class DefaultDatesResponse(BaseModel):
    start_date: date
    end_date: date
