"""
Pydantic schemas for rule resolution.
"""

from datetime import date

from pydantic import BaseModel

from gl_rules.models.enums import RuleSetType, RuleType


class BookingClassification(BaseModel):
    """
    How a booking is classified. Any of the ids may be unknown.

    Supplied by the booking lookup service; treated as opaque input.
    """
    resource_id: int | None = None
    product_type_id: int | None = None
    product_sub_type_id: int | None = None

    model_config = {"frozen": True}


class ResolveRequest(BaseModel):
    """Which rule applies to this booking on this date?"""
    type: RuleSetType
    on_date: date
    booking: BookingClassification


class ResolveResponse(BaseModel):
    rule_set_id: int
    rule_id: int
    rule_type: RuleType
    target_id: int | None
    account_id: int
    account_name: str
    account_external_id: str
