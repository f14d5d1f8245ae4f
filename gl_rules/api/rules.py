"""
GL rule endpoints that address a rule directly by id,
plus rule resolution for a booking.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gl_rules.api.errors import http_error
from gl_rules.api.rule_sets import rule_response
from gl_rules.models.base import get_db
from gl_rules.services.rule_service import RuleService
from gl_rules.services.rule_set_service import RuleSetService
from gl_rules.schemas.resolution import ResolveRequest, ResolveResponse
from gl_rules.schemas.rule import RuleResponse, RuleUpdate

router = APIRouter(tags=["Rules"])


@router.get("/rules/{rule_id}", response_model=RuleResponse)
def get_rule(
    rule_id: int,
    db: Session = Depends(get_db),
):
    try:
        return rule_response(RuleService(db).get_rule(rule_id))
    except ValueError as e:
        raise http_error(e)


@router.patch("/rules/{rule_id}", response_model=RuleResponse)
def update_rule(
    rule_id: int,
    request: RuleUpdate,
    db: Session = Depends(get_db),
):
    service = RuleService(db)
    try:
        rule = service.update_rule(rule_id, request)
        db.commit()
        return rule_response(rule)
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.delete("/rules/{rule_id}", response_model=RuleResponse)
def delete_rule(
    rule_id: int,
    db: Session = Depends(get_db),
):
    """Soft-delete a rule. The only default rule of a set cannot be deleted."""
    service = RuleService(db)
    try:
        rule = service.delete_rule(rule_id)
        db.commit()
        return rule_response(rule)
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.post("/resolve", response_model=ResolveResponse)
def resolve(
    request: ResolveRequest,
    db: Session = Depends(get_db),
):
    """
    Find the GL account for a booking on a given date.

    Returns 404 when no rule set of the type is active on that
    date, and 409 when the active rule set has no default rule
    to fall back on.
    """
    service = RuleSetService(db)
    try:
        rule_set, rule = service.resolve(
            request.type, request.on_date, request.booking
        )
    except ValueError as e:
        raise http_error(e)

    return ResolveResponse(
        rule_set_id=rule_set.id,
        rule_id=rule.id,
        rule_type=rule.rule_type,
        target_id=rule.target_id,
        account_id=rule.account_id,
        account_name=rule.account.name,
        account_external_id=rule.account.external_id,
    )
