"""
Rule set API endpoints, including the rules nested under a rule set.

The API layer is thin: it handles HTTP concerns and delegates
all business logic to the RuleSetService and RuleService.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from gl_rules.api.errors import http_error
from gl_rules.models.base import get_db
from gl_rules.models.enums import RuleSetType
from gl_rules.services.default_dates import TimelineGap
from gl_rules.services.overlap import validate_date_range
from gl_rules.services.resolver import (
    check_rule_set_integrity,
    sort_rules_for_display,
    target_display_name,
)
from gl_rules.services.rule_service import RuleService
from gl_rules.services.rule_set_service import RuleSetService
from gl_rules.schemas.rule import (
    CopyRulesRequest,
    DuplicateTarget,
    IntegrityResponse,
    RuleCreate,
    RuleResponse,
)
from gl_rules.schemas.rule_set import (
    DefaultDatesResponse,
    OverlapCheckRequest,
    OverlapCheckResponse,
    RuleSetCreate,
    RuleSetResponse,
    RuleSetUpdate,
)

router = APIRouter(prefix="/rule-sets", tags=["Rule Sets"])


def rule_response(rule) -> RuleResponse:
    response = RuleResponse.model_validate(rule)
    response.target_name = target_display_name(rule)
    return response


@router.get("", response_model=list[RuleSetResponse])
def list_rule_sets(
    type: RuleSetType | None = None,
    db: Session = Depends(get_db),
):
    """List active rule sets, earliest first."""
    return RuleSetService(db).list_rule_sets(type)


@router.post("", response_model=RuleSetResponse, status_code=201)
def create_rule_set(
    request: RuleSetCreate,
    db: Session = Depends(get_db),
):
    """
    Create a rule set.

    The dates must not overlap another rule set of the same type.
    When copy_from_rule_set_id is set, that rule set's rules are
    copied into the new one in the same transaction.
    """
    service = RuleSetService(db)
    try:
        rule_set = service.create_rule_set(request)
        db.commit()
        return rule_set
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.post("/overlap-check", response_model=OverlapCheckResponse)
def check_overlap(
    request: OverlapCheckRequest,
    db: Session = Depends(get_db),
):
    """Would this date range collide with a rule set of the same type?"""
    try:
        validate_date_range(request.start_date, request.end_date)
    except ValueError as e:
        raise http_error(e)

    conflicts = RuleSetService(db).check_overlap(
        request.type, request.start_date, request.end_date, request.exclude_id
    )
    return OverlapCheckResponse(
        has_overlap=bool(conflicts),
        conflicting_rule_set_ids=[rs.id for rs in conflicts],
    )


@router.get("/default-dates", response_model=DefaultDatesResponse)
def get_default_dates(
    type: RuleSetType = RuleSetType.REVENUE,
    gap_start: date | None = None,
    gap_end: date | None = None,
    today: date | None = None,
    db: Session = Depends(get_db),
):
    """Suggest dates for a new rule set, optionally inside a selected gap."""
    if (gap_start is None) != (gap_end is None):
        raise HTTPException(
            status_code=400,
            detail="gap_start and gap_end must be given together",
        )
    if gap_start is not None and gap_start > gap_end:
        raise HTTPException(
            status_code=400,
            detail="gap_start must not be after gap_end",
        )

    gap = None
    if gap_start is not None:
        gap = TimelineGap(start=gap_start, end=gap_end)

    dates = RuleSetService(db).default_dates(type, gap, today)
    return DefaultDatesResponse(
        start_date=dates.start_date, end_date=dates.end_date
    )


@router.get("/{rule_set_id}", response_model=RuleSetResponse)
def get_rule_set(
    rule_set_id: int,
    db: Session = Depends(get_db),
):
    try:
        return RuleSetService(db).get_rule_set(rule_set_id)
    except ValueError as e:
        raise http_error(e)


@router.patch("/{rule_set_id}", response_model=RuleSetResponse)
def update_rule_set(
    rule_set_id: int,
    request: RuleSetUpdate,
    db: Session = Depends(get_db),
):
    """Rename a rule set or move its dates."""
    service = RuleSetService(db)
    try:
        rule_set = service.update_rule_set(rule_set_id, request)
        db.commit()
        return rule_set
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.delete("/{rule_set_id}", response_model=RuleSetResponse)
def delete_rule_set(
    rule_set_id: int,
    db: Session = Depends(get_db),
):
    """Soft-delete a rule set and its rules."""
    service = RuleSetService(db)
    try:
        rule_set = service.delete_rule_set(rule_set_id)
        db.commit()
        return rule_set
    except ValueError as e:
        db.rollback()
        raise http_error(e)


# --- Rules within a rule set ---

@router.get("/{rule_set_id}/rules", response_model=list[RuleResponse])
def list_rules(
    rule_set_id: int,
    db: Session = Depends(get_db),
):
    """Rules in display order: by priority, then by target name."""
    try:
        rules = RuleService(db).list_rules(rule_set_id)
    except ValueError as e:
        raise http_error(e)
    return [rule_response(rule) for rule in sort_rules_for_display(rules)]


@router.post(
    "/{rule_set_id}/rules",
    response_model=RuleResponse,
    status_code=201,
)
def create_rule(
    rule_set_id: int,
    request: RuleCreate,
    db: Session = Depends(get_db),
):
    service = RuleService(db)
    try:
        rule = service.create_rule(rule_set_id, request)
        db.commit()
        return rule_response(rule)
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.post(
    "/{rule_set_id}/copy-rules",
    response_model=list[RuleResponse],
    status_code=201,
)
def copy_rules(
    rule_set_id: int,
    request: CopyRulesRequest,
    db: Session = Depends(get_db),
):
    """Copy every active rule of another rule set into this one."""
    service = RuleService(db)
    try:
        rules = service.copy_rules(request.source_rule_set_id, rule_set_id)
        db.commit()
        return [rule_response(rule) for rule in rules]
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.get("/{rule_set_id}/integrity", response_model=IntegrityResponse)
def get_integrity(
    rule_set_id: int,
    db: Session = Depends(get_db),
):
    """Report whether the rule set has exactly one default and no repeated targets."""
    try:
        rules = RuleService(db).list_rules(rule_set_id)
    except ValueError as e:
        raise http_error(e)

    report = check_rule_set_integrity(rules)
    return IntegrityResponse(
        rule_set_id=rule_set_id,
        has_default_rule=report.has_default_rule,
        default_rule_count=report.default_rule_count,
        duplicate_targets=[
            DuplicateTarget(rule_type=rule_type, target_id=target_id)
            for rule_type, target_id in report.duplicate_targets
        ],
        is_valid=report.is_valid,
    )
