"""
GL account API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gl_rules.api.errors import http_error
from gl_rules.models.base import get_db
from gl_rules.services.account_service import AccountService
from gl_rules.schemas.account import (
    AccountCreate,
    AccountUpdate,
    AccountResponse,
    ExternalIdCheckResponse,
)

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.get("", response_model=list[AccountResponse])
def list_accounts(db: Session = Depends(get_db)):
    """List active accounts by name."""
    return AccountService(db).list_accounts()


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    db: Session = Depends(get_db),
):
    """Create a GL account. The external ID must not be in use."""
    service = AccountService(db)
    try:
        account = service.create_account(request)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.get("/external-id-check", response_model=ExternalIdCheckResponse)
def check_external_id(
    external_id: str,
    exclude_id: int | None = None,
    db: Session = Depends(get_db),
):
    """Tell a form whether a ledger code is already taken."""
    exists = AccountService(db).external_id_exists(external_id, exclude_id)
    return ExternalIdCheckResponse(external_id=external_id, exists=exists)


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    db: Session = Depends(get_db),
):
    try:
        return AccountService(db).get_account(account_id)
    except ValueError as e:
        raise http_error(e)


@router.patch("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: int,
    request: AccountUpdate,
    db: Session = Depends(get_db),
):
    service = AccountService(db)
    try:
        account = service.update_account(account_id, request)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.delete("/{account_id}", response_model=AccountResponse)
def delete_account(
    account_id: int,
    db: Session = Depends(get_db),
):
    """Soft-delete an account."""
    service = AccountService(db)
    try:
        account = service.delete_account(account_id)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise http_error(e)
