"""
Account service: manages GL accounts.

Accounts are soft-deleted only. The external_id (ledger code)
must be unique among active accounts; a deleted account's code
may be reused.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from gl_rules.exceptions import DuplicateExternalIdError, NotFoundError
from gl_rules.models.account import Account
from gl_rules.schemas.account import AccountCreate, AccountUpdate

logger = logging.getLogger(__name__)


class AccountService:
    """
    The service takes a database session as a constructor
    argument. The caller controls the transaction boundary.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_accounts(self) -> list[Account]:
        """All active accounts, by name."""
        accounts = self.db.execute(
            select(Account)
            .where(Account.deleted.is_(False))
            .order_by(Account.name)
        ).scalars().all()
        return list(accounts)

    def get_account(self, account_id: int) -> Account:
        """Get an active account by ID."""
        account = self.db.get(Account, account_id)
        if not account or account.deleted:
            raise NotFoundError(f"Account {account_id} not found")
        return account

    def external_id_exists(
        self, external_id: str, exclude_account_id: int | None = None
    ) -> bool:
        """Check whether an active account already uses this ledger code."""
        query = select(Account.id).where(
            Account.external_id == external_id.strip(),
            Account.deleted.is_(False),
        )
        if exclude_account_id is not None:
            query = query.where(Account.id != exclude_account_id)

        return self.db.execute(query.limit(1)).scalar_one_or_none() is not None

    def create_account(self, request: AccountCreate) -> Account:
        """
        Create a new GL account.

        Raises DuplicateExternalIdError if the code is taken.
        """
        if self.external_id_exists(request.external_id):
            raise DuplicateExternalIdError(
                f"External ID '{request.external_id}' is already in use"
            )

        account = Account(
            name=request.name,
            external_id=request.external_id,
        )
        self.db.add(account)
        self.db.flush()
        logger.info(
            "Created account %s (%s)", account.id, account.external_id
        )
        return account

    def update_account(self, account_id: int, request: AccountUpdate) -> Account:
        """Rename an account or change its ledger code."""
        account = self.get_account(account_id)

        if request.external_id is not None:
            if self.external_id_exists(request.external_id, account_id):
                raise DuplicateExternalIdError(
                    f"External ID '{request.external_id}' is already in use"
                )
            account.external_id = request.external_id

        if request.name is not None:
            account.name = request.name

        self.db.flush()
        logger.info("Updated account %s", account.id)
        return account

    def delete_account(self, account_id: int) -> Account:
        """Soft-delete an account."""
        account = self.get_account(account_id)
        account.deleted = True
        self.db.flush()
        logger.info("Deleted account %s (%s)", account.id, account.external_id)
        return account
